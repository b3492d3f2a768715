"""Central router that includes all sub-routers."""

from fastapi import APIRouter

from app.api.webhook import router as webhook_router
from app.api.reports import router as reports_router
from app.api.websocket import router as websocket_router

api_router = APIRouter()
api_router.include_router(webhook_router)
api_router.include_router(reports_router)
api_router.include_router(websocket_router)
