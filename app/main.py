"""FastAPI application entry point."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from app.api.router import api_router
from app.dependencies import (
    get_geocoder,
    get_media_store,
    get_report_store,
    get_settings_dep,
)
from app.services.media_store import MEDIA_URL_PREFIX
from app.services.report_store import ReportStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings_dep()
    if not (settings.twilio_account_sid and settings.twilio_auth_token and settings.twilio_phone_number):
        logger.warning(
            "Please set TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and TWILIO_PHONE_NUMBER in .env"
        )

    get_media_store().ensure_dir()
    get_report_store().load()

    logger.info("Webhook: POST /api/twilio/incoming-sms")
    logger.info("Media directory: %s", settings.storage.media_dir)
    if settings.twilio_webhook_url:
        logger.info("Using TWILIO_WEBHOOK_URL for validation: %s", settings.twilio_webhook_url)
    yield
    await get_geocoder().aclose()
    await get_media_store().aclose()


app = FastAPI(
    title="OceanSaksham",
    description="Coastal hazard reports over SMS and WhatsApp, with a live dashboard.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info("%s %s %d %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


# API routes
app.include_router(api_router)

# Downloaded media, served as-is
app.mount(
    MEDIA_URL_PREFIX,
    StaticFiles(directory=get_settings_dep().storage.media_dir, check_dir=False),
    name="media",
)

_static_dir = Path(__file__).parent / "static"


@app.get("/health")
async def health(store: ReportStore = Depends(get_report_store)):
    return {"status": "ok", "reports": len(store)}


@app.get("/")
async def dashboard_page():
    return FileResponse(str(_static_dir / "index.html"))
