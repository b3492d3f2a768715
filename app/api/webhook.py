from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, Response

from app.config import Settings
from app.dependencies import get_pipeline, get_settings_dep
from app.schemas import InboundMessage
from app.services.ingestion import IngestionPipeline
from app.services.twilio_auth import validate_twilio_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/twilio", tags=["twilio"])

EMPTY_TWIML = "<Response></Response>"
ERROR_TWIML = "<Response><Message>Error</Message></Response>"


@router.post("/incoming-sms")
async def incoming_sms(
    request: Request,
    settings: Settings = Depends(get_settings_dep),
    pipeline: IngestionPipeline = Depends(get_pipeline),
):
    """Twilio messaging webhook for both SMS and WhatsApp senders."""
    try:
        if not await validate_twilio_request(request, settings):
            return PlainTextResponse("Forbidden - invalid Twilio signature", status_code=403)

        form = await request.form()
        await pipeline.handle(InboundMessage.from_form(form))
    except Exception:
        logger.exception("Webhook error")
        return Response(content=ERROR_TWIML, status_code=500, media_type="text/xml")

    return Response(content=EMPTY_TWIML, media_type="text/xml")
