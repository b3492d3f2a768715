"""Twilio webhook signature validation.

The signature covers the callback URL plus the POSTed parameters, so the
parameters are decoded from the raw request body rather than from any
re-encoded form.
"""

from __future__ import annotations

import logging
from typing import Mapping
from urllib.parse import parse_qsl

from fastapi import Request
from twilio.request_validator import RequestValidator

from app.config import Settings

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Twilio-Signature"


def params_from_body(raw_body: bytes) -> dict[str, str]:
    if not raw_body:
        return {}
    return dict(parse_qsl(raw_body.decode("utf-8", errors="replace"), keep_blank_values=True))


def validation_url(request: Request, settings: Settings) -> str:
    return settings.twilio_webhook_url or str(request.url)


def is_valid_signature(
    auth_token: str, signature: str, url: str, params: Mapping[str, str]
) -> bool:
    return RequestValidator(auth_token).validate(url, dict(params), signature)


def compute_signature(auth_token: str, url: str, params: Mapping[str, str]) -> str:
    return RequestValidator(auth_token).compute_signature(url, dict(params))


async def validate_twilio_request(request: Request, settings: Settings) -> bool:
    """Return True when the request carries a valid Twilio signature.

    With no auth token configured the check is skipped (development mode).
    """
    if not settings.twilio_auth_token:
        logger.warning("TWILIO_AUTH_TOKEN not set, skipping Twilio validation (insecure).")
        return True

    signature = request.headers.get(SIGNATURE_HEADER, "")
    url = validation_url(request, settings)
    raw_body = await request.body()
    params = params_from_body(raw_body)

    valid = is_valid_signature(settings.twilio_auth_token, signature, url, params)
    if not valid:
        preview = raw_body[:300].decode("utf-8", errors="replace").replace("\n", " ")
        logger.error("Twilio validation FAILED!")
        logger.error(" - X-Twilio-Signature header: %s", signature)
        logger.error(" - Validation URL used: %s", url)
        logger.error(" - Raw body (first 300 chars): %s", preview)
    return valid
