"""Outbound confirmations over Twilio SMS or WhatsApp."""

from __future__ import annotations

import asyncio
import logging

from twilio.rest import Client

from app.config import DEFAULT_WHATSAPP_FROM, Settings
from app.schemas import Report
from app.services.channel import ensure_whatsapp_prefix, strip_whatsapp_prefix

logger = logging.getLogger(__name__)


def format_confirmation(report: Report) -> str:
    return (
        "✅ Report received!\n"
        f"Location: {report.location}\n"
        f"Type: {report.hazard_type}\n"
        f"Ref: {report.id}\n"
        "Authorities notified. Stay safe!\n"
        "- OceanSaksham"
    )


class ConfirmationSender:
    def __init__(self, settings: Settings, client: Client | None = None):
        self._settings = settings
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = Client(self._settings.twilio_account_sid, self._settings.twilio_auth_token)
        return self._client

    def addresses(self, to_number: str, channel: str) -> tuple[str, str]:
        """Return (from, to) formatted for the reply channel."""
        if channel == "whatsapp":
            return (
                self._settings.twilio_whatsapp_from or DEFAULT_WHATSAPP_FROM,
                ensure_whatsapp_prefix(to_number),
            )
        return self._settings.twilio_phone_number, strip_whatsapp_prefix(to_number)

    def _send(self, body: str, from_: str, to: str) -> str:
        msg = self.client.messages.create(body=body, from_=from_, to=to)
        return msg.sid

    async def send_confirmation(self, to_number: str, report: Report, channel: str) -> str | None:
        """Send the acknowledgement. Returns the Twilio message SID, or None."""
        if not self._settings.has_twilio_credentials:
            return None

        from_, to = self.addresses(to_number, channel)
        try:
            sid = await asyncio.to_thread(self._send, format_confirmation(report), from_, to)
        except Exception as e:
            logger.error("%s send error: %s", channel, e)
            return None
        logger.info("Sent %s confirmation: %s", channel, sid)
        return sid
