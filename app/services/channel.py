"""Inbound sender classification: WhatsApp vs plain SMS."""

from __future__ import annotations

from dataclasses import dataclass

WHATSAPP_PREFIX = "whatsapp:"


@dataclass(frozen=True)
class ChannelInfo:
    is_whatsapp: bool
    clean_number: str
    channel: str  # whatsapp | sms


def get_channel_info(from_number: str | None) -> ChannelInfo:
    """Detect the channel from Twilio's ``From`` address and strip its prefix."""
    number = from_number or ""
    if number.startswith(WHATSAPP_PREFIX):
        return ChannelInfo(True, number[len(WHATSAPP_PREFIX):], "whatsapp")
    return ChannelInfo(False, number, "sms")


def strip_whatsapp_prefix(number: str) -> str:
    return number.replace(WHATSAPP_PREFIX, "")


def ensure_whatsapp_prefix(number: str) -> str:
    return WHATSAPP_PREFIX + strip_whatsapp_prefix(number)
