"""Pydantic request/response schemas."""

from app.schemas.report import Coordinates, MediaInfo, Report, ReportDraft, ReportList
from app.schemas.inbound import InboundMessage
from app.schemas.ws_messages import WSMessage

__all__ = [
    "Coordinates", "MediaInfo", "Report", "ReportDraft", "ReportList",
    "InboundMessage",
    "WSMessage",
]
