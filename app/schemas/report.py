from __future__ import annotations
from datetime import datetime
from typing import Literal
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

_CAMEL = {"alias_generator": to_camel, "populate_by_name": True}


class Coordinates(BaseModel):
    lat: float
    lon: float


class MediaInfo(BaseModel):
    filename: str
    filepath: str
    size: int
    content_type: str = ""
    url: str

    model_config = _CAMEL


class ReportDraft(BaseModel):
    """Everything known about a report before the store assigns its identity."""

    phone_number: str = ""
    message: str = ""
    hazard_type: str
    urgency: str
    location: str
    coordinates: Coordinates | None = None
    message_sid: str = ""
    source: Literal["whatsapp", "sms"] = "sms"
    status: str = "pending"
    has_media: bool = False
    media: MediaInfo | None = None

    model_config = _CAMEL


class Report(ReportDraft):
    id: str
    created_at: datetime


class ReportList(BaseModel):
    count: int
    reports: list[Report] = []
