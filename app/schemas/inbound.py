from __future__ import annotations
from typing import Any, Mapping
from pydantic import BaseModel, Field, field_validator


class InboundMessage(BaseModel):
    """Form fields Twilio posts to the messaging webhook.

    Only the first media attachment is considered; absent fields stay None.
    """

    from_number: str | None = Field(default=None, alias="From")
    body: str | None = Field(default=None, alias="Body")
    message_sid: str | None = Field(default=None, alias="MessageSid")
    num_media: int = Field(default=0, alias="NumMedia")
    media_url: str | None = Field(default=None, alias="MediaUrl0")
    media_content_type: str | None = Field(default=None, alias="MediaContentType0")

    model_config = {"populate_by_name": True}

    @field_validator("num_media", mode="before")
    @classmethod
    def _coerce_num_media(cls, v: Any) -> int:
        try:
            return max(int(v), 0)
        except (TypeError, ValueError):
            return 0

    @property
    def has_media(self) -> bool:
        return self.num_media > 0

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "InboundMessage":
        return cls.model_validate(dict(form))
