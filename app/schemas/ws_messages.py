from __future__ import annotations
from typing import Any
from pydantic import BaseModel


class WSMessage(BaseModel):
    event: str  # new-report
    data: dict[str, Any] = {}
