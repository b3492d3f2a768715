"""Keyword classification of free-text hazard reports.

Both classifications walk an ordered list of (category, keywords) pairs and
take the first category with any keyword contained in the lower-cased text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

UNKNOWN_LOCATION = "Unknown location"

HAZARD_TYPES: list[tuple[str, tuple[str, ...]]] = [
    ("flood", ("flood", "flooding", "inundation")),
    ("tsunami", ("tsunami", "wave surge", "surge")),
    ("storm", ("storm", "cyclone", "wind")),
    ("waves", ("wave", "waves", "high waves")),
]
DEFAULT_HAZARD = "other"

URGENCY_LEVELS: list[tuple[str, tuple[str, ...]]] = [
    ("urgent", ("urgent", "immediate", "emergency", "help")),
    ("medium", ("serious", "dangerous", "high")),
    ("low", ("normal", "minor", "small")),
]
DEFAULT_URGENCY = "medium"

_LOCATION_RE = re.compile(r"(?:at|in|near)\s+([^,.\n]+)", re.IGNORECASE)


@dataclass(frozen=True)
class ParsedHazard:
    hazard_type: str
    urgency: str
    location: str
    original_message: str


def classify(text: str, table: list[tuple[str, tuple[str, ...]]], default: str) -> str:
    for category, keywords in table:
        if any(k in text for k in keywords):
            return category
    return default


def extract_location(text: str) -> str:
    m = _LOCATION_RE.search(text)
    if not m:
        return UNKNOWN_LOCATION
    return m.group(1).strip() or UNKNOWN_LOCATION


def parse_hazard_report(body: str | None) -> ParsedHazard:
    text = body or ""
    folded = text.lower()
    return ParsedHazard(
        hazard_type=classify(folded, HAZARD_TYPES, DEFAULT_HAZARD),
        urgency=classify(folded, URGENCY_LEVELS, DEFAULT_URGENCY),
        # Captured from the original text so place names keep their casing.
        location=extract_location(text),
        original_message=text,
    )
