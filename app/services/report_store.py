"""In-memory report list mirrored to a JSON file.

The list is kept most-recent-first and capped at max_reports. Every mutation
rewrites the whole file through a temp file and rename.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from pydantic import TypeAdapter, ValidationError

from app.schemas import Report, ReportDraft

logger = logging.getLogger(__name__)

_reports_adapter = TypeAdapter(list[Report])


def _write_sync(path: Path, payload: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    try:
        tmp.write_bytes(payload)
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


class ReportStore:
    def __init__(self, path: str | Path, max_reports: int = 1000):
        self.path = Path(path)
        self.max_reports = max_reports
        self._reports: list[Report] = []
        self._lock = asyncio.Lock()
        self._last_id_ms = 0

    def load(self) -> int:
        """Seed the in-memory list from disk. Returns the number of reports loaded."""
        if not self.path.exists():
            logger.info("No reports file at %s, starting empty", self.path)
            self._reports = []
            return 0
        try:
            records = json.loads(self.path.read_bytes())
            if not isinstance(records, list):
                raise ValueError("expected a JSON list of reports")
        except (OSError, ValueError) as e:
            logger.warning("Could not load reports file: %s", e)
            self._set_aside()
            self._reports = []
            return 0

        reports = []
        for i, record in enumerate(records):
            try:
                reports.append(Report.model_validate(record))
            except ValidationError as e:
                logger.warning("Skipping unreadable report #%d in %s: %s", i, self.path, e)
        self._reports = reports[: self.max_reports]
        logger.info("Loaded %d reports", len(self._reports))
        return len(self._reports)

    def _set_aside(self) -> None:
        """Rename an unreadable state file to *.bad so the next persist cannot overwrite it."""
        bad = self.path.with_name(self.path.name + ".bad")
        try:
            os.replace(self.path, bad)
        except OSError as e:
            logger.error("Could not set aside unreadable reports file: %s", e)
            return
        logger.warning("Moved unreadable reports file to %s", bad)

    def list(self) -> list[Report]:
        return list(self._reports)

    def get(self, report_id: str) -> Report | None:
        return next((r for r in self._reports if r.id == report_id), None)

    def __len__(self) -> int:
        return len(self._reports)

    def _next_id(self) -> str:
        # Bump past the previous stamp so two creates in one millisecond differ.
        ms = max(int(time.time() * 1000), self._last_id_ms + 1)
        self._last_id_ms = ms
        return f"REP{str(ms)[-9:]}"

    async def create(self, draft: ReportDraft) -> Report:
        """Assign id + createdAt, prepend, trim to the cap and persist."""
        async with self._lock:
            report = Report.model_validate({
                **draft.model_dump(),
                "id": self._next_id(),
                "created_at": datetime.now(timezone.utc),
            })
            self._reports.insert(0, report)
            if len(self._reports) > self.max_reports:
                del self._reports[self.max_reports:]
            await self._persist()
        return report

    async def update_by_id(self, report_id: str, mutator: Callable[[Report], None]) -> bool:
        """Apply mutator to a stored report and persist. False if it was evicted."""
        async with self._lock:
            report = self.get(report_id)
            if report is None:
                return False
            mutator(report)
            await self._persist()
        return True

    async def _persist(self) -> None:
        payload = _reports_adapter.dump_json(self._reports, by_alias=True, indent=2)
        try:
            await asyncio.to_thread(_write_sync, self.path, payload)
        except OSError as e:
            logger.error("Failed to persist reports: %s", e)
