"""End-to-end handling of one authenticated inbound message.

parse → geocode → create report → attach media → broadcast → confirm.
Signature checking happens in the webhook route before this runs. Each
enrichment step degrades the report instead of failing it, so the only
exceptions that escape come from programming errors.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from app.schemas import InboundMessage, Report, ReportDraft
from app.services.channel import get_channel_info
from app.services.geocoder import Geocoder
from app.services.hazard_parser import parse_hazard_report
from app.services.media_store import MediaStore
from app.services.messaging import ConfirmationSender
from app.services.report_store import ReportStore

logger = logging.getLogger(__name__)

NEW_REPORT_EVENT = "new-report"
MEDIA_ONLY_MESSAGE = "[Media message]"

Publisher = Callable[[str, dict[str, Any]], Awaitable[None]]


class IngestionPipeline:
    def __init__(
        self,
        store: ReportStore,
        geocoder: Geocoder,
        media: MediaStore,
        sender: ConfirmationSender,
        publish: Publisher,
    ):
        self.store = store
        self.geocoder = geocoder
        self.media = media
        self.sender = sender
        self.publish = publish

    async def handle(self, msg: InboundMessage) -> Report:
        channel = get_channel_info(msg.from_number)
        logger.info("Incoming %s from %s -> %s", channel.channel, msg.from_number, msg.body or "[no text]")
        if msg.has_media:
            logger.info("Media attached: %s - %s", msg.media_content_type, msg.media_url)

        parsed = parse_hazard_report(msg.body)
        coords = await self.geocoder.geocode(parsed.location)

        report = await self.store.create(ReportDraft(
            phone_number=msg.from_number or "",
            message=msg.body or MEDIA_ONLY_MESSAGE,
            hazard_type=parsed.hazard_type,
            urgency=parsed.urgency,
            location=parsed.location,
            coordinates=coords,
            message_sid=msg.message_sid or "",
            source=channel.channel,
            has_media=msg.has_media,
        ))

        if msg.has_media and msg.media_url:
            report = await self._attach_media(report, msg)

        await self.publish(NEW_REPORT_EVENT, report.model_dump(mode="json", by_alias=True))

        await self.sender.send_confirmation(msg.from_number or "", report, channel.channel)

        if report.urgency == "urgent":
            logger.warning("Urgent report - notify officials: %s", report.id)
        return report

    async def _attach_media(self, report: Report, msg: InboundMessage) -> Report:
        logger.info("Processing media for report %s...", report.id)
        info = await self.media.download_media(msg.media_url, msg.media_content_type, report.id)
        if info is None:
            return report

        def _set_media(r: Report) -> None:
            r.media = info

        if await self.store.update_by_id(report.id, _set_media):
            logger.info("Media saved for report %s: %s", report.id, info.filename)
        return self.store.get(report.id) or report.model_copy(update={"media": info})
