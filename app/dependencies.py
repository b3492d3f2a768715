"""FastAPI dependency providers.

Each collaborator is built once per process; tests swap them through
``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from app.config import Settings, get_settings
from app.services.geocoder import Geocoder
from app.services.ingestion import IngestionPipeline
from app.services.media_store import MediaStore
from app.services.messaging import ConfirmationSender
from app.services.report_store import ReportStore
from app.services.ws_manager import ws_manager


@lru_cache
def get_settings_dep() -> Settings:
    return get_settings()


@lru_cache
def get_report_store() -> ReportStore:
    s = get_settings_dep()
    return ReportStore(s.storage.reports_file, s.storage.max_reports)


@lru_cache
def get_geocoder() -> Geocoder:
    return Geocoder(get_settings_dep().geocoder)


@lru_cache
def get_media_store() -> MediaStore:
    return MediaStore(get_settings_dep())


@lru_cache
def get_confirmation_sender() -> ConfirmationSender:
    return ConfirmationSender(get_settings_dep())


def get_pipeline(
    store: ReportStore = Depends(get_report_store),
    geocoder: Geocoder = Depends(get_geocoder),
    media: MediaStore = Depends(get_media_store),
    sender: ConfirmationSender = Depends(get_confirmation_sender),
) -> IngestionPipeline:
    return IngestionPipeline(store, geocoder, media, sender, ws_manager.broadcast)
