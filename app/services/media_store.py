"""Media storage: download Twilio attachments and write them under media_dir.

Files are named {report_id}_{epoch_ms}{ext} and served back at /media/{filename}.
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path

import httpx

from app.config import Settings
from app.schemas import MediaInfo

logger = logging.getLogger(__name__)

MEDIA_URL_PREFIX = "/media"

_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "video/mp4": ".mp4",
    "video/quicktime": ".mov",
    "audio/mpeg": ".mp3",
    "audio/ogg": ".ogg",
    "application/pdf": ".pdf",
    "text/plain": ".txt",
}
_FALLBACK_EXT = ".bin"


def get_file_extension(content_type: str | None) -> str:
    return _EXTENSIONS.get(content_type or "", _FALLBACK_EXT)


def _save_sync(data: bytes, media_dir: Path, filename: str) -> Path:
    media_dir.mkdir(parents=True, exist_ok=True)
    path = media_dir / filename
    path.write_bytes(data)
    return path


async def save_media(data: bytes, media_dir: Path, filename: str) -> Path:
    """Write media bytes to disk without blocking the event loop."""
    return await asyncio.to_thread(_save_sync, data, media_dir, filename)


class MediaStore:
    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        self._settings = settings
        self.media_dir = Path(settings.storage.media_dir)
        # Twilio media URLs redirect to a signed CDN location.
        self._client = client or httpx.AsyncClient(timeout=30.0, follow_redirects=True)
        self._owns_client = client is None

    def ensure_dir(self) -> None:
        if not self.media_dir.exists():
            self.media_dir.mkdir(parents=True, exist_ok=True)
            logger.info("Created media directory: %s", self.media_dir)

    async def download_media(
        self, media_url: str | None, content_type: str | None, report_id: str
    ) -> MediaInfo | None:
        """Fetch an attachment with the account's basic auth and store it.

        Returns None when there is nothing to fetch, credentials are missing,
        or the download/write fails.
        """
        s = self._settings
        if not media_url or not s.has_twilio_credentials:
            return None

        try:
            logger.info("Downloading media: %s", media_url)
            resp = await self._client.get(
                media_url, auth=(s.twilio_account_sid, s.twilio_auth_token)
            )
            if not resp.is_success:
                logger.error(
                    "Failed to download media: %d %s", resp.status_code, resp.reason_phrase
                )
                return None

            data = resp.content
            filename = f"{report_id}_{int(time.time() * 1000)}{get_file_extension(content_type)}"
            path = await save_media(data, self.media_dir, filename)
        except Exception as e:
            logger.error("Error downloading media: %s", e)
            return None

        logger.info("Media saved: %s (%d bytes)", path, len(data))
        return MediaInfo(
            filename=filename,
            filepath=str(path),
            size=len(data),
            content_type=content_type or "",
            url=f"{MEDIA_URL_PREFIX}/{filename}",
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
