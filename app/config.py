"""Application configuration loaded from config.yaml + environment variables."""

from __future__ import annotations

import yaml
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"

# Twilio's WhatsApp sandbox sender, used when no WhatsApp identity is configured.
DEFAULT_WHATSAPP_FROM = "whatsapp:+14155208886"


def _load_yaml() -> dict:
    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH) as f:
            return yaml.safe_load(f) or {}
    return {}


_yaml = _load_yaml()


class StorageConfig(BaseSettings):
    reports_file: str = "reports.json"
    media_dir: str = "media"
    max_reports: int = 1000


class GeocoderConfig(BaseSettings):
    base_url: str = "https://nominatim.openstreetmap.org/search"
    user_agent: str = "OceanSaksham/1.0 (demo@example.com)"
    min_interval_s: float = 1.1
    timeout_s: float = 10.0


class Settings(BaseSettings):
    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_phone_number: str = ""
    twilio_whatsapp_from: str = ""
    twilio_webhook_url: str = ""
    port: int = 3000
    storage: StorageConfig = Field(default_factory=StorageConfig)
    geocoder: GeocoderConfig = Field(default_factory=GeocoderConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def has_twilio_credentials(self) -> bool:
        return bool(self.twilio_account_sid and self.twilio_auth_token)


def get_settings() -> Settings:
    """Build Settings by merging YAML defaults with env overrides."""
    y = _yaml
    storage = StorageConfig(**y.get("storage", {}))
    geo = GeocoderConfig(**y.get("geocoder", {}))
    return Settings(storage=storage, geocoder=geo)
