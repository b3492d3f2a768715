from __future__ import annotations

from types import SimpleNamespace

import pytest

from app.config import GeocoderConfig, Settings, StorageConfig


class FakeMessages:
    def __init__(self, fail: bool = False):
        self.sent: list[dict] = []
        self.fail = fail

    def create(self, **kwargs):
        if self.fail:
            raise RuntimeError("Twilio is down")
        self.sent.append(kwargs)
        return SimpleNamespace(sid=f"SM{len(self.sent):04d}")


class FakeTwilioClient:
    """Stands in for twilio.rest.Client; records messages.create calls."""

    def __init__(self, fail: bool = False):
        self.messages = FakeMessages(fail)


class EventRecorder:
    def __init__(self):
        self.events: list[tuple[str, dict]] = []

    async def __call__(self, event: str, data: dict):
        self.events.append((event, data))


@pytest.fixture
def settings(tmp_path):
    return Settings(
        twilio_account_sid="AC00000000000000000000000000000000",
        twilio_auth_token="test-auth-token",
        twilio_phone_number="+15005550006",
        twilio_whatsapp_from="",
        twilio_webhook_url="",
        storage=StorageConfig(
            reports_file=str(tmp_path / "reports.json"),
            media_dir=str(tmp_path / "media"),
            max_reports=1000,
        ),
        geocoder=GeocoderConfig(min_interval_s=0.0),
    )


@pytest.fixture
def fake_twilio():
    return FakeTwilioClient()


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture
def failing_twilio():
    return FakeTwilioClient(fail=True)
