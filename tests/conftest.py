"""Shared fixtures: isolated settings, a recording mailer, and a live TestClient."""

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_mailer
from app.core.config import Settings
from app.main import create_application
from tests.helpers import RecordingMailer, VALID_MALE


@pytest.fixture
def male_payload() -> dict:
    return dict(VALID_MALE)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        data_dir=str(tmp_path / "data"),
        static_dir=str(tmp_path / "public"),
        mail_enabled=False,
        rate_limit_enabled=False,
    )


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def make_client(mailer):
    """Build a TestClient for given settings, with the recording mailer injected."""
    clients = []

    def _make(settings: Settings, mailer_override=mailer) -> TestClient:
        app = create_application(settings)
        app.dependency_overrides[get_mailer] = lambda: mailer_override
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client, settings) -> TestClient:
    return make_client(settings)
