from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from metgen.api import deps
from metgen.core.config import Settings
from metgen.factory import create_app
from metgen.models.metar import Airport
from tests.fakes import FakeAviationWeatherClient, FakeOpenWeatherClient


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        env="test",
        debug=True,
        docs_enabled=False,
        log_level="DEBUG",
        cors_origins=["http://localhost"],
        trusted_hosts=["testserver", "localhost"],
        openweather_api_key="test-key",
        one_call_api_key="test-one-call-key",
        default_units="metric",
        default_source="standard",
        user_agent="test-agent",
        http_timeout_seconds=1.0,
        user_airports_path=tmp_path / "user_airports.json",
    )


@pytest.fixture()
def fake_openweather() -> FakeOpenWeatherClient:
    return FakeOpenWeatherClient()


@pytest.fixture()
def fake_aviation() -> FakeAviationWeatherClient:
    return FakeAviationWeatherClient(
        metars={"KSEA": "KSEA 171853Z 18008KT 10SM FEW250 12/05 A3012"},
        airports={"KPAE": Airport(icao="KPAE", latitude=47.9063, longitude=-122.282)},
    )


@pytest.fixture()
def client(
    settings: Settings,
    fake_openweather: FakeOpenWeatherClient,
    fake_aviation: FakeAviationWeatherClient,
) -> TestClient:
    app = create_app(settings)
    app.dependency_overrides[deps.get_openweather_client] = lambda: fake_openweather
    app.dependency_overrides[deps.get_aviation_client] = lambda: fake_aviation
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def now() -> datetime:
    return datetime(2026, 10, 17, 18, 53, tzinfo=timezone.utc)
