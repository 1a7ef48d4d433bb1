from __future__ import annotations

from datetime import datetime
from pathlib import Path

import httpx
import pytest

from metgen.clients.openweather import MissingApiKeyError
from metgen.models.metar import Airport, DataSource, Units
from metgen.repositories.airports import AirportDirectory, UserAirportStore
from metgen.services.metar import (
    InvalidCoordinatesError,
    LocationNotFoundError,
    MetarService,
    WeatherUnavailableError,
)
from tests.fakes import FakeAviationWeatherClient, FakeOpenWeatherClient


@pytest.fixture()
def store(tmp_path: Path) -> UserAirportStore:
    return UserAirportStore(tmp_path / "user_airports.json")


def _service(
    now: datetime,
    store: UserAirportStore,
    *,
    openweather: FakeOpenWeatherClient | None = None,
    aviation: FakeAviationWeatherClient | None = None,
) -> MetarService:
    return MetarService(
        openweather=openweather or FakeOpenWeatherClient(),
        aviation=aviation or FakeAviationWeatherClient(),
        directory=AirportDirectory(
            [Airport(icao="KXYZ", latitude=40.5, longitude=-75.25)]
        ),
        user_airports=store,
        clock=lambda: now,
    )


def test_reported_metar_is_preferred(now: datetime, store: UserAirportStore) -> None:
    openweather = FakeOpenWeatherClient()
    aviation = FakeAviationWeatherClient(metars={"KSEA": "KSEA 171853Z 00000KT 10SM CLR 12/05 A3012"})
    service = _service(now, store, openweather=openweather, aviation=aviation)

    result = service.for_station("ksea", source=DataSource.STANDARD, units=Units.METRIC)

    assert result.origin == "observed"
    assert result.metar == "KSEA 171853Z 00000KT 10SM CLR 12/05 A3012"
    assert openweather.calls == []


def test_synthesize_flag_skips_reported_metar(now: datetime, store: UserAirportStore) -> None:
    aviation = FakeAviationWeatherClient(
        metars={"KSEA": "KSEA 171853Z 00000KT 10SM CLR 12/05 A3012"},
        airports={"KSEA": Airport(icao="KSEA", latitude=47.449, longitude=-122.309)},
    )
    service = _service(now, store, aviation=aviation)

    result = service.for_station(
        "KSEA", source=DataSource.STANDARD, units=Units.METRIC, synthesize=True
    )

    assert result.origin == "synthesized"
    assert result.metar == "KSEA 171853Z AUTO 27010KT 9999 CLR M05/M09 Q1013"
    assert aviation.metar_requests == []


def test_station_falls_back_to_local_airports(now: datetime, store: UserAirportStore) -> None:
    openweather = FakeOpenWeatherClient()
    service = _service(now, store, openweather=openweather)

    result = service.for_station("KXYZ", source=DataSource.STANDARD, units=Units.METRIC)

    assert result.origin == "synthesized"
    assert (result.latitude, result.longitude) == (40.5, -75.25)
    assert openweather.calls == [("current", 40.5, -75.25)]


def test_saved_airport_is_used_before_bundled_list(
    now: datetime, store: UserAirportStore
) -> None:
    store.save(Airport(icao="KXYZ", latitude=1.0, longitude=2.0))
    openweather = FakeOpenWeatherClient()
    service = _service(now, store, openweather=openweather)

    service.for_station("KXYZ", source=DataSource.STANDARD, units=Units.METRIC)

    assert openweather.calls == [("current", 1.0, 2.0)]


def test_unknown_station(now: datetime, store: UserAirportStore) -> None:
    service = _service(now, store)
    with pytest.raises(LocationNotFoundError):
        service.for_station("QQQQ", source=DataSource.STANDARD, units=Units.METRIC)
    with pytest.raises(LocationNotFoundError):
        service.for_station("  ", source=DataSource.STANDARD, units=Units.METRIC)


def test_one_call_source_adds_trend_and_alerts(now: datetime, store: UserAirportStore) -> None:
    openweather = FakeOpenWeatherClient()
    service = _service(now, store, openweather=openweather)

    result = service.for_coordinates(
        59.91, 10.75, station="ENGM", source=DataSource.ONE_CALL, units=Units.METRIC
    )

    assert openweather.calls == [("one_call", 59.91, 10.75)]
    assert result.metar == (
        "ENGM 171853Z AUTO 21010KT 8000 BKN 10/07 Q1013 -RA "
        "FCST 2313Z 21010KT 8000 -RA 10/07 Q1013"
    )
    assert result.alerts == ("Gale warning",)
    assert result.source is DataSource.ONE_CALL


def test_coordinates_without_station_use_placeholder(
    now: datetime, store: UserAirportStore
) -> None:
    result = _service(now, store).for_coordinates(
        10.0, 20.0, station=None, source=DataSource.STANDARD, units=Units.IMPERIAL
    )
    assert result.station == "ZZZZ"
    assert result.metar.startswith("ZZZZ 171853Z AUTO 27010KT 10SM CLR M05/M09 A2991")


def test_invalid_coordinates(now: datetime, store: UserAirportStore) -> None:
    service = _service(now, store)
    with pytest.raises(InvalidCoordinatesError):
        service.for_coordinates(91.0, 0.0, station=None, source=DataSource.STANDARD, units=Units.METRIC)
    with pytest.raises(InvalidCoordinatesError):
        service.for_coordinates(0.0, -180.5, station=None, source=DataSource.STANDARD, units=Units.METRIC)


@pytest.mark.parametrize(
    "error",
    [
        MissingApiKeyError("OpenWeather API key is not configured"),
        httpx.HTTPStatusError(
            "unauthorized",
            request=httpx.Request("GET", "https://api.openweathermap.org/data/2.5/weather"),
            response=httpx.Response(401),
        ),
        ValueError("Unexpected OpenWeather response shape"),
    ],
)
def test_provider_failures_become_weather_unavailable(
    now: datetime, store: UserAirportStore, error: Exception
) -> None:
    service = _service(now, store, openweather=FakeOpenWeatherClient(error=error))
    with pytest.raises(WeatherUnavailableError):
        service.for_coordinates(10.0, 20.0, station=None, source=DataSource.STANDARD, units=Units.METRIC)


def test_location_saves_named_station(now: datetime, store: UserAirportStore) -> None:
    service = _service(now, store)

    result = service.for_location(
        "Oslo", station="enzz", source=DataSource.STANDARD, units=Units.METRIC
    )

    assert result.station == "ENZZ"
    assert store.get("ENZZ") == Airport(icao="ENZZ", latitude=59.9139, longitude=10.7522)


def test_location_without_station_is_not_saved(now: datetime, store: UserAirportStore) -> None:
    service = _service(now, store)
    result = service.for_location("Oslo", station=None, source=DataSource.STANDARD, units=Units.METRIC)
    assert result.station == "ZZZZ"
    assert store.list_airports() == []


def test_unknown_location(now: datetime, store: UserAirportStore) -> None:
    service = _service(now, store)
    with pytest.raises(LocationNotFoundError):
        service.for_location("Atlantis", station=None, source=DataSource.STANDARD, units=Units.METRIC)


def test_location_keeps_metar_when_saving_airport_fails(
    now: datetime, tmp_path: Path
) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    store = UserAirportStore(blocker / "user_airports.json")
    service = _service(now, store)

    result = service.for_location(
        "Oslo", station="ENXX", source=DataSource.STANDARD, units=Units.METRIC
    )

    assert result.station == "ENXX"
    assert result.metar == "ENXX 171853Z AUTO 27010KT 9999 CLR M05/M09 Q1013"
