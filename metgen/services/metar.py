from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

import httpx

from metgen.clients.aviationweather import AviationWeatherClient
from metgen.clients.openweather import MissingApiKeyError, OpenWeatherClient
from metgen.metar.report import assemble
from metgen.models.metar import Airport, DataSource, ObservationRecord, Units
from metgen.repositories.airports import AirportDirectory, UserAirportStore

logger = logging.getLogger(__name__)

# ICAO location indicator for "no designator assigned".
UNKNOWN_STATION = "ZZZZ"

ORIGIN_OBSERVED = "observed"
ORIGIN_SYNTHESIZED = "synthesized"


class MetarServiceError(Exception):
    pass


class InvalidCoordinatesError(MetarServiceError, ValueError):
    pass


class LocationNotFoundError(MetarServiceError):
    pass


class WeatherUnavailableError(MetarServiceError):
    pass


@dataclass(frozen=True)
class MetarResult:
    station: str
    metar: str
    origin: str
    units: Units
    source: DataSource | None = None
    latitude: float | None = None
    longitude: float | None = None
    alerts: tuple[str, ...] = field(default_factory=tuple)


def validate_coordinates(lat: float, lon: float) -> tuple[float, float]:
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        raise InvalidCoordinatesError(
            "Latitude must be between -90 and 90, and longitude must be between -180 and 180."
        )
    return lat, lon


class MetarService:
    def __init__(
        self,
        *,
        openweather: OpenWeatherClient,
        aviation: AviationWeatherClient,
        directory: AirportDirectory,
        user_airports: UserAirportStore,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._openweather = openweather
        self._aviation = aviation
        self._directory = directory
        self._user_airports = user_airports
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))

    def for_station(
        self,
        icao: str,
        *,
        source: DataSource,
        units: Units,
        synthesize: bool = False,
    ) -> MetarResult:
        """Return the reported METAR for ``icao``, or synthesize one.

        A real observation from NOAA wins unless ``synthesize`` is set.
        """
        icao = icao.strip().upper()
        if not icao:
            raise LocationNotFoundError("Station identifier is empty")

        if not synthesize:
            observed = self._aviation.fetch_metar(icao)
            if observed:
                logger.info("Using reported METAR for %s", icao)
                return MetarResult(
                    station=icao, metar=observed, origin=ORIGIN_OBSERVED, units=units
                )

        airport = self.resolve_station(icao)
        if airport is None:
            raise LocationNotFoundError(f"Could not resolve ICAO code: {icao}")
        return self._synthesize(
            icao, airport.latitude, airport.longitude, source=source, units=units
        )

    def for_coordinates(
        self,
        lat: float,
        lon: float,
        *,
        station: str | None,
        source: DataSource,
        units: Units,
    ) -> MetarResult:
        lat, lon = validate_coordinates(lat, lon)
        return self._synthesize(
            _station_or_unknown(station), lat, lon, source=source, units=units
        )

    def for_location(
        self,
        query: str,
        *,
        station: str | None,
        source: DataSource,
        units: Units,
    ) -> MetarResult:
        """Geocode a free-form place name and synthesize a METAR for it.

        When a station identifier is given, the resolved position is saved as a
        user airport so later lookups by ICAO code succeed offline.
        """
        query = query.strip()
        if not query:
            raise LocationNotFoundError("Location is empty")
        try:
            coords = self._openweather.geocode(query)
        except MissingApiKeyError as e:
            raise WeatherUnavailableError(str(e)) from e
        except (httpx.HTTPError, ValueError) as e:
            raise WeatherUnavailableError("Geocoding provider unavailable") from e
        if coords is None:
            raise LocationNotFoundError(f"Could not resolve location: {query}")

        lat, lon = coords
        result = self._synthesize(
            _station_or_unknown(station), lat, lon, source=source, units=units
        )
        if station and station.strip():
            try:
                self._user_airports.save(
                    Airport(icao=result.station, latitude=lat, longitude=lon)
                )
            except OSError as e:
                logger.warning("Failed to save airport %s: %s", result.station, e)
        return result

    def resolve_station(self, icao: str) -> Airport | None:
        """Find coordinates for ``icao``: NOAA, then saved airports, then the CSV."""
        airport = self._aviation.fetch_airport(icao)
        if airport is not None:
            return airport
        airport = self._user_airports.get(icao)
        if airport is not None:
            return airport
        airport = self._directory.get(icao)
        if airport is not None:
            logger.info("Resolved %s from the local airport list", icao)
        return airport

    def _synthesize(
        self,
        station: str,
        lat: float,
        lon: float,
        *,
        source: DataSource,
        units: Units,
    ) -> MetarResult:
        observation = self._fetch_observation(lat, lon, source=source)
        metar = assemble(station, observation, units, now=self._clock())
        return MetarResult(
            station=station,
            metar=metar,
            origin=ORIGIN_SYNTHESIZED,
            units=units,
            source=source,
            latitude=lat,
            longitude=lon,
            alerts=observation.alerts,
        )

    def _fetch_observation(
        self, lat: float, lon: float, *, source: DataSource
    ) -> ObservationRecord:
        try:
            if source == DataSource.ONE_CALL:
                return self._openweather.fetch_one_call(lat, lon)
            return self._openweather.fetch_current(lat, lon)
        except MissingApiKeyError as e:
            raise WeatherUnavailableError(str(e)) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Weather fetch failed for %.4f,%.4f: %s", lat, lon, e)
            raise WeatherUnavailableError("Failed to fetch weather data") from e


def _station_or_unknown(station: str | None) -> str:
    if station is None or not station.strip():
        return UNKNOWN_STATION
    return station.strip().upper()
