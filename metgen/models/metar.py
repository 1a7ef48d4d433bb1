from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Units(str, Enum):
    METRIC = "metric"
    IMPERIAL = "imperial"


class DataSource(str, Enum):
    STANDARD = "standard"
    ONE_CALL = "one_call"


@dataclass(frozen=True)
class ForecastEntry:
    timestamp_unix: int

    temperature_c: float | None = None
    dew_point_c: float | None = None
    humidity_pct: float | None = None
    pressure_hpa: float | None = None
    wind_speed_ms: float | None = None
    wind_direction_deg: int | None = None
    wind_gust_ms: float | None = None
    visibility_m: float | None = None
    cloud_coverage_pct: float | None = None
    weather_codes: tuple[int, ...] = ()


@dataclass(frozen=True)
class ObservationRecord:
    temperature_c: float | None = None
    dew_point_c: float | None = None
    humidity_pct: float | None = None
    pressure_hpa: float | None = None
    wind_speed_ms: float | None = None
    wind_direction_deg: int | None = None
    wind_gust_ms: float | None = None
    visibility_m: float | None = None
    cloud_coverage_pct: float | None = None
    weather_codes: tuple[int, ...] = ()

    forecast: tuple[ForecastEntry, ...] = ()
    alerts: tuple[str, ...] = ()


@dataclass(frozen=True)
class Airport:
    icao: str
    latitude: float
    longitude: float
