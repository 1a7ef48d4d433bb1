from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone

from metgen.metar.fields import (
    UNLIMITED_VISIBILITY_METRIC,
    format_pressure,
    format_temp_dew,
    format_visibility,
    format_weather_conditions,
    format_wind,
)
from metgen.models.metar import ForecastEntry, Units


def format_trend_time(timestamp_unix: int) -> str:
    return datetime.fromtimestamp(timestamp_unix, tz=timezone.utc).strftime("%H%MZ")


def format_trend_segment(entry: ForecastEntry, units: Units) -> str | None:
    """Return ``FCST HHMMZ ...`` for one hourly entry, or None if unremarkable.

    An entry is worth reporting when it carries present weather, reduced
    (or unreported) visibility, or gusts. Entries whose timestamp cannot be
    turned into a UTC time are skipped as well.
    """
    wind = format_wind(entry.wind_direction_deg, entry.wind_speed_ms, entry.wind_gust_ms)
    visibility = format_visibility(entry.visibility_m, units, entry.weather_codes)
    weather = format_weather_conditions(entry.weather_codes)
    temp_dew = format_temp_dew(entry.temperature_c, entry.dew_point_c, entry.humidity_pct)
    pressure = format_pressure(entry.pressure_hpa, units)

    if not weather and visibility == UNLIMITED_VISIBILITY_METRIC and "G" not in wind:
        return None
    try:
        time = format_trend_time(entry.timestamp_unix)
    except (OverflowError, OSError, ValueError):
        # Timestamp outside the range datetime can represent; skip the hour.
        return None
    return f"FCST {time} {wind} {visibility} {weather} {temp_dew} {pressure}"


def build_trend(forecast: Iterable[ForecastEntry], units: Units) -> str:
    segments = ""
    for entry in forecast:
        segment = format_trend_segment(entry, units)
        if segment is not None:
            segments += f" {segment}"
    return segments.strip()
