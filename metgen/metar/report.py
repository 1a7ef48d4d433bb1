from __future__ import annotations

import logging
from datetime import datetime, timezone

from metgen.metar.fields import (
    format_clouds,
    format_pressure,
    format_temp_dew,
    format_visibility,
    format_weather_conditions,
    format_wind,
)
from metgen.metar.trend import build_trend
from metgen.models.metar import ObservationRecord, Units

logger = logging.getLogger(__name__)


def format_report_time(now: datetime | None = None) -> str:
    if now is None:
        now = datetime.now(tz=timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    else:
        now = now.astimezone(timezone.utc)
    return now.strftime("%d%H%MZ")


def assemble(
    station_id: str,
    observation: ObservationRecord,
    units: Units,
    *,
    now: datetime | None = None,
) -> str:
    """Render an observation as a single METAR line.

    Layout:
        STATION DDHHMMZ AUTO WIND VIS SKY TT/DD PRESSURE [WX] [FCST ...]

    Example:
        KXYZ 171853Z AUTO 27010KT 9999 CLR M05/M09 Q1013
    """
    wind = format_wind(
        observation.wind_direction_deg,
        observation.wind_speed_ms,
        observation.wind_gust_ms,
    )
    visibility = format_visibility(
        observation.visibility_m, units, observation.weather_codes
    )
    clouds = format_clouds(observation.cloud_coverage_pct)
    temp_dew = format_temp_dew(
        observation.temperature_c,
        observation.dew_point_c,
        observation.humidity_pct,
    )
    pressure = format_pressure(observation.pressure_hpa, units)

    metar = (
        f"{station_id.upper()} {format_report_time(now)} AUTO "
        f"{wind} {visibility} {clouds} {temp_dew} {pressure}"
    )

    weather = format_weather_conditions(observation.weather_codes)
    if weather:
        metar += f" {weather}"

    if observation.forecast:
        trend = build_trend(observation.forecast, units)
        if trend:
            metar += f" {trend}"

    logger.debug("Assembled METAR for %s: %s", station_id.upper(), metar)
    return metar
