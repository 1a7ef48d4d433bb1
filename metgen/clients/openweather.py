from __future__ import annotations

import logging
import math
from typing import Any

import httpx

from metgen.models.metar import ForecastEntry, ObservationRecord

logger = logging.getLogger(__name__)

OPENWEATHER_CURRENT_URL = "https://api.openweathermap.org/data/2.5/weather"
OPENWEATHER_ONE_CALL_URL = "https://api.openweathermap.org/data/3.0/onecall"
OPENWEATHER_GEOCODING_URL = "http://api.openweathermap.org/geo/1.0/direct"

# The trend section covers the next two hours.
FORECAST_HOURS = 2


class MissingApiKeyError(ValueError):
    pass


class OpenWeatherClient:
    def __init__(
        self,
        *,
        api_key: str,
        one_call_api_key: str,
        user_agent: str,
        timeout_seconds: float,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._one_call_api_key = one_call_api_key
        self._client = httpx.Client(
            timeout=timeout_seconds,
            headers={
                "User-Agent": user_agent,
                "Accept": "application/json",
            },
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def fetch_current(self, lat: float, lon: float) -> ObservationRecord:
        payload = self._get(
            OPENWEATHER_CURRENT_URL,
            api_key=self._api_key,
            params={"lat": lat, "lon": lon, "units": "metric"},
        )
        return parse_current_weather(payload)

    def fetch_one_call(self, lat: float, lon: float) -> ObservationRecord:
        payload = self._get(
            OPENWEATHER_ONE_CALL_URL,
            api_key=self._one_call_api_key,
            params={"lat": lat, "lon": lon, "exclude": "minutely", "units": "metric"},
        )
        return parse_one_call(payload)

    def geocode(self, query: str) -> tuple[float, float] | None:
        payload = self._get(
            OPENWEATHER_GEOCODING_URL,
            api_key=self._api_key,
            params={"q": query, "limit": 1},
        )
        if not isinstance(payload, list) or not payload:
            logger.info("No geocoding match for %r", query)
            return None
        first = payload[0]
        if not isinstance(first, dict):
            raise ValueError("Unexpected geocoding entry shape")
        lat = _float_or_none(first.get("lat"))
        lon = _float_or_none(first.get("lon"))
        if lat is None or lon is None:
            return None
        return lat, lon

    def _get(self, url: str, *, api_key: str, params: dict[str, Any]) -> Any:
        if not api_key:
            raise MissingApiKeyError("OpenWeather API key is not configured")
        resp = self._client.get(url, params={**params, "appid": api_key})
        resp.raise_for_status()
        return resp.json()


def parse_current_weather(payload: dict[str, Any]) -> ObservationRecord:
    """Normalize a ``data/2.5/weather`` response."""
    if not isinstance(payload, dict):
        raise ValueError("Unexpected OpenWeather response shape")

    main = _section(payload, "main")
    wind = _section(payload, "wind")
    clouds = _section(payload, "clouds")

    return ObservationRecord(
        temperature_c=_float_or_none(main.get("temp")),
        humidity_pct=_float_or_none(main.get("humidity")),
        pressure_hpa=_float_or_none(main.get("pressure")),
        wind_speed_ms=_float_or_none(wind.get("speed")),
        wind_direction_deg=_int_or_none(wind.get("deg")),
        wind_gust_ms=_float_or_none(wind.get("gust")),
        visibility_m=_float_or_none(payload.get("visibility")),
        cloud_coverage_pct=_float_or_none(clouds.get("all")),
        weather_codes=_weather_codes(payload.get("weather")),
    )


def parse_one_call(payload: dict[str, Any]) -> ObservationRecord:
    """Normalize a ``data/3.0/onecall`` response, keeping two hourly entries."""
    if not isinstance(payload, dict):
        raise ValueError("Unexpected One Call response shape")

    current = _section(payload, "current")

    hourly = payload.get("hourly")
    forecast: list[ForecastEntry] = []
    if isinstance(hourly, list):
        for hour in hourly[:FORECAST_HOURS]:
            if not isinstance(hour, dict):
                continue
            timestamp = _int_or_none(hour.get("dt"))
            if timestamp is None:
                continue
            forecast.append(
                ForecastEntry(
                    timestamp_unix=timestamp,
                    temperature_c=_float_or_none(hour.get("temp")),
                    dew_point_c=_float_or_none(hour.get("dew_point")),
                    humidity_pct=_float_or_none(hour.get("humidity")),
                    pressure_hpa=_float_or_none(hour.get("pressure")),
                    wind_speed_ms=_float_or_none(hour.get("wind_speed")),
                    wind_direction_deg=_int_or_none(hour.get("wind_deg")),
                    wind_gust_ms=_float_or_none(hour.get("wind_gust")),
                    visibility_m=_float_or_none(hour.get("visibility")),
                    cloud_coverage_pct=_float_or_none(hour.get("clouds")),
                    weather_codes=_weather_codes(hour.get("weather")),
                )
            )

    alerts: list[str] = []
    raw_alerts = payload.get("alerts")
    if isinstance(raw_alerts, list):
        for alert in raw_alerts:
            description = alert.get("description") if isinstance(alert, dict) else None
            alerts.append(description if isinstance(description, str) else "Unknown")

    return ObservationRecord(
        temperature_c=_float_or_none(current.get("temp")),
        dew_point_c=_float_or_none(current.get("dew_point")),
        humidity_pct=_float_or_none(current.get("humidity")),
        pressure_hpa=_float_or_none(current.get("pressure")),
        wind_speed_ms=_float_or_none(current.get("wind_speed")),
        wind_direction_deg=_int_or_none(current.get("wind_deg")),
        wind_gust_ms=_float_or_none(current.get("wind_gust")),
        visibility_m=_float_or_none(current.get("visibility")),
        cloud_coverage_pct=_float_or_none(current.get("clouds")),
        weather_codes=_weather_codes(current.get("weather")),
        forecast=tuple(forecast),
        alerts=tuple(alerts),
    )


def _section(payload: dict[str, Any], key: str) -> dict[str, Any]:
    value = payload.get(key)
    return value if isinstance(value, dict) else {}


def _weather_codes(conditions: Any) -> tuple[int, ...]:
    if not isinstance(conditions, list):
        return ()
    codes: list[int] = []
    for cond in conditions:
        if not isinstance(cond, dict):
            continue
        code = _int_or_none(cond.get("id"))
        if code is not None:
            codes.append(code)
    return tuple(codes)


def _float_or_none(v: Any) -> float | None:
    try:
        if v is None or isinstance(v, bool):
            return None
        f = float(v)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def _int_or_none(v: Any) -> int | None:
    f = _float_or_none(v)
    if f is None:
        return None
    return int(round(f))
