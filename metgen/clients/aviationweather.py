from __future__ import annotations

import logging
from typing import Any

import httpx

from metgen.models.metar import Airport

logger = logging.getLogger(__name__)

NOAA_METAR_URL = "https://aviationweather.gov/api/data/metar"
NOAA_AIRPORT_URL = "https://aviationweather.gov/api/data/airport"


class AviationWeatherClient:
    """NOAA aviationweather.gov lookups.

    Failures are logged and reported as ``None``: callers always have another
    source to fall back to (a synthesized report, the local airport list).
    """

    def __init__(
        self,
        *,
        user_agent: str,
        timeout_seconds: float,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
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

    def fetch_metar(self, icao: str) -> str | None:
        first = self._first_record(
            NOAA_METAR_URL, {"ids": icao, "format": "json", "taf": "false"}
        )
        if first is None:
            return None
        raw = first.get("rawOb")
        if not isinstance(raw, str) or not raw.strip():
            return None
        return raw.strip()

    def fetch_airport(self, icao: str) -> Airport | None:
        first = self._first_record(NOAA_AIRPORT_URL, {"ids": icao, "format": "json"})
        if first is None:
            return None
        try:
            lat = float(first["lat"])
            lon = float(first["lon"])
        except (KeyError, TypeError, ValueError):
            logger.warning("NOAA airport record for %s has no coordinates", icao)
            return None
        return Airport(icao=icao.upper(), latitude=lat, longitude=lon)

    def _first_record(self, url: str, params: dict[str, str]) -> dict[str, Any] | None:
        try:
            resp = self._client.get(url, params=params)
        except httpx.HTTPError as e:
            logger.warning("Error querying %s for %s: %s", url, params.get("ids"), e)
            return None

        if resp.status_code == httpx.codes.NO_CONTENT:
            return None
        if resp.status_code == httpx.codes.NOT_FOUND:
            logger.info("%s not found at %s", params.get("ids"), url)
            return None
        if resp.status_code == httpx.codes.BAD_REQUEST:
            logger.warning("Invalid ICAO code format: %s", params.get("ids"))
            return None
        if resp.is_error:
            logger.warning("Unexpected status %s from %s", resp.status_code, url)
            return None

        try:
            payload = resp.json()
        except ValueError as e:
            logger.warning("Failed to parse response from %s: %s", url, e)
            return None
        if not isinstance(payload, list) or not payload:
            return None
        first = payload[0]
        return first if isinstance(first, dict) else None
