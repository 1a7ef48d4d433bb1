"""Formatters for the individual groups of a METAR report.

Every formatter takes already-normalized values (``None`` meaning "not
reported") and returns a single token. Missing data renders as the
placeholder METAR uses for that group; nothing here raises.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable

from metgen.metar import phenomena
from metgen.metar.conversions import (
    QUARTER_MILE_DENOMINATOR,
    hpa_to_inhg_hundredths,
    meters_to_statute_miles,
    ms_to_knots,
    reduce_fraction,
    round_half_away,
)
from metgen.models.metar import Units

VARIABLE_CALM_WIND = "VRB00KT"
MISSING_VISIBILITY = "////"
MISSING_TEMP_DEW = "/// ///"
MISSING_PRESSURE = "Q////"
UNLIMITED_VISIBILITY_METRIC = "9999"
UNLIMITED_VISIBILITY_IMPERIAL = "10SM"

_TEN_KM = 10000.0


def format_wind(
    direction_deg: int | None,
    speed_ms: float | None,
    gust_ms: float | None = None,
) -> str:
    """Format the wind group, e.g. ``27010KT`` or ``27010G16KT``.

    Args:
        direction_deg: Direction the wind blows from, in degrees. ``None`` or a
            negative value means unknown and yields ``VRB00KT``.
        speed_ms: Mean wind speed in m/s; ``None`` counts as calm.
        gust_ms: Gust speed in m/s; the gust is only reported when it rounds to
            at least one knot.
    """
    if direction_deg is None or direction_deg < 0:
        return VARIABLE_CALM_WIND

    speed_kt = ms_to_knots(speed_ms or 0.0)
    gust_kt = ms_to_knots(gust_ms or 0.0)
    if gust_kt > 0:
        return f"{direction_deg:03d}{speed_kt:02d}G{gust_kt:02d}KT"
    return f"{direction_deg:03d}{speed_kt:02d}KT"


def format_visibility(
    visibility_m: float | None,
    units: Units,
    weather_codes: Iterable[int] | None = None,
) -> str:
    """Format prevailing visibility.

    Metric reports use meters rounded to the nearest 100 m, with exactly
    10 km written as ``9999``. Imperial reports use statute miles with
    quarter-mile fractions (``1/2SM``, ``2 3/4SM``). The provider reports
    exactly 10 km when it sees no restriction; that reads as ``10SM`` unless
    precipitation or obscuration is also reported.
    """
    if visibility_m is None:
        return MISSING_VISIBILITY

    if units != Units.IMPERIAL:
        rounded = round_half_away(visibility_m / 100.0) * 100
        if rounded == _TEN_KM:
            return UNLIMITED_VISIBILITY_METRIC
        return f"{rounded:04d}"

    reducing = phenomena.has_reducing_conditions(weather_codes)
    if abs(visibility_m - _TEN_KM) < sys.float_info.epsilon and not reducing:
        return UNLIMITED_VISIBILITY_IMPERIAL

    miles = meters_to_statute_miles(visibility_m)
    if miles < 1.0:
        quarters = round_half_away(miles * QUARTER_MILE_DENOMINATOR)
        num, den = reduce_fraction(quarters, QUARTER_MILE_DENOMINATOR)
        if den == 1:
            return f"{num}SM"
        return f"{num}/{den}SM"

    whole = int(miles)
    quarters = round_half_away((miles - whole) * QUARTER_MILE_DENOMINATOR)
    if quarters == 0:
        return f"{whole}SM"
    num, den = reduce_fraction(quarters, QUARTER_MILE_DENOMINATOR)
    if den == 1:
        return f"{whole + num}SM"
    return f"{whole} {num}/{den}SM"


def format_clouds(coverage_pct: float | None) -> str:
    if coverage_pct is None:
        return "CLR"
    if coverage_pct == 0:
        return "CLR"
    if 0 < coverage_pct <= 25:
        return "FEW"
    if 25 < coverage_pct <= 50:
        return "SCT"
    if 50 < coverage_pct <= 87:
        return "BKN"
    if 87 < coverage_pct <= 100:
        return "OVC"
    return "CLR"


def derive_dew_point(temperature_c: float, humidity_pct: float) -> float:
    # Linear approximation, not the Magnus formula.
    return temperature_c - ((100.0 - humidity_pct) / 5.0)


def _format_temp_c(value: float) -> str:
    magnitude = round_half_away(abs(value))
    if value < 0:
        return f"M{magnitude:02d}"
    return f"{magnitude:02d}"


def format_temp_dew(
    temperature_c: float | None,
    dew_point_c: float | None,
    humidity_pct: float | None = None,
) -> str:
    """Format the temperature/dew point group, e.g. ``M05/M11``.

    A missing dew point is derived from relative humidity when possible.
    """
    if dew_point_c is None and temperature_c is not None and humidity_pct is not None:
        dew_point_c = derive_dew_point(temperature_c, humidity_pct)

    if temperature_c is None or dew_point_c is None:
        return MISSING_TEMP_DEW
    return f"{_format_temp_c(temperature_c)}/{_format_temp_c(dew_point_c)}"


def format_pressure(pressure_hpa: float | None, units: Units) -> str:
    if pressure_hpa is None:
        return MISSING_PRESSURE
    if units == Units.IMPERIAL:
        return f"A{hpa_to_inhg_hundredths(pressure_hpa):04d}"
    return f"Q{round_half_away(pressure_hpa):04d}"


def format_weather_conditions(codes: Iterable[int] | None) -> str:
    """Render present weather, e.g. ``-RA BR``; empty when nothing applies.

    Cloud ids (800 and up) are left to the sky-cover group and ids with no
    METAR equivalent are skipped.
    """
    if not codes:
        return ""
    tokens: list[str] = []
    for code in codes:
        if phenomena.is_cloud_code(code):
            continue
        abbreviation = phenomena.lookup(code)
        if abbreviation:
            tokens.append(abbreviation)
    return " ".join(tokens)
