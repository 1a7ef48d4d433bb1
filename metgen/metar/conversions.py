"""Numeric conversions used when encoding METAR fields.

All rounding goes through :func:`round_half_away` so that ``x.5`` values
round away from zero, as aviation reports conventionally do. The built-in
``round`` rounds half to even and would turn 2.5 knots into 2.
"""

from __future__ import annotations

import math

KNOTS_PER_MS = 1.94384
METERS_PER_STATUTE_MILE = 1609.344
INHG_PER_HPA = 0.02953

# Sub-mile visibility is reported in quarter-mile graduations.
QUARTER_MILE_DENOMINATOR = 4


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero."""
    magnitude = abs(value)
    whole = math.floor(magnitude)
    if magnitude - whole >= 0.5:
        whole += 1
    return int(math.copysign(whole, value))


def ms_to_knots(speed_ms: float) -> int:
    return round_half_away(speed_ms * KNOTS_PER_MS)


def meters_to_statute_miles(meters: float) -> float:
    return meters / METERS_PER_STATUTE_MILE


def hpa_to_inhg_hundredths(pressure_hpa: float) -> int:
    """Convert hectopascals to the integer used in an ``A####`` altimeter group.

    Example:
        1013.25 hPa -> 29.92 inHg -> 2992
    """
    return round_half_away(pressure_hpa * INHG_PER_HPA * 100)


def gcd(a: int, b: int) -> int:
    while b:
        a, b = b, a % b
    return abs(a)


def reduce_fraction(
    numerator: int, denominator: int = QUARTER_MILE_DENOMINATOR
) -> tuple[int, int]:
    """Reduce ``numerator/denominator`` by their greatest common divisor.

    A zero numerator reduces to ``(0, 1)``.
    """
    divisor = gcd(numerator, denominator)
    if divisor == 0:
        return numerator, denominator
    return numerator // divisor, denominator // divisor
