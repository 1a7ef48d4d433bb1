from __future__ import annotations

from collections.abc import Iterable
from types import MappingProxyType

# Provider condition ids (OpenWeather) -> METAR present-weather abbreviations.
PHENOMENA_TABLE = MappingProxyType(
    {
        # Thunderstorm
        200: "TSRA",
        201: "TSRA",
        202: "+TSRA",
        210: "TS",
        211: "TS",
        212: "+TS",
        221: "TS",
        230: "TSRA",
        231: "TSRA",
        232: "+TSRA",
        # Drizzle
        300: "-DZ",
        301: "DZ",
        302: "+DZ",
        310: "-DZRA",
        311: "DZRA",
        312: "+DZRA",
        313: "SHRA",
        314: "+SHRA",
        321: "SHRA",
        # Rain
        500: "-RA",
        501: "RA",
        502: "+RA",
        503: "+RA",
        504: "+RA",
        511: "FZRA",
        520: "-SHRA",
        521: "SHRA",
        522: "+SHRA",
        531: "SHRA",
        # Snow and sleet
        600: "-SN",
        601: "SN",
        602: "+SN",
        611: "SLT",
        612: "-SHSL",
        613: "SHSL",
        615: "-RASN",
        616: "RASN",
        620: "-SHSN",
        621: "SHSN",
        622: "+SHSN",
        # Obscuration
        701: "BR",
        711: "FU",
        721: "HZ",
        731: "DU",
        741: "FG",
        751: "SA",
        761: "DU",
        762: "VA",
        771: "SQ",
        781: "+FC",
        # Cloud cover; never part of the phenomena line
        800: "CLR",
        801: "FEW",
        802: "SCT",
        803: "BKN",
        804: "OVC",
    }
)

CLOUD_CODE_MIN = 800

# Precipitation and obscuration ids that can lower visibility below 10 km.
REDUCING_CODES = range(200, CLOUD_CODE_MIN)


def lookup(code: int) -> str | None:
    return PHENOMENA_TABLE.get(code)


def is_cloud_code(code: int) -> bool:
    return code >= CLOUD_CODE_MIN


def has_reducing_conditions(codes: Iterable[int] | None) -> bool:
    if not codes:
        return False
    return any(code in REDUCING_CODES for code in codes)
