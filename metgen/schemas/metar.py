from __future__ import annotations

from pydantic import BaseModel, Field

from metgen.models.metar import DataSource, Units

ICAO_PATTERN = r"^[A-Za-z0-9]{3,4}$"


class MetarResponse(BaseModel):
    station: str = Field(min_length=1, max_length=8)
    metar: str
    origin: str
    units: Units
    source: DataSource | None = None
    latitude: float | None = None
    longitude: float | None = None
    alerts: list[str] = Field(default_factory=list)


class AirportCreate(BaseModel):
    icao: str = Field(pattern=ICAO_PATTERN)
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class AirportRead(BaseModel):
    icao: str
    latitude: float
    longitude: float
