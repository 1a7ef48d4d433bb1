from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from metgen.api.deps import get_metar_service, get_settings
from metgen.core.config import Settings
from metgen.models.metar import DataSource, Units
from metgen.schemas.metar import ICAO_PATTERN, MetarResponse
from metgen.services.metar import (
    InvalidCoordinatesError,
    LocationNotFoundError,
    MetarResult,
    MetarService,
    MetarServiceError,
    WeatherUnavailableError,
)

router = APIRouter(prefix="/metar")


def _to_response(result: MetarResult) -> MetarResponse:
    return MetarResponse(
        station=result.station,
        metar=result.metar,
        origin=result.origin,
        units=result.units,
        source=result.source,
        latitude=result.latitude,
        longitude=result.longitude,
        alerts=list(result.alerts),
    )


def _http_error(error: MetarServiceError) -> HTTPException:
    if isinstance(error, InvalidCoordinatesError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, LocationNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, WeatherUnavailableError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Weather provider unavailable",
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="METAR generation failed"
    )


@router.get("/station/{icao}", response_model=MetarResponse)
def metar_for_station(
    icao: Annotated[str, Path(pattern=ICAO_PATTERN)],
    settings: Annotated[Settings, Depends(get_settings)],
    service: Annotated[MetarService, Depends(get_metar_service)],
    source: DataSource | None = None,
    units: Units | None = None,
    synthesize: bool = False,
) -> MetarResponse:
    try:
        result = service.for_station(
            icao,
            source=source or settings.default_source,
            units=units or settings.default_units,
            synthesize=synthesize,
        )
    except MetarServiceError as e:
        raise _http_error(e) from e
    return _to_response(result)


@router.get("/coordinates", response_model=MetarResponse)
def metar_for_coordinates(
    lat: Annotated[float, Query(ge=-90.0, le=90.0)],
    lon: Annotated[float, Query(ge=-180.0, le=180.0)],
    settings: Annotated[Settings, Depends(get_settings)],
    service: Annotated[MetarService, Depends(get_metar_service)],
    station: Annotated[str | None, Query(pattern=ICAO_PATTERN)] = None,
    source: DataSource | None = None,
    units: Units | None = None,
) -> MetarResponse:
    try:
        result = service.for_coordinates(
            lat,
            lon,
            station=station,
            source=source or settings.default_source,
            units=units or settings.default_units,
        )
    except MetarServiceError as e:
        raise _http_error(e) from e
    return _to_response(result)


@router.get("/location", response_model=MetarResponse)
def metar_for_location(
    q: Annotated[str, Query(min_length=1, max_length=200)],
    settings: Annotated[Settings, Depends(get_settings)],
    service: Annotated[MetarService, Depends(get_metar_service)],
    station: Annotated[str | None, Query(pattern=ICAO_PATTERN)] = None,
    source: DataSource | None = None,
    units: Units | None = None,
) -> MetarResponse:
    try:
        result = service.for_location(
            q,
            station=station,
            source=source or settings.default_source,
            units=units or settings.default_units,
        )
    except MetarServiceError as e:
        raise _http_error(e) from e
    return _to_response(result)
