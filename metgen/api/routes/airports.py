from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status

from metgen.api.deps import get_user_airport_store
from metgen.models.metar import Airport
from metgen.repositories.airports import UserAirportStore
from metgen.schemas.metar import ICAO_PATTERN, AirportCreate, AirportRead

router = APIRouter(prefix="/airports")


@router.get("", response_model=list[AirportRead])
def list_airports(
    store: Annotated[UserAirportStore, Depends(get_user_airport_store)],
) -> list[AirportRead]:
    return [AirportRead.model_validate(a.__dict__) for a in store.list_airports()]


@router.post("", response_model=AirportRead, status_code=status.HTTP_201_CREATED)
def save_airport(
    payload: AirportCreate,
    store: Annotated[UserAirportStore, Depends(get_user_airport_store)],
) -> AirportRead:
    airport = Airport(
        icao=payload.icao.upper(), latitude=payload.latitude, longitude=payload.longitude
    )
    try:
        saved = store.save(airport)
    except OSError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Airport store unavailable",
        ) from e
    if not saved:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Airport {airport.icao} is already saved",
        )
    return AirportRead.model_validate(airport.__dict__)


@router.delete("/{icao}", status_code=status.HTTP_204_NO_CONTENT)
def delete_airport(
    icao: Annotated[str, Path(pattern=ICAO_PATTERN)],
    store: Annotated[UserAirportStore, Depends(get_user_airport_store)],
) -> Response:
    try:
        deleted = store.delete(icao)
    except OSError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Airport store unavailable",
        ) from e
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Airport not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
