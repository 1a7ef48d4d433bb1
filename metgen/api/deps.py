from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from metgen.clients.aviationweather import AviationWeatherClient
from metgen.clients.openweather import OpenWeatherClient
from metgen.core.config import Settings
from metgen.repositories.airports import AirportDirectory, UserAirportStore
from metgen.services.metar import MetarService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_openweather_client(request: Request) -> OpenWeatherClient:
    return request.app.state.openweather_client


def get_aviation_client(request: Request) -> AviationWeatherClient:
    return request.app.state.aviation_client


def get_airport_directory(request: Request) -> AirportDirectory:
    return request.app.state.airport_directory


def get_user_airport_store(request: Request) -> UserAirportStore:
    return request.app.state.user_airport_store


def get_metar_service(
    openweather: Annotated[OpenWeatherClient, Depends(get_openweather_client)],
    aviation: Annotated[AviationWeatherClient, Depends(get_aviation_client)],
    directory: Annotated[AirportDirectory, Depends(get_airport_directory)],
    user_airports: Annotated[UserAirportStore, Depends(get_user_airport_store)],
) -> MetarService:
    return MetarService(
        openweather=openweather,
        aviation=aviation,
        directory=directory,
        user_airports=user_airports,
    )
