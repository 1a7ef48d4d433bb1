from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware

from metgen.api.router import api_router
from metgen.clients.aviationweather import AviationWeatherClient
from metgen.clients.openweather import OpenWeatherClient
from metgen.core.config import Settings, load_settings
from metgen.core.logging_config import configure_logging
from metgen.repositories.airports import AirportDirectory, UserAirportStore

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.settings = settings
        app.state.openweather_client = OpenWeatherClient(
            api_key=settings.openweather_api_key.get_secret_value(),
            one_call_api_key=settings.one_call_api_key.get_secret_value(),
            user_agent=settings.user_agent,
            timeout_seconds=settings.http_timeout_seconds,
        )
        app.state.aviation_client = AviationWeatherClient(
            user_agent=settings.user_agent,
            timeout_seconds=settings.http_timeout_seconds,
        )
        app.state.airport_directory = AirportDirectory.from_csv(settings.airports_csv_path)
        app.state.user_airport_store = UserAirportStore(settings.user_airports_path)
        logger.info(
            "Loaded %d airports from %s",
            len(app.state.airport_directory),
            settings.airports_csv_path,
        )
        if not settings.openweather_api_key.get_secret_value():
            logger.warning("METGEN_OPENWEATHER_API_KEY is not set; synthesis will fail")

        yield
        app.state.openweather_client.close()
        app.state.aviation_client.close()

    docs_enabled = settings.docs_enabled and not settings.is_production
    app = FastAPI(
        title="METGen API",
        version="0.9.5",
        debug=settings.debug,
        docs_url="/docs" if docs_enabled else None,
        redoc_url=None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(GZipMiddleware, minimum_size=1024)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    if settings.trusted_hosts:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

    @app.middleware("http")
    async def security_headers(request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if settings.is_production:
            response.headers.setdefault(
                "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
            )
        return response

    @app.get("/", tags=["meta"])
    def root():
        return {"name": "metgen", "status": "ok"}

    app.include_router(api_router)
    return app
