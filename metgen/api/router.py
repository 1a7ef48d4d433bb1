from fastapi import APIRouter

from metgen.api.routes import airports, metar

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(metar.router, tags=["metar"])
api_router.include_router(airports.router, tags=["airports"])
