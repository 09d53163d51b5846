import logging

import httpx
from fastapi import FastAPI, Depends, Query, Request
from fastapi.responses import JSONResponse

from .auth import get_current_user_id
from .config import settings
from .db import init_models, get_session
from .errors import STATUS_BY_CODE
from .geocoding import GeocodeResolver
from .logging_config import setup_logging
from .resolution import ResolutionOrchestrator
from .schemas import AddFavoriteRequest, ServiceResponse
from .store import FavoriteLocationStore
from .weather import ForecastFetcher

logger = logging.getLogger(__name__)

app = FastAPI(title="Skycast")


@app.on_event("startup")
async def startup():
    setup_logging()
    await init_models()
    app.state.http_client = httpx.AsyncClient(timeout=settings.UPSTREAM_TIMEOUT)


@app.on_event("shutdown")
async def shutdown():
    client = getattr(app.state, "http_client", None)
    if client is not None:
        await client.aclose()


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared upstream client, opened on startup."""
    return request.app.state.http_client


def get_orchestrator(
    session=Depends(get_session),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> ResolutionOrchestrator:
    return ResolutionOrchestrator(
        store=FavoriteLocationStore(session),
        geocoder=GeocodeResolver(client),
        fetcher=ForecastFetcher(client),
    )


def respond(response: ServiceResponse, status_code: int = 200) -> JSONResponse:
    """Serialize an envelope; failures take the status of their error code."""
    if not response.success:
        status_code = STATUS_BY_CODE.get(response.error, 500)
    return JSONResponse(status_code=status_code, content=response.model_dump(mode="json"))


@app.get("/health")
def health():
    return {"ok": True}


# ---------- Ad-hoc resolution ----------
@app.get("/api/weather")
async def get_weather(
    latitude: float | None = Query(None, ge=-90, le=90),
    longitude: float | None = Query(None, ge=-180, le=180),
    query: str | None = None,
    orchestrator: ResolutionOrchestrator = Depends(get_orchestrator),
):
    return respond(await orchestrator.resolve(latitude, longitude, query))


# ---------- Favorites ----------
@app.post("/api/favorites")
async def add_favorite(
    body: AddFavoriteRequest,
    user_id: int | None = Depends(get_current_user_id),
    orchestrator: ResolutionOrchestrator = Depends(get_orchestrator),
):
    return respond(await orchestrator.add_favorite(user_id, body.location_name), 201)


@app.get("/api/favorites")
async def list_favorites(
    user_id: int | None = Depends(get_current_user_id),
    orchestrator: ResolutionOrchestrator = Depends(get_orchestrator),
):
    return respond(await orchestrator.list_favorites(user_id))


@app.get("/api/favorites/{location_id}")
async def get_favorite(
    location_id: int,
    user_id: int | None = Depends(get_current_user_id),
    orchestrator: ResolutionOrchestrator = Depends(get_orchestrator),
):
    return respond(await orchestrator.get_favorite(user_id, location_id))


@app.delete("/api/favorites/{location_id}")
async def remove_favorite(
    location_id: int,
    user_id: int | None = Depends(get_current_user_id),
    orchestrator: ResolutionOrchestrator = Depends(get_orchestrator),
):
    return respond(await orchestrator.remove_favorite(user_id, location_id))
