"""
Composition of geocoding, forecast fetching and favorites.

Every public method returns a ServiceResponse; expected failures never
escape as exceptions.
"""
import asyncio
import logging
from typing import List, Optional, Tuple

from .config import settings
from .errors import MissingInput, ResolutionError, Unauthorized
from .geocoding import GeocodeResolver
from .models import FavoriteLocation
from .schemas import FavoriteWithForecast, ForecastSnapshot, ServiceResponse
from .store import FavoriteLocationStore
from .weather import ForecastFetcher, normalize

logger = logging.getLogger(__name__)


def _failure(error: ResolutionError, diagnostics: Optional[List[str]] = None) -> ServiceResponse:
    return ServiceResponse(
        success=False,
        message=error.message,
        error=error.code,
        diagnostics=diagnostics or [],
    )


def _require_user(user_id: Optional[int]) -> int:
    if user_id is None:
        raise Unauthorized()
    return user_id


class ResolutionOrchestrator:
    def __init__(
        self,
        store: FavoriteLocationStore,
        geocoder: GeocodeResolver,
        fetcher: ForecastFetcher,
        max_concurrency: Optional[int] = None,
    ):
        self.store = store
        self.geocoder = geocoder
        self.fetcher = fetcher
        self.max_concurrency = max_concurrency or settings.MAX_CONCURRENT_WEATHER_REQUESTS

    async def forecast_for(
        self,
        latitude: float,
        longitude: float,
        name: Optional[str],
        diagnostics: List[str],
    ) -> ForecastSnapshot:
        raw = await self.fetcher.fetch(latitude, longitude)
        return normalize(raw, name, diagnostics)

    async def resolve(
        self,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        query: Optional[str] = None,
    ) -> ServiceResponse[ForecastSnapshot]:
        """
        Ad-hoc resolution. Coordinates win over query when both are given;
        the query then only serves as display name.
        """
        diagnostics: List[str] = []
        has_query = query is not None and query.strip() != ""
        try:
            if latitude is not None and longitude is not None:
                logger.info(f"Resolving coordinates lat={latitude}, lon={longitude}, query={query!r}")
                name = query if has_query else None
            elif has_query:
                candidate = await self.geocoder.resolve(query)
                latitude, longitude, name = candidate.latitude, candidate.longitude, candidate.name
            else:
                raise MissingInput()
            snapshot = await self.forecast_for(latitude, longitude, name, diagnostics)
        except ResolutionError as e:
            logger.warning(f"Resolution failed for lat={latitude}, lon={longitude}, query={query!r}: {e.message}")
            return _failure(e, diagnostics)

        return ServiceResponse(
            data=snapshot,
            message="Weather data retrieved successfully.",
            diagnostics=diagnostics,
        )

    async def _attach_forecast(
        self, row: FavoriteLocation, diagnostics: List[str]
    ) -> FavoriteWithForecast:
        """Favorite plus its forecast; a failed fetch leaves ``weather`` empty."""
        item = FavoriteWithForecast.model_validate(row)
        try:
            item.weather = await self.forecast_for(row.latitude, row.longitude, row.name, diagnostics)
        except ResolutionError as e:
            message = f"Failed to get weather for favorite location '{row.name}' (id={row.id}): {e.message}"
            logger.warning(message)
            diagnostics.append(message)
        return item

    async def add_favorite(
        self, user_id: Optional[int], location_name: str
    ) -> ServiceResponse[FavoriteWithForecast]:
        diagnostics: List[str] = []
        try:
            user_id = _require_user(user_id)
            logger.info(f"User {user_id} adding favorite location {location_name!r}")
            candidate = await self.geocoder.resolve(location_name)
            row = await self.store.add(user_id, candidate)
        except ResolutionError as e:
            logger.warning(f"User {user_id} - could not add favorite {location_name!r}: {e.message}")
            return _failure(e)

        item = await self._attach_forecast(row, diagnostics)
        return ServiceResponse(
            data=item,
            message=f"Location '{row.name}' added to favorites.",
            diagnostics=diagnostics,
        )

    async def list_favorites(
        self, user_id: Optional[int]
    ) -> ServiceResponse[List[FavoriteWithForecast]]:
        try:
            user_id = _require_user(user_id)
        except ResolutionError as e:
            return _failure(e)

        rows = await self.store.list(user_id)
        sem = asyncio.Semaphore(self.max_concurrency)

        async def one(row: FavoriteLocation) -> Tuple[FavoriteWithForecast, List[str]]:
            own: List[str] = []
            async with sem:
                return await self._attach_forecast(row, own), own

        tasks = [asyncio.ensure_future(one(row)) for row in rows]
        try:
            # gather keeps input order
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        items = [item for item, _ in results]
        diagnostics = [d for _, own in results for d in own]

        logger.info(f"User {user_id} - retrieved {len(items)} favorite locations")
        return ServiceResponse(
            data=items,
            message="Favorite locations retrieved." if items else "No favorite locations found for user.",
            diagnostics=diagnostics,
        )

    async def get_favorite(
        self, user_id: Optional[int], location_id: int
    ) -> ServiceResponse[FavoriteWithForecast]:
        diagnostics: List[str] = []
        try:
            row = await self.store.get(_require_user(user_id), location_id)
        except ResolutionError as e:
            return _failure(e)

        item = await self._attach_forecast(row, diagnostics)
        return ServiceResponse(
            data=item,
            message="Favorite location retrieved.",
            diagnostics=diagnostics,
        )

    async def remove_favorite(
        self, user_id: Optional[int], location_id: int
    ) -> ServiceResponse[str]:
        try:
            row = await self.store.remove(_require_user(user_id), location_id)
        except ResolutionError as e:
            return _failure(e)
        return ServiceResponse(
            message=f"Favorite location '{row.name}' (ID: {location_id}) deleted successfully.",
        )
