"""
Geocoding via the Open-Meteo geocoding API.

The provider ranks its candidates; the first one is taken as-is.
"""
import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from .config import settings
from .errors import EmptyQuery, NoMatch, UpstreamMalformedResponse, UpstreamUnavailable
from .schemas import GeoCandidate

logger = logging.getLogger(__name__)


class GeocodeResolver:
    """Turns a free-text place name into a single GeoCandidate."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: Optional[str] = None,
        language: Optional[str] = None,
    ):
        self.client = client
        self.url = url or settings.GEOCODING_API_URL
        self.language = language or settings.GEOCODING_LANGUAGE

    async def resolve(self, query: Optional[str]) -> GeoCandidate:
        """
        Geocode ``query`` and return the provider's best match.

        Raises:
            EmptyQuery: query is empty or whitespace; no request is made
            NoMatch: the provider returned no candidates
            UpstreamUnavailable: transport or HTTP-status failure
            UpstreamMalformedResponse: body is not the expected JSON shape
        """
        if query is None or not query.strip():
            raise EmptyQuery()

        params = {"name": query, "count": 1, "language": self.language, "format": "json"}
        try:
            r = await self.client.get(self.url, params=params)
            r.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Geocoding request failed for query {query!r}: {e}")
            raise UpstreamUnavailable(
                "Error while retrieving geocoding data. Please try again later."
            ) from e

        try:
            data = r.json()
        except ValueError as e:
            logger.error(f"Geocoding response for query {query!r} is not JSON")
            raise UpstreamMalformedResponse() from e
        if not isinstance(data, dict):
            raise UpstreamMalformedResponse()

        results = data.get("results")
        if results and not isinstance(results, list):
            logger.error(f"Geocoding results for query {query!r} are not a list")
            raise UpstreamMalformedResponse()
        if not results:
            logger.info(f"No geocoding match for query {query!r}")
            raise NoMatch(f"No coordinates found for '{query}'.")

        return _candidate_from_result(results[0], query)


def _candidate_from_result(item: Any, query: str) -> GeoCandidate:
    if not isinstance(item, dict):
        raise UpstreamMalformedResponse()
    try:
        candidate = GeoCandidate(
            name=item["name"],
            latitude=item["latitude"],
            longitude=item["longitude"],
            country=item.get("country") or "",
            region=item.get("admin1"),
            timezone=item.get("timezone"),
        )
    except (KeyError, ValidationError) as e:
        logger.error(f"Unusable geocoding result for query {query!r}: {e}")
        raise UpstreamMalformedResponse() from e

    logger.info(
        f"Geocoded {query!r} to {candidate.name} "
        f"({candidate.latitude}, {candidate.longitude})"
    )
    return candidate
