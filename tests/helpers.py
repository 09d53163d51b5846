"""
Canned Open-Meteo payloads and mock httpx clients.
"""
from typing import Any, Callable, Dict, Optional
from unittest.mock import AsyncMock

import httpx

from skycast.config import settings

GEOCODING_URL = settings.GEOCODING_API_URL
FORECAST_URL = settings.WEATHER_API_URL


def make_response(json_data: Any = None, status_code: int = 200, content: Optional[bytes] = None) -> httpx.Response:
    """Real httpx.Response bound to a request so raise_for_status works."""
    request = httpx.Request("GET", "https://test")
    if content is not None:
        return httpx.Response(status_code=status_code, content=content, request=request)
    return httpx.Response(status_code=status_code, json=json_data, request=request)


def mock_client(json_data: Any = None, status_code: int = 200) -> AsyncMock:
    """Mock httpx.AsyncClient whose get() always returns the given JSON."""
    client = AsyncMock(spec=httpx.AsyncClient)
    client.get.return_value = make_response(json_data, status_code)
    return client


def route(client: AsyncMock, routes: Dict[str, Callable[[dict], httpx.Response]]) -> AsyncMock:
    """Dispatch client.get on URL; each handler receives the query params."""
    async def get(url, params=None, **kwargs):
        return routes[url](params or {})

    client.get.side_effect = get
    return client


def routed_client(routes: Dict[str, Callable[[dict], httpx.Response]]) -> AsyncMock:
    return route(AsyncMock(spec=httpx.AsyncClient), routes)


def geocoding_payload(name="Roma", latitude=41.89193, longitude=12.51133, country="Italy", admin1="Lazio"):
    return {
        "results": [
            {
                "id": 3169070,
                "name": name,
                "latitude": latitude,
                "longitude": longitude,
                "country": country,
                "admin1": admin1,
                "timezone": "Europe/Rome",
            }
        ]
    }


def forecast_payload(latitude=41.89, longitude=12.51, timezone="Europe/Rome", days=7):
    dates = [f"2025-06-{d:02d}" for d in range(1, days + 1)]
    return {
        "latitude": latitude,
        "longitude": longitude,
        "timezone": timezone,
        "current": {
            "time": "2025-06-01T12:00",
            "temperature_2m": 27.4,
            "relative_humidity_2m": 48,
            "apparent_temperature": 28.1,
            "is_day": 1,
            "precipitation": 0.0,
            "weather_code": 1,
            "wind_speed_10m": 9.7,
            "wind_direction_10m": 240,
        },
        "daily": {
            "time": dates,
            "weather_code": [61] * days,
            "temperature_2m_max": [29.0 + i for i in range(days)],
            "temperature_2m_min": [18.0 + i for i in range(days)],
            "apparent_temperature_max": [30.0] * days,
            "apparent_temperature_min": [17.5] * days,
            "sunrise": [f"{d}T05:36" for d in dates],
            "sunset": [f"{d}T20:40" for d in dates],
            "precipitation_sum": [1.2] * days,
            "precipitation_probability_max": [40] * days,
            "wind_speed_10m_max": [15.3] * days,
            "wind_gusts_10m_max": [30.1] * days,
            "uv_index_max": [7.5] * days,
        },
    }
