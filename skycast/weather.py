"""
Weather data fetching and normalization module.

Fetches current conditions and a daily forecast from the Open-Meteo API and
maps the column-oriented payload onto ForecastSnapshot.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from .config import settings
from .errors import UpstreamMalformedResponse, UpstreamUnavailable
from .schemas import CurrentConditions, DailyConditions, ForecastSnapshot

logger = logging.getLogger(__name__)

CURRENT_FIELDS: str = (
    "temperature_2m,relative_humidity_2m,apparent_temperature,is_day,"
    "precipitation,rain,showers,snowfall,weather_code,wind_speed_10m,wind_direction_10m"
)
DAILY_FIELDS: str = (
    "weather_code,temperature_2m_max,temperature_2m_min,"
    "apparent_temperature_max,apparent_temperature_min,sunrise,sunset,"
    "precipitation_sum,rain_sum,showers_sum,snowfall_sum,"
    "precipitation_probability_max,wind_speed_10m_max,wind_gusts_10m_max,uv_index_max"
)

# Payload array -> DailyConditions field. A day missing any of these is dropped.
REQUIRED_DAILY: Dict[str, str] = {
    "temperature_2m_max": "temperature_max",
    "temperature_2m_min": "temperature_min",
    "apparent_temperature_max": "apparent_temperature_max",
    "apparent_temperature_min": "apparent_temperature_min",
    "weather_code": "weather_code",
    "sunrise": "sunrise",
    "sunset": "sunset",
    "precipitation_sum": "precipitation_sum",
    "wind_speed_10m_max": "wind_speed_max",
}

# These may be shorter than the date array; missing or non-numeric entries become None.
OPTIONAL_DAILY: Dict[str, str] = {
    "precipitation_probability_max": "precipitation_probability_max",
    "wind_gusts_10m_max": "wind_gusts_max",
    "uv_index_max": "uv_index_max",
}

WEATHER_DESCRIPTIONS: Dict[int, str] = {
    0: "Clear sky",
    1: "Mostly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Light rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Light snowfall",
    73: "Moderate snowfall",
    75: "Heavy snowfall",
    77: "Snow grains",
    80: "Light rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Light snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with light hail",
    99: "Thunderstorm with heavy hail",
}
UNAVAILABLE: str = "Unavailable"


class ForecastFetcher:
    """Retrieves the raw current + daily payload for a coordinate pair."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: Optional[str] = None,
        forecast_days: Optional[int] = None,
    ):
        self.client = client
        self.url = url or settings.WEATHER_API_URL
        self.forecast_days = forecast_days or settings.FORECAST_DAYS

    async def fetch(self, latitude: float, longitude: float) -> Dict[str, Any]:
        """
        Fetch the forecast payload from Open-Meteo.

        Coordinates are sent unchanged; the provider rejects invalid ones.

        Args:
            latitude: Latitude in decimal degrees
            longitude: Longitude in decimal degrees

        Returns:
            Raw JSON object as returned by the provider

        Raises:
            UpstreamUnavailable: network error, timeout or non-2xx status
            UpstreamMalformedResponse: body is not a JSON object
        """
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "current": CURRENT_FIELDS,
            "daily": DAILY_FIELDS,
            "timezone": "auto",
            "forecast_days": self.forecast_days,
        }
        logger.info(f"Fetching forecast for lat={latitude}, lon={longitude}")
        try:
            r = await self.client.get(self.url, params=params)
            r.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Forecast request failed for lat={latitude}, lon={longitude}: {e}")
            raise UpstreamUnavailable(
                "Error while retrieving weather data. Please try again later."
            ) from e

        try:
            payload = r.json()
        except ValueError as e:
            logger.error(f"Forecast response for lat={latitude}, lon={longitude} is not JSON")
            raise UpstreamMalformedResponse() from e
        if not isinstance(payload, dict):
            raise UpstreamMalformedResponse()
        return payload


def describe_weather_code(code: Optional[int]) -> str:
    """
    Convert WMO weather code to human-readable description.

    Args:
        code: WMO weather code integer

    Returns:
        Description string, "Unavailable" for None or unknown codes
    """
    if code is None:
        return UNAVAILABLE
    return WEATHER_DESCRIPTIONS.get(code, UNAVAILABLE)


def location_name_from_timezone(timezone: Optional[str]) -> str:
    """Last path segment of an IANA zone, e.g. "Europe/Rome" -> "Rome"."""
    if not timezone:
        return ""
    return timezone.rsplit("/", 1)[-1]


def normalize(
    raw: Dict[str, Any],
    explicit_name: Optional[str] = None,
    diagnostics: Optional[List[str]] = None,
) -> ForecastSnapshot:
    """
    Map a raw Open-Meteo payload onto ForecastSnapshot.

    Args:
        raw: Payload returned by ForecastFetcher.fetch
        explicit_name: Display name chosen by the caller, if any
        diagnostics: When given, a message is appended for every dropped day
            and every ignored optional value

    Returns:
        ForecastSnapshot with only the days that carry every required field

    Raises:
        UpstreamMalformedResponse: payload lacks numeric coordinates
    """
    if not isinstance(raw, dict):
        raise UpstreamMalformedResponse()
    latitude = raw.get("latitude")
    longitude = raw.get("longitude")
    if not isinstance(latitude, (int, float)) or not isinstance(longitude, (int, float)):
        raise UpstreamMalformedResponse("Weather payload has no coordinates.")

    timezone = raw.get("timezone")
    if not isinstance(timezone, str):
        timezone = ""
    location_name = explicit_name or location_name_from_timezone(timezone)

    return ForecastSnapshot(
        location_name=location_name,
        latitude=latitude,
        longitude=longitude,
        timezone=timezone,
        current=_map_current(raw.get("current")),
        daily=_map_daily(raw.get("daily"), latitude, longitude, diagnostics),
    )


def _map_current(current: Any) -> Optional[CurrentConditions]:
    if not isinstance(current, dict):
        return None
    code = current.get("weather_code")
    is_day = current.get("is_day")
    try:
        return CurrentConditions(
            time=current.get("time") or "",
            temperature=current.get("temperature_2m"),
            apparent_temperature=current.get("apparent_temperature"),
            relative_humidity=current.get("relative_humidity_2m"),
            precipitation=current.get("precipitation"),
            wind_speed=current.get("wind_speed_10m"),
            wind_direction=current.get("wind_direction_10m"),
            is_day=None if is_day is None else bool(is_day),
            weather_code=code,
            weather_description=describe_weather_code(code if isinstance(code, (int, float)) else None),
        )
    except ValidationError as e:
        logger.warning(f"Ignoring unusable current conditions: {e.error_count()} invalid field(s)")
        return None


def _value_at(daily: Dict[str, Any], key: str, index: int) -> Any:
    """Value at ``index`` of column ``key``, or None if the column is short or absent."""
    column = daily.get(key)
    if not isinstance(column, list) or index >= len(column):
        return None
    return column[index]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _map_daily(
    daily: Any,
    latitude: float,
    longitude: float,
    diagnostics: Optional[List[str]],
) -> List[DailyConditions]:
    if not isinstance(daily, dict):
        return []
    dates = daily.get("time")
    if not isinstance(dates, list):
        return []

    out: List[DailyConditions] = []
    for i, day in enumerate(dates):
        values = {field: _value_at(daily, key, i) for key, field in REQUIRED_DAILY.items()}
        missing = [key for key, field in REQUIRED_DAILY.items() if values[field] is None]
        if day is None or missing:
            message = (
                f"Skipping day index {i} at lat={latitude}, lon={longitude}: "
                f"missing {', '.join(missing) or 'time'}"
            )
            logger.warning(message)
            if diagnostics is not None:
                diagnostics.append(message)
            continue

        for key, field in OPTIONAL_DAILY.items():
            value = _value_at(daily, key, i)
            if value is not None and not _is_number(value):
                message = f"Ignoring {key} at day index {i}: {value!r} is not a number"
                logger.warning(message)
                if diagnostics is not None:
                    diagnostics.append(message)
                value = None
            values[field] = value

        try:
            out.append(DailyConditions(
                date=day,
                weather_description=describe_weather_code(
                    values["weather_code"] if isinstance(values["weather_code"], (int, float)) else None
                ),
                **values,
            ))
        except ValidationError as e:
            message = f"Skipping day index {i} at lat={latitude}, lon={longitude}: {e.error_count()} invalid field(s)"
            logger.warning(message)
            if diagnostics is not None:
                diagnostics.append(message)
    return out
