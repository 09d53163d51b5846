"""
Pydantic models for the forecast representation and API envelopes.

GeoCandidate and ForecastSnapshot are transient: they are rebuilt on every
request and never persisted.
"""
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class GeoCandidate(BaseModel):
    """Best geocoding match for a free-text query."""
    name: str
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    country: str = ""
    region: Optional[str] = None
    timezone: Optional[str] = None


class CurrentConditions(BaseModel):
    time: str
    temperature: Optional[float] = None
    apparent_temperature: Optional[float] = None
    relative_humidity: Optional[float] = None
    precipitation: Optional[float] = None
    wind_speed: Optional[float] = None
    wind_direction: Optional[float] = None
    is_day: Optional[bool] = None
    weather_code: Optional[int] = None
    weather_description: str


class DailyConditions(BaseModel):
    date: str
    temperature_max: float
    temperature_min: float
    apparent_temperature_max: float
    apparent_temperature_min: float
    sunrise: str
    sunset: str
    precipitation_sum: float
    # None means unknown
    precipitation_probability_max: Optional[float] = None
    wind_speed_max: float
    wind_gusts_max: Optional[float] = None
    uv_index_max: Optional[float] = None
    weather_code: int
    weather_description: str


class ForecastSnapshot(BaseModel):
    location_name: str
    latitude: float
    longitude: float
    timezone: str
    current: Optional[CurrentConditions] = None
    daily: List[DailyConditions] = []


class AddFavoriteRequest(BaseModel):
    location_name: str = Field(min_length=2, max_length=100)


class FavoriteLocationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str = Field(min_length=1, max_length=200)
    latitude: float
    longitude: float


class FavoriteWithForecast(FavoriteLocationOut):
    # None when the forecast could not be fetched
    weather: Optional[ForecastSnapshot] = None


class ServiceResponse(BaseModel, Generic[T]):
    """Envelope returned by every orchestrator operation."""
    success: bool = True
    message: str = ""
    data: Optional[T] = None
    error: Optional[str] = None
    diagnostics: List[str] = []
