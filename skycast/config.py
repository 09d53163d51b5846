from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    DATABASE_URL: str = "sqlite+aiosqlite:///./skycast.db"

    DEBUG: bool = False

    LOG_LEVEL: str = "INFO"

    GEOCODING_API_URL: str = "https://geocoding-api.open-meteo.com/v1/search"
    GEOCODING_LANGUAGE: str = "en"

    WEATHER_API_URL: str = "https://api.open-meteo.com/v1/forecast"
    FORECAST_DAYS: int = 7

    # Upstream providers give no timeout of their own
    UPSTREAM_TIMEOUT: float = 10.0

    MAX_CONCURRENT_WEATHER_REQUESTS: int = 5

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
