"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field


class ProviderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    forecast_base_url: str = "https://api.open-meteo.com"
    geocoding_base_url: str = "https://geocoding-api.open-meteo.com"
    reverse_base_url: str = "https://nominatim.openstreetmap.org"
    user_agent: str = "nimbus-weather/0.1.0"
    timeout: float = Field(default=15.0, gt=0.0)
    max_retries: int = Field(default=2, ge=0)
    retry_base_delay: float = Field(default=1.0, ge=0.0)


class SearchConfig(BaseModel):
    model_config = {"extra": "forbid"}

    debounce_ms: int = Field(default=500, ge=0)
    result_limit: int = Field(default=5, ge=1, le=100)


class StartupConfig(BaseModel):
    model_config = {"extra": "forbid"}

    default_latitude: float = Field(default=9.93, ge=-90.0, le=90.0)
    default_longitude: float = Field(default=76.26, ge=-180.0, le=180.0)


class StorageConfig(BaseModel):
    model_config = {"extra": "forbid"}

    db_path: str = "data/nimbus.db"


class NimbusConfig(BaseModel):
    model_config = {"extra": "forbid"}

    providers: ProviderConfig = ProviderConfig()
    search: SearchConfig = SearchConfig()
    startup: StartupConfig = StartupConfig()
    storage: StorageConfig = StorageConfig()
