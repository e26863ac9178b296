"""Client-side configuration."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TIMEOUT_SECONDS = 30.0


class ClientSettings(BaseSettings):
    """Where the booking service lives and how long to wait for it."""

    api_url: str = Field("http://localhost:8000/api", alias="AYAMBIL_API_URL")
    timeout_seconds: float = Field(DEFAULT_TIMEOUT_SECONDS, gt=0, alias="AYAMBIL_API_TIMEOUT")

    model_config = SettingsConfigDict(case_sensitive=False, extra="ignore")


@lru_cache
def get_client_settings() -> ClientSettings:
    return ClientSettings()  # type: ignore[call-arg]
