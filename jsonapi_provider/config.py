"""Settings for building a network provider from the environment."""

from typing import Dict

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderSettings(BaseSettings):
    """
    Connection and logging settings. Values load from ``JSONAPI_PROVIDER_*``
    environment variables or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="JSONAPI_PROVIDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = Field("http://localhost:8000", description="Scheme and host of the JSON:API server.")
    prefix: str = Field("", description="Path prefix prepended to every resource URL, e.g. /api.")
    timeout: float = Field(10.0, gt=0, description="Transport timeout in seconds.")
    headers: Dict[str, str] = Field(default_factory=dict, description="Extra headers sent on every request.")
    log_level: str = Field("WARNING", description="Level of the jsonapi_provider logger.")
    log_json: bool = Field(True, description="Emit structured JSON log records.")
