from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_VERSION = "0.1"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    version: str = Field(default=DEFAULT_VERSION, alias="VERSION")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8080, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: Literal["pipe", "json"] = Field(default="pipe", alias="LOG_FORMAT")

    # Demo latency injection; keep disabled outside of load experiments.
    simulate_latency: bool = Field(default=False, alias="SIMULATE_LATENCY")
    simulate_latency_max_seconds: int = Field(default=3, ge=0, alias="SIMULATE_LATENCY_MAX_SECONDS")

    metrics_path_label: Literal["uri", "route"] = Field(default="uri", alias="METRICS_PATH_LABEL")
    recover_handler_errors: bool = Field(default=True, alias="RECOVER_HANDLER_ERRORS")

    @field_validator("version", mode="before")
    @classmethod
    def _default_empty_version(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_VERSION
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
