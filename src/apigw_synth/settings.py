"""
apigw_synth.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for the HTTP surface.
- Carry the defaults used when callers omit gateway naming inputs.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="APIGW_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "apigw-synth"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Gateway planning
    default_region: str = "us-central1"
    default_gateway_name: str = "gateway"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# The synthesis core never reads settings; only the API layer resolves defaults here
# and passes plain values down.
