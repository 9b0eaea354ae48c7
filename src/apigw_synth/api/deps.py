"""
apigw_synth.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide the settings dependency.
"""

from __future__ import annotations

from apigw_synth.settings import Settings, get_settings


def settings_dep() -> Settings:
    return get_settings()
