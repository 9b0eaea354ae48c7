"""
tests.conftest

Shared fixtures for the synthesis tests.

Responsibilities:
- Provide canonical upstream service URLs and a minimal routing configuration.
"""

from __future__ import annotations

import pytest

from apigw_synth.routing.models import APIConfig, Upstream

BACKEND_URL = "https://backend-abc123-uc.a.run.app"
FRONTEND_URL = "https://frontend-abc123-uc.a.run.app"
IDENTITY_EMAIL = "frontend@demo-project.iam.gserviceaccount.com"


@pytest.fixture
def api_config() -> APIConfig:
    return APIConfig(
        backend=Upstream(service_url=BACKEND_URL),
        frontend=Upstream(service_url=FRONTEND_URL),
    )
