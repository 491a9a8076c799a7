"""Test fixtures for cortex-assessment.

Builders live in ``tests/factories.py``; this module adds shared profiles
and the async API client.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from cortex_assessment.core.profile import ContextProfile
from cortex_assessment.main import app
from tests.factories import make_profile


@pytest.fixture()
def neutral_profile() -> ContextProfile:
    """Context Profile that triggers no gate and no metric override."""
    return make_profile()


@pytest.fixture()
def regulated_profile() -> ContextProfile:
    """Heavily regulated, safety-critical profile (require_hitl + assurance_cadence)."""
    return make_profile(regulatory_intensity=4, safety_criticality=3)


@pytest_asyncio.fixture()
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async test client bound to the FastAPI app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()
