"""
Pytest configuration and shared fixtures for AgVote governance tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Use AsyncMock for port doubles in unit tests
- Use the in-memory stubs for scenario and integration tests
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

import pytest

from agvote.domain.models.tenant import TenantContext
from tests.helpers.factories import TENANT_ID


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from agvote import __version__

    return __version__


@pytest.fixture
def tenant() -> TenantContext:
    """Operator context for the default test tenant."""
    return TenantContext(tenant_id=TENANT_ID, user_id="operator-1", role="operator")


@pytest.fixture
def admin_tenant() -> TenantContext:
    """Admin context for the default test tenant."""
    return TenantContext(tenant_id=TENANT_ID, user_id="admin-1", role="admin")
