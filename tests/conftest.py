"""
Global pytest configuration and fixtures for the Tenantboard API test suite.
"""

import os
from typing import Generator
from unittest.mock import AsyncMock, Mock, patch

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before settings are imported
os.environ["JWT_SECRET"] = "test-secret-key-for-testing-only-32-chars"

from tenantboard.core.database import get_db  # noqa: E402
from tenantboard.domains.widgets.routes import get_widget_service  # noqa: E402
from tenantboard.domains.widgets.service import WidgetService  # noqa: E402
from tenantboard.main import app  # noqa: E402
from tenantboard.shared.permissions.dependencies import get_catalog  # noqa: E402

# Import fixtures from fixture modules
from tests.fixtures.auth_fixtures import *  # noqa: F403, F401, E402
from tests.fixtures.widget_fixtures import *  # noqa: F403, F401, E402


@pytest.fixture
def mock_prisma() -> Mock:
    """
    Mock Prisma client for unit tests that don't need real database.
    """
    mock_db = Mock()
    # Make async methods return AsyncMock
    mock_db.user.find_first = AsyncMock()
    mock_db.dashboardwidget.find_unique = AsyncMock()
    mock_db.dashboardwidget.find_first = AsyncMock()
    mock_db.dashboardwidget.find_many = AsyncMock()
    mock_db.dashboardwidget.count = AsyncMock()
    mock_db.dashboardwidget.create = AsyncMock()
    mock_db.dashboardwidget.update = AsyncMock()
    mock_db.dashboardwidget.delete = AsyncMock()
    return mock_db


@pytest.fixture
def test_client(
    widget_store, role_store, catalog
) -> Generator[TestClient, None, None]:
    """
    FastAPI test client wired to the in-memory stores.

    The role store is patched into principal resolution so requests go
    through the real JWT and permission dependencies.
    """
    app.dependency_overrides[get_db] = lambda: Mock()
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_widget_service] = lambda: WidgetService(widget_store)

    with patch(
        "tenantboard.shared.permissions.dependencies.PrismaRoleStore",
        return_value=role_store,
    ):
        yield TestClient(app)

    app.dependency_overrides.clear()
