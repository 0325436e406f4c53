from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.dependencies.rate_limits import get_limiter, setup_rate_limiter
from api.router import api_router
from infrastructure.configuration import Settings
from infrastructure.services.providers import get_notification_orchestrator, get_settings
from modules.notifications import NotificationOrchestrator


def create_test_app(routers) -> FastAPI:
    """Fresh FastAPI app with rate limiting and the given routers."""
    app = FastAPI()
    setup_rate_limiter(app)
    if not isinstance(routers, list):
        routers = [routers]
    for router in routers:
        app.include_router(router)
    return app


@pytest.fixture(autouse=True)
def reset_rate_limits():
    get_limiter().reset()
    yield
    get_limiter().reset()


@pytest.fixture
def mock_orchestrator():
    return MagicMock(spec=NotificationOrchestrator)


@pytest.fixture
def app(mock_orchestrator):
    app = create_test_app(api_router)
    app.dependency_overrides[get_notification_orchestrator] = lambda: mock_orchestrator
    app.dependency_overrides[get_settings] = lambda: Settings(GIT_SHA="abc123")
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)
