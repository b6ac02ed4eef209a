import logging

import pytest
from admin_registry import registry as registry_module
from admin_registry.config import Settings
from admin_registry.main import create_app
from admin_registry.registry import AdminRegistry
from fastapi.testclient import TestClient


@pytest.fixture(autouse=True)
def _isolate_global_state(monkeypatch):
    # Keep create_app() from replacing pytest's logging handlers.
    monkeypatch.setattr(
        logging.getLogger(), "_admin_registry_logging_configured", True, raising=False
    )
    yield
    registry_module.reset_registry()


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def registry(settings):
    return AdminRegistry(settings)


@pytest.fixture
def admin_client(registry, settings):
    app = create_app(registry, settings=settings, is_admin=lambda _request: True)
    return TestClient(app)


@pytest.fixture
def anonymous_client(registry, settings):
    app = create_app(registry, settings=settings)
    return TestClient(app)
