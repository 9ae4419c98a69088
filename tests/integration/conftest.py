"""Integration test fixtures: the full app stack over mocked upstream HTTP."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from unified_price.api.app import create_app
from unified_price.core.config import ResolverConfig


@pytest.fixture
def api_config() -> ResolverConfig:
    return ResolverConfig()


@pytest.fixture
def api_app(api_config):
    return create_app(config=api_config)


@pytest.fixture
def client(api_app):
    with TestClient(api_app) as c:
        yield c
