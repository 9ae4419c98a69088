"""Tests for the FastAPI REST API module."""

from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

import unified_price
from unified_price.api.app import create_app
from unified_price.api.deps import get_resolver
from unified_price.core.config import APIConfig, ResolverConfig
from unified_price.core.models import UnifiedPrice


# -- Fixtures --


def _make_config(api_key=None):
    return ResolverConfig(api=APIConfig(api_key=api_key))


@pytest.fixture
def fake_resolver():
    resolver = AsyncMock()
    resolver.resolve.return_value = UnifiedPrice(
        price=0.28,
        currency="USD",
        date=date(2024, 5, 1),
        kind="realtime",
        original_price=2.0,
        original_currency="CNY",
    )
    return resolver


def _client(config, resolver):
    app = create_app(config=config)
    app.dependency_overrides[get_resolver] = lambda: resolver
    return TestClient(app)


@pytest.fixture
def client(fake_resolver):
    with _client(_make_config(), fake_resolver) as c:
        yield c


@pytest.fixture
def authed_client(fake_resolver):
    with _client(_make_config(api_key="test-secret-key"), fake_resolver) as c:
        yield c


# -- Health --


class TestHealth:
    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "version": unified_price.__version__}


# -- Prices --


class TestPrice:
    def test_converted_payload_uses_camel_case(self, client, fake_resolver):
        resp = client.get("/api/price/000001", params={"target_currency": "USD"})
        assert resp.status_code == 200
        assert resp.json() == {
            "price": 0.28,
            "currency": "USD",
            "date": "2024-05-01",
            "kind": "realtime",
            "originalPrice": 2.0,
            "originalCurrency": "CNY",
        }
        fake_resolver.resolve.assert_awaited_once_with("000001", None, "USD")

    def test_absent_fields_are_omitted(self, client, fake_resolver):
        fake_resolver.resolve.return_value = UnifiedPrice(price=189.84, currency="USD")
        resp = client.get("/api/price/AAPL")
        assert resp.json() == {"price": 189.84, "currency": "USD"}

    def test_unresolvable_is_null(self, client, fake_resolver):
        fake_resolver.resolve.return_value = None
        resp = client.get("/api/price/NOPE")
        assert resp.status_code == 200
        assert resp.json() is None

    def test_date_query_is_parsed(self, client, fake_resolver):
        client.get("/api/price/AAPL", params={"date": "2024-01-02"})
        fake_resolver.resolve.assert_awaited_once_with("AAPL", date(2024, 1, 2), None)

    def test_invalid_date_rejected(self, client, fake_resolver):
        resp = client.get("/api/price/AAPL", params={"date": "02/01/2024"})
        assert resp.status_code == 422
        fake_resolver.resolve.assert_not_awaited()

    def test_currency_must_be_three_letters(self, client):
        resp = client.get("/api/price/AAPL", params={"target_currency": "DOLLARS"})
        assert resp.status_code == 422


# -- Auth --


class TestApiKey:
    def test_missing_key_rejected(self, authed_client):
        resp = authed_client.get("/api/price/AAPL")
        assert resp.status_code == 401
        assert resp.json()["error"] == "Unauthorized"

    def test_wrong_key_rejected(self, authed_client):
        resp = authed_client.get("/api/price/AAPL", headers={"X-API-Key": "nope"})
        assert resp.status_code == 401

    def test_valid_key_accepted(self, authed_client):
        resp = authed_client.get(
            "/api/price/AAPL", headers={"X-API-Key": "test-secret-key"}
        )
        assert resp.status_code == 200

    def test_health_exempt(self, authed_client):
        assert authed_client.get("/api/health").status_code == 200

    def test_no_key_configured_means_open(self, client):
        assert client.get("/api/price/AAPL").status_code == 200
