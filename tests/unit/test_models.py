"""Tests for unified_price.core.models."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from unified_price.core.exceptions import MissingDataError, NoDataError, SourceError
from unified_price.core.models import (
    CryptoPrice,
    EquityPrice,
    Failure,
    FailureKind,
    FundNav,
    InstrumentClass,
    NavKind,
    UnifiedPrice,
)


class TestEnums:
    def test_instrument_class_values(self):
        assert {c.value for c in InstrumentClass} == {"stock", "fund", "crypto"}

    def test_nav_kind_values(self):
        assert NavKind.REALTIME == "realtime"
        assert NavKind.HISTORICAL == "historical"


class TestSourceRecords:
    def test_equity_date_optional(self):
        p = EquityPrice(price=189.84, currency="USD")
        assert p.date is None

    def test_fund_nav_parses_iso_date(self):
        nav = FundNav(nav="1.2345", date="2024-01-02", kind=NavKind.HISTORICAL)
        assert nav.date == date(2024, 1, 2)
        assert nav.nav == "1.2345"

    def test_fund_nav_strips_whitespace(self):
        nav = FundNav(nav=" 1.2345 ", date="2024-01-02", kind="realtime")
        assert nav.nav == "1.2345"
        assert nav.kind is NavKind.REALTIME

    def test_fund_nav_rejects_non_numeric(self):
        with pytest.raises(ValidationError, match="decimal string"):
            FundNav(nav="--", date="2024-01-02", kind=NavKind.HISTORICAL)

    def test_fund_nav_rejects_bad_date(self):
        with pytest.raises(ValidationError):
            FundNav(nav="1.0", date="暂无数据", kind=NavKind.HISTORICAL)

    def test_crypto_currency_fixed(self):
        assert CryptoPrice(price=42000.0).currency == "USD"
        with pytest.raises(ValidationError):
            CryptoPrice(price=1.0, currency="EUR")

    def test_frozen(self):
        p = EquityPrice(price=1.0, currency="USD")
        with pytest.raises(Exception):
            p.price = 2.0  # type: ignore[misc]


class TestUnifiedPrice:
    def test_originals_must_come_in_pairs(self):
        with pytest.raises(ValidationError, match="both be set"):
            UnifiedPrice(price=1.0, currency="USD", original_price=7.0)

    def test_accepts_aliases(self):
        p = UnifiedPrice(price=1.0, currency="USD", originalPrice=7.1, originalCurrency="CNY")
        assert p.original_price == 7.1
        assert p.original_currency == "CNY"

    def test_converted_returns_new_instance(self):
        base = UnifiedPrice(price=2.0, currency="CNY", date=date(2024, 5, 1), kind="realtime")
        converted = base.converted(0.14, "USD")

        assert converted is not base
        assert base.currency == "CNY"
        assert base.original_price is None
        assert converted.price == pytest.approx(0.28)
        assert converted.currency == "USD"
        assert converted.original_price == 2.0
        assert converted.original_currency == "CNY"
        assert converted.date == date(2024, 5, 1)
        assert converted.kind == "realtime"

    def test_payload_uses_camel_case_and_omits_absent(self):
        p = UnifiedPrice(price=2.0, currency="CNY", date=date(2024, 5, 1)).converted(0.5, "USD")
        assert p.to_payload() == {
            "price": 1.0,
            "currency": "USD",
            "date": "2024-05-01",
            "originalPrice": 2.0,
            "originalCurrency": "CNY",
        }

    def test_payload_without_conversion(self):
        p = UnifiedPrice(price=189.84, currency="USD")
        assert p.to_payload() == {"price": 189.84, "currency": "USD"}


class TestFailure:
    def test_from_error_keeps_kind_and_context(self):
        exc = MissingDataError("no rate", context={"field": "rates.XYZ"})
        f = Failure.from_error("fx", exc)
        assert f.kind is FailureKind.MISSING_DATA
        assert f.source == "fx"
        assert f.message == "no rate"
        assert f.context == {"field": "rates.XYZ"}

    def test_no_data_kind(self):
        assert Failure.from_error("fund", NoDataError("empty")).kind is FailureKind.NO_DATA

    def test_bare_source_error_maps_to_parse(self):
        assert Failure.from_error("fund", SourceError("odd")).kind is FailureKind.PARSE

    def test_str(self):
        f = Failure(kind=FailureKind.TRANSPORT, source="equity", message="HTTP 404")
        assert str(f) == "equity transport: HTTP 404"
