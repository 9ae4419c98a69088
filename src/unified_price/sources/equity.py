"""Equity price source: Yahoo Finance chart API.

Uses the unauthenticated ``/v8/finance/chart/`` endpoint in two modes:

- current quote: ``meta.regularMarketPrice`` and ``meta.currency``;
- historical: a one-day ``[date, date + 1d)`` window, first bar's close.

The historical window is not checked against the bar that comes back. On a
market holiday the API may answer with the nearest trading bar, and that
bar's date is what gets reported.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Any

from unified_price.core.exceptions import MissingDataError, ParseError
from unified_price.core.models import EquityPrice
from unified_price.sources.base import BaseSource

_CHART_PATH = "/v8/finance/chart"


def day_window(on: date) -> tuple[int, int]:
    """Epoch-second bounds of ``[on 00:00 UTC, next day 00:00 UTC)``."""
    start = datetime.combine(on, time.min, tzinfo=timezone.utc)
    end = start + timedelta(days=1)
    return int(start.timestamp()), int(end.timestamp())


def _chart_result(payload: Any, symbol: str) -> dict:
    """Return ``chart.result[0]`` or raise MissingDataError."""
    if not isinstance(payload, dict):
        raise ParseError(
            f"Chart response for {symbol} is not a JSON object",
            context={"reason": "shape"},
        )
    chart = payload.get("chart") or {}
    error = chart.get("error")
    if error:
        if not isinstance(error, dict):
            error = {"description": str(error)}
        raise MissingDataError(
            f"Chart API error for {symbol}: {error.get('description')}",
            context={"field": "chart.error", "code": error.get("code")},
        )
    results = chart.get("result") or []
    if not results or not isinstance(results[0], dict):
        raise MissingDataError(
            f"Chart API returned no result for {symbol}",
            context={"field": "chart.result[0]"},
        )
    return results[0]


def parse_current_quote(payload: Any, symbol: str) -> EquityPrice:
    """Extract the regular-market price from a chart response."""
    result = _chart_result(payload, symbol)
    meta = result.get("meta") or {}
    price = meta.get("regularMarketPrice")
    currency = meta.get("currency")
    if not price or not currency:
        raise MissingDataError(
            f"No regular market price for {symbol}",
            context={"field": "chart.result[0].meta.regularMarketPrice"},
        )
    return EquityPrice(price=float(price), currency=currency)


def parse_historical_close(payload: Any, symbol: str) -> EquityPrice:
    """Extract the first timestamp/close pair from a chart response."""
    result = _chart_result(payload, symbol)
    timestamps = result.get("timestamp") or []
    quotes = (result.get("indicators") or {}).get("quote") or [{}]
    closes = (quotes[0] or {}).get("close") or []
    if not timestamps or not closes or not timestamps[0] or not closes[0]:
        raise MissingDataError(
            f"No bar in the requested window for {symbol}",
            context={"field": "chart.result[0].indicators.quote[0].close[0]"},
        )
    currency = (result.get("meta") or {}).get("currency")
    if not currency:
        raise MissingDataError(
            f"No currency in chart metadata for {symbol}",
            context={"field": "chart.result[0].meta.currency"},
        )
    bar_date = datetime.fromtimestamp(timestamps[0], tz=timezone.utc).date()
    return EquityPrice(price=float(closes[0]), currency=currency, date=bar_date)


class EquitySource(BaseSource):
    """Listed equities, optionally exchange-suffixed (``600900.SS``, ``AAPL``)."""

    name = "equity"

    async def _fetch(self, code: str, on: date | None) -> EquityPrice:
        url = f"{self._base_url}{_CHART_PATH}/{code}"
        if on is None:
            payload = await self._fetcher.get_json(url)
            return parse_current_quote(payload, code)

        period1, period2 = day_window(on)
        params = {
            "period1": str(period1),
            "period2": str(period2),
            "interval": "1d",
        }
        payload = await self._fetcher.get_json(url, params=params)
        return parse_historical_close(payload, code)
