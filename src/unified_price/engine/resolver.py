"""Unified price resolution: classify, fetch, convert.

    code → classify → PriceSource.fetch → provisional UnifiedPrice
         → CurrencyConverter.get_rate (only if a different currency is asked)
         → UnifiedPrice | None

Sources and the converter never raise; they hand back ``Failure`` values.
``resolve_result`` exposes those failures, ``resolve`` maps them to None.
"""

from __future__ import annotations

import datetime as dt
import logging
import re
from typing import Callable, Mapping, Protocol

from unified_price.core.config import ResolverConfig, SourcesConfig
from unified_price.core.exceptions import ParseError
from unified_price.core.models import (
    CryptoPrice,
    EquityPrice,
    Failure,
    FundNav,
    InstrumentClass,
    PriceRecord,
    UnifiedPrice,
)
from unified_price.engine.classifier import classify
from unified_price.sources.base import PriceSource
from unified_price.sources.crypto import CryptoSource
from unified_price.sources.equity import EquitySource
from unified_price.sources.fund import FundSource
from unified_price.sources.fx import CurrencyConverter
from unified_price.sources.http import HttpFetcher

logger = logging.getLogger(__name__)

FUND_CURRENCY = "CNY"
_ISO_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class RateProvider(Protocol):
    async def get_rate(self, from_currency: str, to_currency: str) -> float | Failure: ...


def _utc_today() -> dt.date:
    return dt.datetime.now(dt.timezone.utc).date()


def coerce_date(value: dt.date | str | None) -> dt.date | None:
    """Accept a date, an ISO ``YYYY-MM-DD`` string, or None.

    A datetime is truncated to its calendar date.
    """
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    text = value.strip()
    try:
        if not _ISO_DATE_RE.fullmatch(text):
            raise ValueError("not YYYY-MM-DD")
        return dt.date.fromisoformat(text)
    except ValueError as e:
        raise ParseError(
            f"Invalid date {value!r}, expected YYYY-MM-DD",
            context={"reason": "date", "value": value},
        ) from e


class PriceResolver:
    """Resolves any supported instrument code to a ``UnifiedPrice``.

    Parameters
    ----------
    sources : Mapping[InstrumentClass, PriceSource]
        One source per instrument class.
    converter : RateProvider
        Exchange-rate lookup used when a target currency is requested.
    today : Callable[[], date]
        Clock for undated spot prices (crypto). Defaults to the UTC date.
    """

    def __init__(
        self,
        sources: Mapping[InstrumentClass, PriceSource],
        converter: RateProvider,
        today: Callable[[], dt.date] = _utc_today,
    ) -> None:
        missing = set(InstrumentClass) - set(sources)
        if missing:
            raise ValueError(f"No source configured for: {sorted(missing)}")
        self._sources = dict(sources)
        self._converter = converter
        self._today = today

    @classmethod
    def from_config(cls, fetcher: HttpFetcher, config: SourcesConfig) -> PriceResolver:
        """Build the default resolver over one shared fetcher."""
        return cls(
            sources={
                InstrumentClass.STOCK: EquitySource(fetcher, config.equity_base_url),
                InstrumentClass.FUND: FundSource(
                    fetcher,
                    config.fund_estimate_base_url,
                    config.fund_history_base_url,
                ),
                InstrumentClass.CRYPTO: CryptoSource(fetcher, config.crypto_base_url),
            },
            converter=CurrencyConverter(fetcher, config.fx_base_url),
        )

    async def resolve(
        self,
        code: str,
        date: dt.date | str | None = None,
        target_currency: str | None = None,
    ) -> UnifiedPrice | None:
        """Resolve ``code`` to a price, or None if it cannot be priced.

        Never raises. Conversion failures degrade to the unconverted price.
        """
        try:
            result = await self.resolve_result(code, date, target_currency)
        except Exception:
            logger.exception("Unexpected error resolving price for %s", code)
            return None
        if isinstance(result, Failure):
            return None
        return result

    async def resolve_result(
        self,
        code: str,
        date: dt.date | str | None = None,
        target_currency: str | None = None,
    ) -> UnifiedPrice | Failure:
        """Same pipeline as ``resolve`` but returns the Failure instead of None."""
        try:
            on = coerce_date(date)
        except ParseError as e:
            logger.warning("Rejecting request for %s: %s", code, e)
            return Failure.from_error("resolver", e)

        instrument = classify(code)
        record = await self._sources[instrument].fetch(code, on)
        if isinstance(record, Failure):
            logger.info("No %s price for %s: %s", instrument, code, record)
            return record

        price = self._provisional(record)

        target = target_currency.strip().upper() if target_currency else None
        if not target or target == price.currency:
            return price

        rate = await self._converter.get_rate(price.currency, target)
        if isinstance(rate, Failure):
            return price
        return price.converted(rate, target)

    def _provisional(self, record: PriceRecord) -> UnifiedPrice:
        if isinstance(record, EquityPrice):
            return UnifiedPrice(
                price=record.price,
                currency=record.currency,
                date=record.date,
            )
        if isinstance(record, FundNav):
            return UnifiedPrice(
                price=float(record.nav),
                currency=FUND_CURRENCY,
                date=record.date,
                kind=record.kind.value,
            )
        if isinstance(record, CryptoPrice):
            return UnifiedPrice(
                price=record.price,
                currency=record.currency,
                date=self._today(),
            )
        raise TypeError(f"Unsupported price record: {type(record).__name__}")


async def resolve(
    code: str,
    date: dt.date | str | None = None,
    target_currency: str | None = None,
    config: ResolverConfig | None = None,
) -> UnifiedPrice | None:
    """One-shot resolution over a fresh HTTP client."""
    config = config or ResolverConfig()
    async with HttpFetcher(config.http) as fetcher:
        resolver = PriceResolver.from_config(fetcher, config.sources)
        return await resolver.resolve(code, date, target_currency)
