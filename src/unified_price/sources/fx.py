"""Currency converter: latest rates from open.er-api.com."""

from __future__ import annotations

import logging

from unified_price.core.exceptions import MissingDataError, SourceError
from unified_price.core.models import Failure
from unified_price.sources.http import HttpFetcher

logger = logging.getLogger(__name__)

_LATEST_PATH = "/v6/latest/{base}"


class CurrencyConverter:
    """Looks up the latest exchange rate between two currency codes.

    Every call is a fresh round trip; nothing is cached.
    """

    name = "fx"

    def __init__(self, fetcher: HttpFetcher, base_url: str) -> None:
        self._fetcher = fetcher
        self._base_url = base_url.rstrip("/")

    async def get_rate(self, from_currency: str, to_currency: str) -> float | Failure:
        """Units of ``to_currency`` per one unit of ``from_currency``, or a Failure."""
        try:
            return await self._get_rate(from_currency, to_currency)
        except SourceError as e:
            failure = Failure.from_error(self.name, e)
            logger.warning(
                "Exchange rate %s->%s unavailable (%s): %s",
                from_currency,
                to_currency,
                failure.kind,
                failure.message,
            )
            return failure

    async def _get_rate(self, from_currency: str, to_currency: str) -> float:
        url = self._base_url + _LATEST_PATH.format(base=from_currency)
        payload = await self._fetcher.get_json(url)
        rates = payload.get("rates") if isinstance(payload, dict) else None
        rate = rates.get(to_currency) if isinstance(rates, dict) else None
        if not rate:
            raise MissingDataError(
                f"No {from_currency}->{to_currency} rate in response",
                context={"field": f"rates.{to_currency}", "url": url},
            )
        return float(rate)
