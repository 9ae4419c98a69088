"""Crypto price source: CoinGecko simple-price API, quoted in USD."""

from __future__ import annotations

from datetime import date
from types import MappingProxyType
from typing import Mapping

from unified_price.core.exceptions import MissingDataError
from unified_price.core.models import CryptoPrice
from unified_price.sources.base import BaseSource

_SIMPLE_PRICE_PATH = "/api/v3/simple/price"

# Short ticker -> CoinGecko asset id
CRYPTO_IDS: Mapping[str, str] = MappingProxyType(
    {
        "btc": "bitcoin",
        "eth": "ethereum",
        "usdt": "tether",
        "bnb": "binancecoin",
        "xrp": "ripple",
        "ada": "cardano",
        "doge": "dogecoin",
        "sol": "solana",
    }
)


def asset_id(ticker: str) -> str:
    """Map a ticker to its asset id; unknown tickers pass through lower-cased."""
    key = ticker.lower()
    return CRYPTO_IDS.get(key, key)


class CryptoSource(BaseSource):
    """Crypto assets by short ticker (``BTC``) or CoinGecko id (``bitcoin``).

    Only spot prices are available; a requested date is ignored.
    """

    name = "crypto"

    async def _fetch(self, code: str, on: date | None) -> CryptoPrice:
        coin = asset_id(code)
        payload = await self._fetcher.get_json(
            self._base_url + _SIMPLE_PRICE_PATH,
            params={"ids": coin, "vs_currencies": "usd"},
        )
        entry = payload.get(coin) if isinstance(payload, dict) else None
        price = entry.get("usd") if isinstance(entry, dict) else None
        if not price:
            raise MissingDataError(
                f"No USD price for {coin}",
                context={"field": f"{coin}.usd"},
            )
        return CryptoPrice(price=float(price))
