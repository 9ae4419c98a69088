"""Upstream price sources and the currency converter.

- ``EquitySource``: Yahoo Finance chart API (current or by date).
- ``FundSource``: fund estimate JSONP (GBK) or historical NAV HTML table.
- ``CryptoSource``: CoinGecko simple-price in USD.
- ``CurrencyConverter``: latest exchange rates keyed by base currency.

All of them share one ``HttpFetcher`` and report problems as ``Failure``
values instead of raising.
"""

from unified_price.sources.base import BaseSource, PriceSource
from unified_price.sources.crypto import CRYPTO_IDS, CryptoSource, asset_id
from unified_price.sources.equity import EquitySource
from unified_price.sources.fund import FundSource
from unified_price.sources.fx import CurrencyConverter
from unified_price.sources.http import HttpFetcher

__all__ = [
    "PriceSource",
    "BaseSource",
    "HttpFetcher",
    "EquitySource",
    "FundSource",
    "CryptoSource",
    "CRYPTO_IDS",
    "asset_id",
    "CurrencyConverter",
]
