"""Shared pytest fixtures for unified-price."""

import pytest

from unified_price.core.config import ResolverConfig, SourcesConfig
from unified_price.sources.http import HttpFetcher


@pytest.fixture
def sources_config() -> SourcesConfig:
    return SourcesConfig()


@pytest.fixture
def resolver_config() -> ResolverConfig:
    return ResolverConfig()


@pytest.fixture
async def fetcher() -> HttpFetcher:
    async with HttpFetcher() as f:
        yield f


@pytest.fixture
def chart_quote_json() -> dict:
    """Chart API response for a current-quote request."""
    return {
        "chart": {
            "result": [
                {
                    "meta": {
                        "currency": "USD",
                        "symbol": "AAPL",
                        "exchangeName": "NMS",
                        "regularMarketPrice": 189.84,
                    },
                    "timestamp": [1704205800],
                    "indicators": {"quote": [{"close": [185.64]}]},
                }
            ],
            "error": None,
        }
    }


@pytest.fixture
def chart_history_json() -> dict:
    """Chart API response for a one-day window on 2024-01-02."""
    return {
        "chart": {
            "result": [
                {
                    "meta": {"currency": "USD", "symbol": "AAPL"},
                    "timestamp": [1704205800],
                    "indicators": {
                        "quote": [
                            {
                                "open": [187.15],
                                "high": [188.44],
                                "low": [183.89],
                                "close": [185.64],
                                "volume": [82488700],
                            }
                        ]
                    },
                }
            ],
            "error": None,
        }
    }


@pytest.fixture
def fund_estimate_body() -> bytes:
    """GBK-encoded JSONP estimate as served by fundgz."""
    text = (
        'jsonpgz({"fundcode":"000001","name":"华夏成长混合","jzrq":"2024-01-02",'
        '"dwjz":"1.4900","gsz":"1.5000","gszzl":"0.67","gztime":"2024-01-03 15:00"});'
    )
    return text.encode("gbk")


@pytest.fixture
def fund_history_page() -> str:
    """Historical NAV page with one data row for 2024-01-02."""
    return (
        "var apidata={ content:\"<table class='w782 comm lsjz'><thead><tr>"
        "<th class='first'>净值日期</th><th>单位净值</th><th>累计净值</th>"
        "<th>日增长率</th><th>申购状态</th><th>赎回状态</th><th class='tor last'>分红送配</th>"
        "</tr></thead><tbody><tr><td>2024-01-02</td><td class='tor bold'>1.2345</td>"
        "<td class='tor bold'>3.4560</td><td class='tor bold red'>0.52%</td>"
        "<td>开放申购</td><td>开放赎回</td><td class='red unbold'></td></tr></tbody></table>\","
        "records:1,pages:1,curpage:1};"
    )
