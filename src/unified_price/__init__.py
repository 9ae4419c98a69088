"""unified-price: one price for stocks, funds and crypto, in any currency."""

__version__ = "0.1.0"

from unified_price.engine.resolver import PriceResolver, resolve  # noqa: E402

__all__ = ["PriceResolver", "resolve", "__version__"]
