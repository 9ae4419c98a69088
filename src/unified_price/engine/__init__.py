"""Classification and orchestration of price lookups."""

from unified_price.engine.classifier import classify
from unified_price.engine.resolver import PriceResolver, coerce_date, resolve

__all__ = ["classify", "PriceResolver", "coerce_date", "resolve"]
