"""unified_price.core — Foundation types, config, and exceptions."""

from unified_price.core.config import (
    APIConfig,
    HttpConfig,
    ResolverConfig,
    SourcesConfig,
    load_config,
)
from unified_price.core.exceptions import (
    ConfigError,
    MissingDataError,
    NoDataError,
    ParseError,
    SourceError,
    TransportError,
    UnifiedPriceError,
)
from unified_price.core.models import (
    CryptoPrice,
    CurrencyCode,
    EquityPrice,
    Failure,
    FailureKind,
    FundNav,
    InstrumentClass,
    NavKind,
    PriceRecord,
    UnifiedPrice,
)

__all__ = [
    # Type aliases
    "CurrencyCode",
    "PriceRecord",
    # Enums
    "InstrumentClass",
    "NavKind",
    "FailureKind",
    # Records
    "EquityPrice",
    "FundNav",
    "CryptoPrice",
    "UnifiedPrice",
    "Failure",
    # Config
    "ResolverConfig",
    "HttpConfig",
    "SourcesConfig",
    "APIConfig",
    "load_config",
    # Exceptions
    "UnifiedPriceError",
    "ConfigError",
    "SourceError",
    "TransportError",
    "ParseError",
    "MissingDataError",
    "NoDataError",
]
