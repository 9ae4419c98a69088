"""Custom exception hierarchy for unified-price."""

from typing import Any


class UnifiedPriceError(Exception):
    """Base exception for all unified-price errors.

    All exceptions carry an optional `context` dict for structured error
    metadata that can be logged or serialized without parsing the message.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class ConfigError(UnifiedPriceError):
    """Invalid or missing configuration.

    Raised by load_config() during startup. Should be treated as fatal.

    Context keys:
        field: str — the config field that failed validation
        value: Any — the invalid value (redacted for secrets)
    """


class SourceError(UnifiedPriceError):
    """An upstream price source could not produce a record.

    Policy: caught at the adapter boundary, logged, and turned into a
    Failure. Never propagates into the resolver.

    Context keys:
        source: str — "equity", "fund", "crypto" or "fx"
        url: str — the URL that was being fetched
    """

    kind = "source"


class TransportError(SourceError):
    """Non-2xx HTTP status or network failure.

    Context keys:
        status_code: int | None — HTTP status code if a response arrived
    """

    kind = "transport"


class ParseError(SourceError):
    """Response body is not the expected JSON, JSONP or HTML shape.

    Context keys:
        reason: str — what could not be parsed
    """

    kind = "parse"


class MissingDataError(SourceError):
    """Response parsed but the expected field, row or table is absent.

    Context keys:
        field: str — the path or marker that was looked for
    """

    kind = "missing_data"


class NoDataError(SourceError):
    """Structurally valid response carrying zero usable records."""

    kind = "no_data"
