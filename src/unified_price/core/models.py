"""Pydantic data models — the system's type contracts."""

from __future__ import annotations

from datetime import date as Date
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from unified_price.core.exceptions import SourceError

# --- Type Aliases ---

CurrencyCode = str

# --- Enumerations ---


class InstrumentClass(StrEnum):
    """Source kinds an instrument code can be routed to."""

    STOCK = "stock"
    FUND = "fund"
    CRYPTO = "crypto"


class NavKind(StrEnum):
    """Whether a fund NAV is an intraday estimate or a disclosed value."""

    REALTIME = "realtime"
    HISTORICAL = "historical"


class FailureKind(StrEnum):
    """Why a source could not produce a record."""

    TRANSPORT = "transport"
    PARSE = "parse"
    MISSING_DATA = "missing_data"
    NO_DATA = "no_data"


# --- Source Records ---


class EquityPrice(BaseModel):
    """Price of a listed equity as reported by the chart API."""

    model_config = ConfigDict(frozen=True)

    price: float
    currency: CurrencyCode
    date: Date | None = None


class FundNav(BaseModel):
    """Net asset value of a mutual fund.

    ``nav`` is kept as the upstream decimal string so no precision is lost
    before the resolver decides how to use it.
    """

    model_config = ConfigDict(frozen=True)

    nav: str
    date: Date
    kind: NavKind

    @field_validator("nav")
    @classmethod
    def nav_is_numeric(cls, v: str) -> str:
        v = v.strip()
        try:
            float(v)
        except ValueError:
            raise ValueError(f"nav must be a decimal string, got {v!r}") from None
        return v


class CryptoPrice(BaseModel):
    """Spot price of a crypto asset, always quoted in USD."""

    model_config = ConfigDict(frozen=True)

    price: float
    currency: Literal["USD"] = "USD"


PriceRecord = EquityPrice | FundNav | CryptoPrice


# --- Engine Output ---


class UnifiedPrice(BaseModel):
    """The resolver's single output shape.

    ``original_price``/``original_currency`` are set only when a currency
    conversion actually happened; ``currency`` is always the final one.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    price: float
    currency: CurrencyCode
    date: Date | None = None
    kind: str | None = None
    original_price: float | None = Field(default=None, alias="originalPrice")
    original_currency: CurrencyCode | None = Field(
        default=None, alias="originalCurrency"
    )

    @model_validator(mode="after")
    def originals_come_in_pairs(self) -> UnifiedPrice:
        if (self.original_price is None) != (self.original_currency is None):
            raise ValueError(
                "original_price and original_currency must both be set or both be absent"
            )
        return self

    def converted(self, rate: float, target: CurrencyCode) -> UnifiedPrice:
        """Return a copy of this price expressed in ``target`` at ``rate``."""
        return self.model_copy(
            update={
                "original_price": self.price,
                "original_currency": self.currency,
                "price": self.price * rate,
                "currency": target,
            }
        )

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys and absent fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# --- Failures ---


class Failure(BaseModel):
    """A soft failure: what went wrong in a source, without raising."""

    model_config = ConfigDict(frozen=True)

    kind: FailureKind
    source: str
    message: str
    context: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_error(cls, source: str, exc: SourceError) -> Failure:
        try:
            kind = FailureKind(exc.kind)
        except ValueError:
            kind = FailureKind.PARSE
        return cls(kind=kind, source=source, message=str(exc), context=dict(exc.context))

    def __str__(self) -> str:
        return f"{self.source} {self.kind}: {self.message}"
