"""FastAPI route definitions for the unified-price API."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Path, Query

import unified_price
from unified_price.api.deps import get_resolver
from unified_price.api.schemas import ErrorResponse, HealthResponse
from unified_price.core.models import UnifiedPrice
from unified_price.engine.resolver import PriceResolver

router = APIRouter()


# -- Health --


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Liveness check."""
    return HealthResponse(status="ok", version=unified_price.__version__)


# -- Prices --


@router.get(
    "/price/{code}",
    response_model=UnifiedPrice | None,
    response_model_by_alias=True,
    response_model_exclude_none=True,
    responses={401: {"model": ErrorResponse}},
)
async def get_price(
    code: str = Path(..., min_length=1, description="Stock ticker, 6-digit fund code or crypto ticker"),
    on: date | None = Query(None, alias="date", description="Price date, YYYY-MM-DD"),
    target_currency: str | None = Query(
        None, min_length=3, max_length=3, description="Convert into this currency"
    ),
    resolver: PriceResolver = Depends(get_resolver),
):
    """Resolve one instrument to a price; ``null`` when it cannot be priced."""
    return await resolver.resolve(code, on, target_currency)
