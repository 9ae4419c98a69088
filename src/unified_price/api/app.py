"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from unified_price.api.deps import AppState, api_key_middleware
from unified_price.api.routes import router
from unified_price.core.config import ResolverConfig, load_config
from unified_price.engine.resolver import PriceResolver
from unified_price.sources.http import HttpFetcher


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown lifecycle."""
    config = app.state._pending_config

    async with HttpFetcher(config.http) as fetcher:
        resolver = PriceResolver.from_config(fetcher, config.sources)
        app.state.app_state = AppState(config=config, resolver=resolver)
        yield


def create_app(config: ResolverConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    import unified_price

    config = config or load_config()

    app = FastAPI(
        title="Unified Price API",
        description="Prices for stocks, funds and crypto, with currency conversion",
        version=unified_price.__version__,
        lifespan=lifespan,
    )

    # Stash config so lifespan can retrieve it
    app.state._pending_config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Optional API key middleware
    if config.api.api_key:
        app.middleware("http")(api_key_middleware)

    app.include_router(router, prefix="/api")

    return app
