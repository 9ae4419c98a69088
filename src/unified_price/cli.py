"""Click-based CLI for unified-price.

Thin wrapper around the resolver. Zero business logic.
"""

from __future__ import annotations

import asyncio
import json
import logging

import click
from rich.console import Console
from rich.table import Table

console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run_async(coro):
    """Run an async coroutine from synchronous Click code."""
    return asyncio.run(coro)


def _load_config(ctx: click.Context):
    """Load config lazily, caching on first call."""
    if "config" not in ctx.obj:
        from unified_price.core import load_config

        ctx.obj["config"] = load_config(config_path=ctx.obj.get("config_path"))
    return ctx.obj["config"]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    envvar="UNIFIED_PRICE_CONFIG",
    default=None,
    help="Path to unified-price.yml config file.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output.",
)
@click.version_option(package_name="unified-price")
@click.pass_context
def cli(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """Unified Price: one price for stocks, funds and crypto."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)


# ---------------------------------------------------------------------------
# price
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("code")
@click.option(
    "--date",
    "-d",
    "on",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Price on this date (YYYY-MM-DD). Defaults to the latest price.",
)
@click.option(
    "--currency",
    "-t",
    "target_currency",
    type=str,
    default=None,
    help="Convert the price into this currency (e.g. USD, EUR).",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Output as JSON.")
@click.pass_context
def price(
    ctx: click.Context,
    code: str,
    on,
    target_currency: str | None,
    as_json: bool,
) -> None:
    """Resolve CODE (stock ticker, 6-digit fund code or crypto ticker) to a price."""
    config = _load_config(ctx)

    async def _run():
        from unified_price.engine.resolver import resolve

        return await resolve(
            code,
            on.date() if on else None,
            target_currency,
            config=config,
        )

    result = _run_async(_run())

    if as_json:
        click.echo(json.dumps(result.to_payload() if result else None, indent=2))
    elif result is not None:
        _print_price(code, result)

    if result is None:
        console.print(f"[red]No price found for {code}.[/red]")
        raise SystemExit(1)


def _print_price(code: str, result) -> None:
    """Render a UnifiedPrice as a Rich table."""
    table = Table(title=f"Price: {code}")
    table.add_column("Field", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Price", f"{result.price:,.4f}")
    table.add_row("Currency", result.currency)
    table.add_row("Date", str(result.date) if result.date else "N/A")
    if result.kind:
        table.add_row("Kind", result.kind)
    if result.original_currency:
        table.add_section()
        table.add_row("Original price", f"{result.original_price:,.4f}")
        table.add_row("Original currency", result.original_currency)

    console.print(table)


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--host", type=str, default=None, help="Bind address.")
@click.option("--port", "-p", type=int, default=None, help="Port number.")
@click.option("--reload", is_flag=True, default=False, help="Auto-reload on code changes.")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None, reload: bool) -> None:
    """Start the REST API server."""
    try:
        import uvicorn
    except ImportError:
        console.print(
            "[red]uvicorn not installed. Install with: "
            "pip install unified-price[api][/red]"
        )
        raise SystemExit(1)

    config = _load_config(ctx)
    host = host or config.api.host
    port = port or config.api.port

    console.print(f"Starting unified-price API on [bold]{host}:{port}[/bold]")
    console.print(f"API docs: http://{host}:{port}/docs")

    uvicorn.run(
        "unified_price.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
