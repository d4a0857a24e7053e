"""CLI principal (Typer + Rich).

Comandos:
- `orders`   : GetOrders agregado (todas las páginas)
- `listings` : GetSellerList agregado
- `user`     : GetUser
- `doctor`   : diagnóstico de configuración y setup de credenciales
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Optional

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.ebay_client import EbayClient
from cli.doctor import app as doctor_app
from cli.ui_components import (
    build_items_table,
    build_orders_table,
    build_user_panel,
    print_banner,
)
from core.domain.errors import EbayClientError

app = typer.Typer(no_args_is_help=True, help="eBay Trading API client (orders, listings, user).")
app.add_typer(doctor_app, name="doctor")

_console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every request/page."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _run_call(call: Callable[[EbayClient], Awaitable[dict[str, Any]]]) -> dict[str, Any]:
    """Construye el cliente desde la config, ejecuta `call` y traduce errores a exit codes."""

    try:
        client = EbayClient.from_settings()
    except EbayClientError as exc:
        _console.print(f"[red]Invalid configuration:[/red] {exc}")
        raise typer.Exit(code=2) from exc

    if client.is_expired:
        _console.print("[yellow]Warning:[/yellow] the configured token is expired.")

    async def _go() -> dict[str, Any]:
        async with client:
            return await call(client)

    try:
        return asyncio.run(_go())
    except (EbayClientError, httpx.HTTPError) as exc:
        _console.print(f"[red]{type(exc).__name__}:[/red] {exc}")
        raise typer.Exit(code=1) from exc


def _collection(document: dict[str, Any], *path: str) -> list[dict[str, Any]]:
    node: Any = document
    for key in path:
        node = node.get(key) if isinstance(node, dict) else None
    if isinstance(node, list):
        return node
    return [node] if isinstance(node, dict) else []


def _print_json(document: dict[str, Any]) -> None:
    typer.echo(json.dumps(document, ensure_ascii=False, indent=2))


@app.command()
def orders(
    create_from: Optional[str] = typer.Option(None, "--from", help="CreateTimeFrom (ISO-8601)."),
    create_to: Optional[str] = typer.Option(None, "--to", help="CreateTimeTo (ISO-8601)."),
    days: Optional[int] = typer.Option(None, "--days", min=1, max=30, help="NumberOfDays instead of a range."),
    as_json: bool = typer.Option(False, "--json", help="Print the aggregated document as JSON."),
) -> None:
    """List completed seller orders across every page."""

    options: dict[str, Any] = {}
    if create_from:
        options["CreateTimeFrom"] = create_from
    if create_to:
        options["CreateTimeTo"] = create_to
    if days:
        options["NumberOfDays"] = days

    document = _run_call(lambda client: client.get_orders(options))
    if as_json:
        _print_json(document)
        return
    print_banner(_console)
    _console.print(build_orders_table(_collection(document, "GetOrdersResponse", "OrderArray", "Order")))


@app.command()
def listings(
    end_from: Optional[str] = typer.Option(None, "--end-from", help="EndTimeFrom (ISO-8601)."),
    end_to: Optional[str] = typer.Option(None, "--end-to", help="EndTimeTo (ISO-8601)."),
    as_json: bool = typer.Option(False, "--json", help="Print the aggregated document as JSON."),
) -> None:
    """List the seller's items across every page."""

    options: dict[str, Any] = {}
    if end_from:
        options["EndTimeFrom"] = end_from
    if end_to:
        options["EndTimeTo"] = end_to

    document = _run_call(lambda client: client.get_seller_list(options))
    if as_json:
        _print_json(document)
        return
    print_banner(_console)
    _console.print(build_items_table(_collection(document, "GetSellerListResponse", "ItemArray", "Item")))


@app.command()
def user(
    as_json: bool = typer.Option(False, "--json", help="Print the response as JSON."),
) -> None:
    """Show the account that owns the configured token."""

    document = _run_call(lambda client: client.get_user())
    if as_json:
        _print_json(document)
        return
    info = document.get("GetUserResponse", {}).get("User") or {}
    _console.print(build_user_panel(info))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
