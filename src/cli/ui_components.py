"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Any

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text


def print_banner(console: Console) -> None:
    title = Text("eBay-D2", style="bold cyan")
    subtitle = Text("Trading API • Órdenes • Publicaciones", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def format_amount(value: Any) -> str:
    """`{'@currencyID': 'USD', '#text': '9.99'}` -> `9.99 USD`."""

    if isinstance(value, dict):
        amount = value.get("#text", "")
        currency = value.get("@currencyID")
        return f"{amount} {currency}" if currency else str(amount)
    if value is None:
        return ""
    return str(value)


def _get(node: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def build_orders_table(orders: list[dict[str, Any]]) -> Table:
    table = Table(title=f"Orders ({len(orders)})")
    table.add_column("Order ID", style="cyan", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Buyer", style="magenta")
    table.add_column("Total", style="green", justify="right")
    table.add_column("Created", style="dim")
    for order in orders:
        table.add_row(
            str(order.get("OrderID") or ""),
            str(order.get("OrderStatus") or ""),
            str(order.get("BuyerUserID") or ""),
            format_amount(order.get("Total")),
            str(order.get("CreatedTime") or ""),
        )
    return table


def build_items_table(items: list[dict[str, Any]]) -> Table:
    table = Table(title=f"Listings ({len(items)})")
    table.add_column("Item ID", style="cyan", no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Price", style="green", justify="right")
    table.add_column("Qty", justify="right")
    table.add_column("Ends", style="dim")
    for item in items:
        table.add_row(
            str(item.get("ItemID") or ""),
            str(item.get("Title") or ""),
            format_amount(_get(item, "SellingStatus", "CurrentPrice")),
            str(item.get("Quantity") or ""),
            str(_get(item, "ListingDetails", "EndTime") or ""),
        )
    return table


def build_user_panel(user: dict[str, Any]) -> Panel:
    """Panel con los datos básicos de `GetUserResponse.User`."""

    body = Text()
    rows = (
        ("User ID", user.get("UserID")),
        ("Email", user.get("Email")),
        ("Status", user.get("Status")),
        ("Feedback", user.get("FeedbackScore")),
        ("Site", user.get("Site")),
        ("Registered", user.get("RegistrationDate")),
    )
    for label, value in rows:
        if value is None:
            continue
        body.append(f"{label}: ", style="bold")
        body.append(f"{value}\n")
    return Panel(body, title=Text("eBay user", style="bold yellow"), border_style="yellow")
