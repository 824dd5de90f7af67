"""Rich text helpers for the terminal UI."""

from __future__ import annotations

from rich.text import Text

from billing.export import format_money
from billing.models import CartLine, MenuItem, Transaction


def badge_style(kind: str) -> str:
    """Return a consistent badge style for counters and tags."""
    if kind == "cart":
        return "bold #ffffff on #b23a48"
    if kind == "report":
        return "bold #ffffff on #2f6db5"
    return "bold #0b1f0f on #5fbf72"


def format_menu_item(item: MenuItem) -> Text:
    text = Text()
    text.append(item.name)
    text.append(f"  {format_money(item.price)}", style="dim")
    return text


def format_cart_line(line: CartLine) -> Text:
    """Render ``name x qty  @price  = line total``."""
    text = Text()
    text.append(line.name, style="bold")
    text.append(f" x{line.quantity}", style=badge_style("cart"))
    text.append(f"  @{format_money(line.price)}", style="dim")
    text.append(f"  = {format_money(line.line_total)}")
    return text


def format_cart_badge(count: int) -> Text:
    text = Text()
    text.append(f" {count} ", style=badge_style("cart"))
    text.append(" item" if count == 1 else " items")
    return text


def format_transaction_row(transaction: Transaction) -> Text:
    text = Text()
    text.append(f"#{transaction.invoice_number}", style=badge_style("report"))
    text.append(f" {transaction.timestamp.astimezone():%Y-%m-%d %H:%M}")
    count = len(transaction.line_items)
    text.append(f"  {count} item(s)", style="dim")
    text.append(f"  {format_money(transaction.total)}", style="bold")
    return text
