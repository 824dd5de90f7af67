"""Payment modal: amount due plus the shop's QR code image, if one is present."""

from __future__ import annotations

from decimal import Decimal

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Static

from billing.export import format_money
from billing.images import ImageResolver


class PaymentModal(ModalScreen[bool]):
    """Dismisses with True when the cashier confirms payment and wants the invoice."""

    BINDINGS = [
        ("enter", "confirm", "Paid"),
        ("escape", "cancel", "Close"),
        ("q", "cancel", "Close"),
    ]

    CSS = """
    PaymentModal {
        align: center middle;
        background: $background 60%;
    }

    #payment-dialog {
        width: 64;
        height: auto;
        border: round $success;
        background: $panel;
        padding: 1 2;
    }

    #payment-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #payment-body {
        color: white;
        margin-bottom: 1;
    }

    #payment-help {
        color: #dddddd;
    }
    """

    def __init__(self, amount_due: Decimal, resolver: ImageResolver) -> None:
        super().__init__()
        self.amount_due = amount_due
        self.resolver = resolver

    def compose(self) -> ComposeResult:
        with Container(id="payment-dialog"):
            yield Static("Payment", id="payment-title")
            yield Static(id="payment-body")
            yield Static("Enter: paid, generate invoice. Esc/q close.", id="payment-help")

    def on_mount(self) -> None:
        content = Text(style="white")
        content.append("Amount due: ")
        content.append(format_money(self.amount_due), style="bold")
        content.append("\n\n")

        qr = self.resolver.resolve()
        if qr.is_placeholder:
            content.append("QR code not found. Place QR.png (or qr.jpg, QR/qr.png, ...) next to the app.", style="dim")
        else:
            content.append(f"Scan to pay: {qr.path or qr.ref}")
        self.query_one("#payment-body", Static).update(content)

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)
