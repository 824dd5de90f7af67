"""Sales report modal screen."""

from __future__ import annotations

from pathlib import Path

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from billing.constant import REPORT_FILTER_LABELS
from billing.errors import BillingError
from billing.export import export_sales_report_pdf, format_money
from billing.models import Transaction
from billing.rendering import format_transaction_row
from billing.reports import DatePredicate, DateRange, SalesSummary, aggregate, predicate_from_name
from billing.session import BillingSession


class SalesReportModal(ModalScreen[None]):
    """Filter the transaction log by date and export what is shown."""

    CSS = """
    SalesReportModal {
        align: center middle;
        background: $background 60%;
    }

    #report-dialog {
        width: 76;
        height: 80%;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #report-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #report-summary {
        color: white;
        margin-bottom: 1;
    }

    #report-list {
        height: 1fr;
        color: white;
    }

    #report-status {
        color: #ffb3b3;
    }

    #report-help {
        color: #dddddd;
    }
    """

    def __init__(self, session: BillingSession, export_dir: str | Path) -> None:
        super().__init__()
        self.session = session
        self.export_dir = Path(export_dir)
        self.filter_name = "today"
        self.predicate: DatePredicate = predicate_from_name("today")
        self.typing_range = False
        self.range_values = ["", ""]
        self.range_field = 0
        self.status = ""
        self.matched: list[Transaction] = []
        self.summary: SalesSummary = aggregate([])

    def compose(self) -> ComposeResult:
        with Container(id="report-dialog"):
            yield Static("Sales Report", id="report-title")
            yield Static(id="report-summary")
            yield Static(id="report-list")
            yield Static(id="report-status")
            yield Static(id="report-help")

    def on_mount(self) -> None:
        self._run_report()

    def on_key(self, event: Key) -> None:
        if self.typing_range:
            self._handle_range_key(event)
            event.stop()
            return

        key = event.key
        if key in {"escape", "q"}:
            self.dismiss(None)
        elif key in {"t", "w", "m"}:
            self.filter_name = {"t": "today", "w": "week", "m": "month"}[key]
            self.predicate = predicate_from_name(self.filter_name)
            self.status = ""
            self._run_report()
        elif key == "c":
            self.typing_range = True
            self.range_field = 0
            self.status = ""
            self._refresh_content()
        elif key == "e":
            self._export()
        else:
            return
        event.stop()

    def _handle_range_key(self, event: Key) -> None:
        if event.key == "escape":
            self.typing_range = False
            self._refresh_content()
            return

        if event.key == "enter":
            try:
                self.predicate = predicate_from_name("custom", *self.range_values)
            except BillingError as exc:
                self.status = str(exc)
                self._refresh_content()
                return
            self.filter_name = "custom"
            self.typing_range = False
            self.status = ""
            self._run_report()
            return

        if event.key in {"tab", "shift+tab"}:
            self.range_field = 1 - self.range_field
        elif event.key == "backspace":
            self.range_values[self.range_field] = self.range_values[self.range_field][:-1]
        elif event.character and (event.character.isdigit() or event.character == "-"):
            if len(self.range_values[self.range_field]) < 10:
                self.range_values[self.range_field] += event.character
        self._refresh_content()

    def _run_report(self) -> None:
        self.matched, self.summary = self.session.sales_report(self.predicate)
        self._refresh_content()

    def _export(self) -> None:
        title = f"Sales Report - {REPORT_FILTER_LABELS[self.filter_name]}"
        try:
            path = export_sales_report_pdf(self.matched, self.summary, self.export_dir, title=title)
        except (OSError, ValueError) as exc:
            self.status = f"Export failed: {exc}"
        else:
            self.status = f"Exported {path}"
        self._refresh_content()

    def _refresh_content(self) -> None:
        label = REPORT_FILTER_LABELS[self.filter_name]
        if isinstance(self.predicate, DateRange):
            label = f"{label} {self.predicate.start} .. {self.predicate.end}"

        summary = Text(style="white")
        summary.append(f"{label}\n", style="bold")
        summary.append("Revenue: ")
        summary.append(format_money(self.summary.total_revenue), style="bold")
        summary.append(f"   Transactions: {self.summary.count}")
        self.query_one("#report-summary", Static).update(summary)

        listing = Text(style="white")
        if not self.matched:
            listing.append("No transactions found", style="dim")
        for idx, transaction in enumerate(reversed(self.matched)):
            if idx > 0:
                listing.append("\n")
            listing.append_text(format_transaction_row(transaction))
        self.query_one("#report-list", Static).update(listing)

        status = Text(self.status or "", style="#ffb3b3")
        if self.typing_range:
            pointer = ["  ", "  "]
            pointer[self.range_field] = "➤ "
            range_text = Text(f"{pointer[0]}From: {self.range_values[0]}   {pointer[1]}To: {self.range_values[1]}", style="bold white")
            if self.status:
                range_text.append("\n")
                range_text.append_text(status)
            status = range_text
            help_text = "YYYY-MM-DD. Tab switch field. Enter apply. Esc cancel."
        else:
            help_text = "T today, W last 7 days, M last month, C custom range, E export PDF, Esc close"
        self.query_one("#report-status", Static).update(status)
        self.query_one("#report-help", Static).update(help_text)
