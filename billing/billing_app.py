"""Main Textual app class."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from billing.config import EXPORT_DIR, QR_SEARCH_DIR
from billing.confirm_modal import ConfirmModal
from billing.constant import QR_IMAGE_CANDIDATES
from billing.errors import BillingError
from billing.export import export_invoice_pdf, format_money
from billing.images import ImageResolver
from billing.menu_item_modal import MenuItemDraft, MenuItemModal
from billing.models import MenuItem, Transaction
from billing.payment_modal import PaymentModal
from billing.rendering import badge_style, format_cart_badge, format_cart_line, format_menu_item
from billing.report_modal import SalesReportModal
from billing.session import CART_CHANGED, CATALOG_CHANGED, INVOICE_COMMITTED, BillingSession

logger = logging.getLogger(__name__)


def generate_and_export_invoice(session: BillingSession, export_dir: Path) -> tuple[Transaction | None, str]:
    """Commit the cart and write its PDF; return the invoice (if saved) and a status line.

    An export failure after the commit is reported, never raised: the invoice stands.
    """
    try:
        transaction = session.generate_invoice()
    except BillingError as exc:
        return None, f"Invoice not saved: {exc}"

    try:
        path = export_invoice_pdf(transaction, export_dir)
    except (OSError, ValueError) as exc:
        logger.exception("invoice_export_failed number=%d", transaction.invoice_number)
        return transaction, f"Saved invoice #{transaction.invoice_number} but PDF export failed: {exc}"
    return transaction, f"Invoice #{transaction.invoice_number} saved: {path}"


class BillingApp(App):
    """A Textual app for ringing up restaurant orders and printing invoices."""

    TITLE = "Restaurant Billing"
    SUB_TITLE = "Menu / Cart / Invoices"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #menu-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #cart-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #search-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 4;
    }

    #results {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-summary {
        height: auto;
        padding: 0 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    input_state = reactive("normal")
    search_query = reactive("")
    selected_index = reactive(0)
    cart_selected_index = reactive(None)

    BINDINGS = [
        ("tab", "cycle_results(1)", "Next dish"),
        ("up", "cycle_results(-1)", "Previous dish"),
        ("down", "cycle_results(1)", "Next dish"),
        ("enter", "add_selected", "Add to cart"),
        ("backspace", "backspace_query", "Delete query char"),
        Binding("ctrl+s", "generate_invoice", "Invoice", priority=True),
        Binding("ctrl+p", "open_payment", "Pay", priority=True),
        Binding("ctrl+r", "open_report", "Report", priority=True),
        Binding("ctrl+n", "new_menu_item", "New dish"),
        Binding("ctrl+e", "edit_menu_item", "Edit dish"),
        Binding("ctrl+d", "delete_menu_item", "Delete dish"),
        Binding("ctrl+x", "clear_cart", "Clear cart"),
        ("escape", "cancel_active_mode", "Exit search"),
        ("ctrl+c", "cancel_active_mode", "Exit search"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, session: BillingSession, export_dir: str | Path = EXPORT_DIR) -> None:
        super().__init__()
        self.session = session
        self.export_dir = Path(export_dir)
        self.qr_resolver = ImageResolver(QR_IMAGE_CANDIDATES, base_dir=QR_SEARCH_DIR)
        self.system_status = ""
        self.session.subscribe(self._on_session_change)

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="menu-pane"):
                yield Static("Menu", classes="pane-title")
                yield Static(id="search-bar")
                yield Static(id="results")
            with Vertical(id="cart-pane"):
                yield Static(id="cart-title", classes="pane-title")
                yield Static("Cart is empty", id="cart-list")
                yield Static(id="cart-summary")

    def on_mount(self) -> None:
        logger.info(
            "app_mounted menu_items=%d next_invoice=%d",
            len(self.session.catalog),
            self.session.ledger.counter,
        )
        self._refresh_all()

    def _on_session_change(self, event: str) -> None:
        if event == CATALOG_CHANGED:
            self._refresh_search()
        elif event in {CART_CHANGED, INVOICE_COMMITTED}:
            self._refresh_cart()

    def on_key(self, event: Key) -> None:
        if isinstance(self.screen, ModalScreen):
            return

        if not event.is_printable or not event.character or len(event.character) != 1:
            return

        char = event.character
        if self.input_state == "normal":
            if char == "/":
                self.input_state = "active"
                self.search_query = ""
                self.selected_index = 0
                self._refresh_search()
            elif char == "j":
                self._move_cart_selection(1)
            elif char == "k":
                self._move_cart_selection(-1)
            elif char in {"+", "="}:
                self._change_selected_quantity(1)
            elif char in {"-", "_"}:
                self._change_selected_quantity(-1)
            elif char == "x":
                self._remove_selected_line()
            else:
                return
            event.stop()
            return

        self.search_query += char
        self.selected_index = 0
        self._refresh_search()
        event.stop()

    def action_cancel_active_mode(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state == "normal":
            return

        self.input_state = "normal"
        self.search_query = ""
        self.selected_index = 0
        self._refresh_search()

    def action_cycle_results(self, delta: int) -> None:
        if isinstance(self.screen, ModalScreen):
            return

        results = self._filtered_results()
        if not results:
            self.selected_index = 0
            self._refresh_results(results)
            return
        self.selected_index = (self.selected_index + delta) % len(results)
        self._refresh_results(results)

    def action_add_selected(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return

        item = self._selected_menu_item()
        if item is None:
            return
        self.session.add_to_cart(item.item_id)
        self._select_cart_item(item.item_id)
        self.system_status = f"Added {item.name}!"
        self._refresh_search_bar()

    def action_backspace_query(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "active":
            return

        if not self.search_query:
            return
        self.search_query = self.search_query[:-1]
        self.selected_index = 0
        self._refresh_search()

    def action_new_menu_item(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return

        def submit(draft: MenuItemDraft) -> None:
            self.session.add_menu_item(draft.name, draft.price, draft.image_ref)

        self.push_screen(MenuItemModal(submit), self._after_menu_edit)

    def action_edit_menu_item(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        item = self._selected_menu_item()
        if item is None:
            return

        def submit(draft: MenuItemDraft) -> None:
            self.session.update_menu_item(item.item_id, draft.name, draft.price, draft.image_ref)

        self.push_screen(MenuItemModal(submit, item=item), self._after_menu_edit)

    def _after_menu_edit(self, saved: bool | None) -> None:
        if saved:
            self.system_status = "Menu updated"
            self._refresh_search()

    def action_delete_menu_item(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        item = self._selected_menu_item()
        if item is None:
            return

        def on_answer(confirmed: bool | None) -> None:
            if not confirmed:
                return
            try:
                self.session.delete_menu_item(item.item_id)
            except BillingError as exc:
                self.system_status = str(exc)
            else:
                self.system_status = f"Deleted {item.name}"
            self._refresh_search()

        self.push_screen(ConfirmModal(f"Delete menu item '{item.name}'?"), on_answer)

    def action_clear_cart(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.session.cart.is_empty():
            return

        def on_answer(confirmed: bool | None) -> None:
            if confirmed:
                self.session.clear_cart()
                self.system_status = "Cart cleared"
                self._refresh_search_bar()

        self.push_screen(ConfirmModal("Clear the cart?"), on_answer)

    def action_open_payment(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.session.cart.is_empty():
            self.system_status = "Add items to the cart before proceeding to payment."
            self._refresh_search_bar()
            return

        def on_close(paid: bool | None) -> None:
            if paid:
                self.action_generate_invoice()

        self.push_screen(PaymentModal(self.session.cart.subtotal(), self.qr_resolver), on_close)

    def action_open_report(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        self.push_screen(SalesReportModal(self.session, self.export_dir))

    def action_generate_invoice(self) -> None:
        if isinstance(self.screen, ModalScreen):
            logger.debug("invoice_blocked reason=modal")
            return

        transaction, self.system_status = generate_and_export_invoice(self.session, self.export_dir)
        if transaction is not None:
            self.cart_selected_index = None
        self._refresh_cart()
        self._refresh_search_bar()

    def _filtered_results(self) -> list[MenuItem]:
        return self.session.menu_items(self.search_query)

    def _selected_menu_item(self) -> MenuItem | None:
        results = self._filtered_results()
        if not results:
            return None
        if self.selected_index >= len(results):
            self.selected_index = 0
        return results[self.selected_index]

    def _selected_cart_item_id(self) -> str | None:
        lines = self.session.cart.lines()
        if self.cart_selected_index is None:
            return None
        if not (0 <= self.cart_selected_index < len(lines)):
            return None
        return lines[self.cart_selected_index].item_id

    def _select_cart_item(self, item_id: str) -> None:
        for idx, line in enumerate(self.session.cart.lines()):
            if line.item_id == item_id:
                self.cart_selected_index = idx
                break
        self._refresh_cart()

    def _move_cart_selection(self, delta: int) -> None:
        total = len(self.session.cart)
        if not total:
            return

        if self.cart_selected_index is None:
            self.cart_selected_index = 0 if delta > 0 else total - 1
        else:
            self.cart_selected_index = (self.cart_selected_index + delta) % total
        self._refresh_cart()

    def _change_selected_quantity(self, delta: int) -> None:
        item_id = self._selected_cart_item_id()
        if item_id is None:
            return
        self.session.update_quantity(item_id, delta)

    def _remove_selected_line(self) -> None:
        item_id = self._selected_cart_item_id()
        if item_id is None:
            return
        self.session.remove_from_cart(item_id)

    def _refresh_all(self) -> None:
        self._refresh_cart()
        self._refresh_search()

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)

        rows = max(1, rows)
        if total <= rows:
            return (0, total)

        if selected is None:
            start = 0
        else:
            half = rows // 2
            start = selected - half
            start = max(0, start)
            start = min(start, total - rows)

        return (start, start + rows)

    def _refresh_cart(self) -> None:
        try:
            cart_widget = self.query_one("#cart-list", Static)
            title_widget = self.query_one("#cart-title", Static)
            summary_widget = self.query_one("#cart-summary", Static)
        except NoMatches:
            return

        cart = self.session.cart
        title = Text("Cart ")
        title.append_text(format_cart_badge(cart.total_item_count()))
        title_widget.update(title)

        subtotal = format_money(cart.subtotal())
        summary = Text()
        summary.append(f"Subtotal: {subtotal}\n")
        summary.append(f"Total:    {subtotal}", style="bold")
        summary_widget.update(summary)

        lines = cart.lines()
        if not lines:
            self.cart_selected_index = None
            cart_widget.update("Cart is empty")
            return

        if self.cart_selected_index is not None and self.cart_selected_index >= len(lines):
            self.cart_selected_index = len(lines) - 1

        visible_rows = self._visible_rows(cart_widget)
        start, end = self._window_bounds(len(lines), visible_rows, self.cart_selected_index)

        text = Text()
        if start > 0:
            text.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                text.append("\n")
            pointer = "➤ " if idx == self.cart_selected_index else "  "
            text.append(pointer)
            text.append(f"{idx + 1}. ")
            text.append_text(format_cart_line(lines[idx]))

        if end < len(lines):
            text.append("\n⋮", style="dim")

        cart_widget.update(text)

    def _refresh_search(self) -> None:
        self._refresh_search_bar()
        self._refresh_results(self._filtered_results())

    def _refresh_search_bar(self) -> None:
        try:
            bar = self.query_one("#search-bar", Static)
        except NoMatches:
            return
        status = self.system_status or "Ready"
        if self.input_state == "normal":
            bar.update(f"/ search, Enter add, j/k +/- x edit cart, Ctrl+S invoice.\n{status}")
            return

        text = Text()
        text.append("Search", style=badge_style("menu"))
        text.append(f": {self.search_query}|\n")
        text.append(status, style="dim")
        bar.update(text)

    def _refresh_results(self, results: list[MenuItem]) -> None:
        try:
            results_widget = self.query_one("#results", Static)
        except NoMatches:
            return

        if not results:
            results_widget.update("No results" if self.search_query else "No menu items yet. Ctrl+N to add one.")
            return

        if self.selected_index >= len(results):
            self.selected_index = 0

        visible_rows = self._visible_rows(results_widget)
        start, end = self._window_bounds(len(results), visible_rows, self.selected_index)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            pointer = "➤ " if idx == self.selected_index else "  "
            lines.append(pointer)
            lines.append_text(format_menu_item(results[idx]))

        if end < len(results):
            lines.append("\n⋮", style="dim")

        results_widget.update(lines)
