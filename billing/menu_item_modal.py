"""Add/edit menu item modal screen."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from billing.errors import BillingError
from billing.models import MenuItem


@dataclass
class MenuItemDraft:
    """Raw form values; validated by the catalog on submit."""

    name: str = ""
    price: str = ""
    image_ref: str = ""


class MenuItemModal(ModalScreen[bool]):
    """Form for a new or edited dish.

    ``on_submit`` applies the draft and may raise a ``BillingError``; the modal
    then stays open and shows the message.
    """

    CSS = """
    MenuItemModal {
        align: center middle;
        background: $background 60%;
    }

    #menu-item-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #menu-item-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #menu-item-body {
        margin-bottom: 1;
        color: white;
    }

    #menu-item-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #menu-item-help {
        color: #dddddd;
    }
    """

    _FIELDS = (("name", "Name"), ("price", "Price"), ("image_ref", "Image"))

    def __init__(self, on_submit: Callable[[MenuItemDraft], None], item: MenuItem | None = None) -> None:
        super().__init__()
        self.on_submit = on_submit
        self.editing = item is not None
        if item is None:
            self.draft = MenuItemDraft()
        else:
            self.draft = MenuItemDraft(name=item.name, price=str(item.price), image_ref=item.image_ref)
        self.field_index = 0
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="menu-item-dialog"):
            yield Static("Edit Item" if self.editing else "Add Item", id="menu-item-title")
            yield Static(id="menu-item-body")
            yield Static(id="menu-item-error")
            yield Static("Type to edit. Tab/↑/↓ switch field. Enter save. Esc cancel.", id="menu-item-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key == "escape":
            self.dismiss(False)
            event.stop()
            return

        if event.key == "enter":
            self._confirm()
            event.stop()
            return

        if event.key in {"tab", "down"}:
            self.field_index = (self.field_index + 1) % len(self._FIELDS)
            self._refresh_content()
            event.stop()
            return

        if event.key in {"shift+tab", "up"}:
            self.field_index = (self.field_index - 1) % len(self._FIELDS)
            self._refresh_content()
            event.stop()
            return

        field_name = self._FIELDS[self.field_index][0]
        value = getattr(self.draft, field_name)

        if event.key == "backspace":
            if value:
                setattr(self.draft, field_name, value[:-1])
                self.error = ""
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character:
            setattr(self.draft, field_name, value + event.character)
            self.error = ""
            self._refresh_content()
        # Everything else stays inside the form.
        event.stop()

    def _confirm(self) -> None:
        try:
            self.on_submit(self.draft)
        except BillingError as exc:
            self.error = str(exc)
            self._refresh_content()
            return
        self.dismiss(True)

    def _refresh_content(self) -> None:
        content = Text(style="white")
        for idx, (field_name, label) in enumerate(self._FIELDS):
            if idx > 0:
                content.append("\n")
            active = idx == self.field_index
            pointer = "➤ " if active else "  "
            value = getattr(self.draft, field_name)
            content.append(f"{pointer}{label}: ", style="bold white" if active else "white")
            content.append(f"{value}|" if active else value)
        self.query_one("#menu-item-body", Static).update(content)
        self.query_one("#menu-item-error", Static).update(self.error or "")
