"""Application state shared by the terminal UI: catalog, cart and invoice ledger."""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Any, Callable

from billing.cart import Cart
from billing.catalog import MenuCatalog
from billing.config import DB_PATH
from billing.errors import StorageError
from billing.invoice import InvoiceLedger
from billing.models import MenuItem, Transaction
from billing.persistence import KeyValueStore
from billing.reports import DatePredicate, SalesSummary, aggregate, filter_transactions

logger = logging.getLogger(__name__)

Listener = Callable[[str], None]

CATALOG_CHANGED = "catalog"
CART_CHANGED = "cart"
INVOICE_COMMITTED = "invoice"


class BillingSession:
    """Owns every piece of mutable state and tells listeners what changed.

    Listeners receive one of ``CATALOG_CHANGED``, ``CART_CHANGED`` or
    ``INVOICE_COMMITTED`` after the mutation has been applied; failed
    operations raise and notify nobody.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self.catalog = MenuCatalog(store)
        self.cart = Cart()
        self.ledger = InvoiceLedger(store)
        self._listeners: list[Listener] = []

    @classmethod
    def open(cls, db_path: str | Path = DB_PATH, seed_sample_menu: bool = True) -> BillingSession:
        """Create the store, load persisted state and seed the sample menu if empty."""
        store = KeyValueStore(db_path)
        store.bootstrap_schema()
        session = cls(store)
        session.load(seed_sample_menu=seed_sample_menu)
        return session

    def load(self, seed_sample_menu: bool = True) -> None:
        self.catalog.load()
        self.ledger.load()
        if seed_sample_menu:
            self.catalog.load_sample_menu()

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(event)

    # Catalog

    def add_menu_item(self, name: str, price: Any, image_ref: str = "") -> str:
        item_id = self.catalog.add_item(name, price, image_ref)
        self._notify(CATALOG_CHANGED)
        return item_id

    def update_menu_item(self, item_id: str, name: str, price: Any, image_ref: str = "") -> None:
        self.catalog.update_item(item_id, name, price, image_ref)
        self._notify(CATALOG_CHANGED)

    def delete_menu_item(self, item_id: str) -> None:
        self.catalog.delete_item(item_id)
        self._notify(CATALOG_CHANGED)

    def menu_items(self, query: str = "") -> list[MenuItem]:
        return self.catalog.search(query)

    # Cart

    def add_to_cart(self, item_id: str) -> None:
        self.cart.add(self.catalog.get_item(item_id))
        self._notify(CART_CHANGED)

    def update_quantity(self, item_id: str, delta: int) -> None:
        self.cart.update_quantity(item_id, delta)
        self._notify(CART_CHANGED)

    def remove_from_cart(self, item_id: str) -> None:
        self.cart.remove(item_id)
        self._notify(CART_CHANGED)

    def clear_cart(self) -> None:
        self.cart.clear()
        self._notify(CART_CHANGED)

    # Invoices and reports

    def generate_invoice(self, now: datetime | None = None) -> Transaction:
        try:
            transaction = self.ledger.commit(self.cart, now=now)
        except StorageError:
            logger.exception("invoice_commit_failed lines=%d", len(self.cart))
            raise
        self._notify(INVOICE_COMMITTED)
        self._notify(CART_CHANGED)
        return transaction

    def sales_report(
        self,
        predicate: DatePredicate,
        now: datetime | None = None,
        tz: tzinfo | None = None,
    ) -> tuple[list[Transaction], SalesSummary]:
        matched = filter_transactions(self.ledger.transactions(), predicate, now=now, tz=tz)
        return matched, aggregate(matched)
