from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Mapping

import pytest

from billing.cart import Cart
from billing.catalog import MenuCatalog
from billing.errors import StorageError
from billing.invoice import InvoiceLedger
from billing.models import MenuItem
from billing.persistence import KeyValueStore
from billing.session import BillingSession


class FlakyStore(KeyValueStore):
    """A real store whose writes can be switched to fail, like a full disk."""

    def __init__(self, db_path) -> None:
        super().__init__(db_path)
        self.fail_writes = False

    def set_many(self, values: Mapping[str, Any]) -> None:
        if self.fail_writes:
            raise StorageError("quota exceeded")
        super().set_many(values)


@pytest.fixture
def store(tmp_path) -> FlakyStore:
    kv = FlakyStore(tmp_path / "billing.db")
    kv.bootstrap_schema()
    return kv


@pytest.fixture
def catalog(store) -> MenuCatalog:
    menu = MenuCatalog(store)
    menu.load()
    return menu


@pytest.fixture
def ledger(store) -> InvoiceLedger:
    log = InvoiceLedger(store)
    log.load()
    return log


@pytest.fixture
def cart() -> Cart:
    return Cart()


@pytest.fixture
def session(store) -> BillingSession:
    state = BillingSession(store)
    state.load(seed_sample_menu=False)
    return state


@pytest.fixture
def idly() -> MenuItem:
    return MenuItem(item_id="A", name="Idly", price=Decimal("30.00"), image_ref="idly.jpg")


@pytest.fixture
def dosa() -> MenuItem:
    return MenuItem(item_id="B", name="Dosa", price=Decimal("15.00"), image_ref="")


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 15, 12, 30, tzinfo=timezone.utc)
