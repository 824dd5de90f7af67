from __future__ import annotations

from decimal import Decimal

import pytest

from billing.data import SAMPLE_MENU
from billing.errors import EmptyCartError, NotFoundError, StorageError, ValidationError
from billing.reports import Last7Days
from billing.session import CART_CHANGED, CATALOG_CHANGED, INVOICE_COMMITTED, BillingSession


@pytest.fixture
def events(session):
    seen: list[str] = []
    session.subscribe(seen.append)
    return seen


def test_open_creates_store_and_seeds_sample_menu(tmp_path):
    session = BillingSession.open(tmp_path / "nested" / "billing.db")

    assert [item.name for item in session.menu_items()] == [item.name for item in SAMPLE_MENU]
    assert session.ledger.counter == 1

    reopened = BillingSession.open(tmp_path / "nested" / "billing.db")
    assert len(reopened.catalog) == len(SAMPLE_MENU)


def test_catalog_changes_notify(session, events):
    item_id = session.add_menu_item("Idly", "30")
    session.update_menu_item(item_id, "Idly", "32")
    session.delete_menu_item(item_id)

    assert events == [CATALOG_CHANGED] * 3


def test_failed_operations_do_not_notify(session, events):
    with pytest.raises(ValidationError):
        session.add_menu_item("", "30")
    with pytest.raises(NotFoundError):
        session.add_to_cart("missing")
    with pytest.raises(EmptyCartError):
        session.generate_invoice()

    assert events == []


def test_cart_flow_and_invoice(session, events, fixed_now):
    idly = session.add_menu_item("Idly", "30")
    dosa = session.add_menu_item("Dosa", "15")
    events.clear()

    session.add_to_cart(idly)
    session.add_to_cart(idly)
    session.add_to_cart(dosa)
    session.update_quantity(dosa, 1)
    session.update_quantity(dosa, -1)

    transaction = session.generate_invoice(now=fixed_now)

    assert transaction.total == Decimal("75")
    assert session.cart.is_empty()
    assert events == [CART_CHANGED] * 5 + [INVOICE_COMMITTED, CART_CHANGED]

    matched, summary = session.sales_report(Last7Days(), now=fixed_now)
    assert matched == [transaction]
    assert summary.count == 1
    assert summary.total_revenue == Decimal("75")


def test_deleting_menu_item_keeps_cart_and_history(session, fixed_now):
    idly = session.add_menu_item("Idly", "30")
    session.add_to_cart(idly)
    first = session.generate_invoice(now=fixed_now)
    session.add_to_cart(idly)

    session.delete_menu_item(idly)

    assert session.cart.get_line(idly).price == Decimal("30")
    assert session.ledger.get(first.invoice_number).line_items[0].item_id == idly


def test_storage_failure_on_invoice_keeps_cart(store, session, events):
    idly = session.add_menu_item("Idly", "30")
    session.add_to_cart(idly)
    events.clear()

    store.fail_writes = True
    with pytest.raises(StorageError):
        session.generate_invoice()

    assert events == []
    assert session.cart.total_item_count() == 1
    assert session.ledger.counter == 1


def test_unsubscribe(session, events):
    session.unsubscribe(events.append)
    session.clear_cart()
    assert events == []
