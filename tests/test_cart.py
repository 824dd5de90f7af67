from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

from billing.cart import Cart
from billing.models import MenuItem


def test_empty_cart_totals(cart):
    assert cart.is_empty()
    assert cart.subtotal() == Decimal("0")
    assert cart.total_item_count() == 0
    assert cart.lines() == []


def test_one_line_per_distinct_item_with_call_counts(cart, idly, dosa):
    coffee = MenuItem(item_id="C", name="Coffee", price=Decimal("20.00"))
    for item in (idly, dosa, idly, coffee, idly, dosa):
        cart.add(item)

    lines = cart.lines()
    assert [line.item_id for line in lines] == ["A", "B", "C"]
    assert {line.item_id: line.quantity for line in lines} == {"A": 3, "B": 2, "C": 1}


def test_add_keeps_first_captured_name_and_price(cart, idly):
    cart.add(idly)
    repriced = replace(idly, name="Idly Special", price=Decimal("45.00"))

    line = cart.add(repriced)

    assert line.quantity == 2
    assert line.name == "Idly"
    assert line.price == Decimal("30.00")


def test_subtotal_and_item_count(cart, idly, dosa):
    cart.add(idly)
    cart.add(idly)
    cart.add(dosa)

    assert cart.subtotal() == Decimal("75.00")
    assert cart.total_item_count() == 3


def test_update_quantity_sets_new_value(cart, idly):
    cart.add(idly)
    cart.update_quantity("A", 4)
    assert cart.get_line("A").quantity == 5

    cart.update_quantity("A", -2)
    assert cart.get_line("A").quantity == 3


def test_update_quantity_to_zero_removes_line(cart, idly, dosa):
    cart.add(idly)
    cart.add(dosa)
    cart.add(dosa)

    cart.update_quantity("A", -1)
    cart.update_quantity("B", -5)

    assert cart.get_line("A") is None
    assert cart.get_line("B") is None
    assert cart.is_empty()


def test_update_quantity_unknown_id_is_noop(cart, idly):
    cart.add(idly)
    cart.update_quantity("missing", 3)
    assert [(line.item_id, line.quantity) for line in cart.lines()] == [("A", 1)]


def test_remove_and_clear(cart, idly, dosa):
    cart.add(idly)
    cart.add(dosa)

    cart.remove("missing")
    assert len(cart) == 2

    cart.remove("A")
    assert [line.item_id for line in cart.lines()] == ["B"]

    cart.clear()
    assert cart.is_empty()


def test_lines_snapshot_is_not_affected_by_later_changes(cart, idly):
    cart.add(idly)
    snapshot = cart.lines()

    cart.add(idly)
    cart.clear()

    assert snapshot[0].quantity == 1


def test_fresh_carts_do_not_share_lines(idly):
    first = Cart()
    second = Cart()
    first.add(idly)
    assert second.is_empty()
