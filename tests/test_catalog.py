from __future__ import annotations

from decimal import Decimal

import pytest

from billing.catalog import MenuCatalog
from billing.data import SAMPLE_MENU
from billing.errors import NotFoundError, StorageError, ValidationError


def test_add_item_returns_fresh_ids_in_insertion_order(catalog):
    first = catalog.add_item("Idly", "30", "idly.jpg")
    second = catalog.add_item("Dosa", 15)

    assert first != second
    items = catalog.list_items()
    assert [item.name for item in items] == ["Idly", "Dosa"]
    assert items[0].price == Decimal("30")
    assert items[0].image_ref == "idly.jpg"


@pytest.mark.parametrize(
    "name, price",
    [
        ("", "10"),
        ("   ", "10"),
        ("Vada", "-1"),
        ("Vada", "ten"),
        ("Vada", "NaN"),
    ],
)
def test_add_item_rejects_bad_input(catalog, name, price):
    with pytest.raises(ValidationError):
        catalog.add_item(name, price)
    assert catalog.list_items() == []


def test_zero_price_is_allowed(catalog):
    item_id = catalog.add_item("Water", "0")
    assert catalog.get_item(item_id).price == Decimal("0")


def test_caller_supplied_id_cannot_be_reused(catalog):
    catalog.add_item("Idly", "30", item_id="1")
    catalog.delete_item("1")

    with pytest.raises(ValidationError):
        catalog.add_item("Vada", "20", item_id="1")


def test_update_item_keeps_id_and_position(catalog):
    first = catalog.add_item("Idly", "30")
    catalog.add_item("Dosa", "15")

    catalog.update_item(first, "Rava Idly", "35.50", "rava.jpg")

    items = catalog.list_items()
    assert items[0].item_id == first
    assert items[0].name == "Rava Idly"
    assert items[0].price == Decimal("35.50")
    assert items[1].name == "Dosa"


def test_update_and_delete_unknown_id(catalog):
    with pytest.raises(NotFoundError):
        catalog.update_item("nope", "Idly", "30")
    with pytest.raises(NotFoundError):
        catalog.delete_item("nope")
    with pytest.raises(NotFoundError):
        catalog.get_item("nope")


def test_update_validates_before_touching_item(catalog):
    item_id = catalog.add_item("Idly", "30")
    with pytest.raises(ValidationError):
        catalog.update_item(item_id, "Idly", "-5")
    assert catalog.get_item(item_id).price == Decimal("30")


def test_mutations_are_persisted(store, catalog):
    kept = catalog.add_item("Idly", "30")
    dropped = catalog.add_item("Dosa", "15")
    catalog.update_item(kept, "Idly", "32")
    catalog.delete_item(dropped)

    reloaded = MenuCatalog(store)
    reloaded.load()

    assert reloaded.list_items() == catalog.list_items()
    assert reloaded.get_item(kept).price == Decimal("32")
    assert dropped not in reloaded


def test_failed_write_leaves_catalog_unchanged(store, catalog):
    item_id = catalog.add_item("Idly", "30")
    store.fail_writes = True

    with pytest.raises(StorageError):
        catalog.add_item("Dosa", "15")
    with pytest.raises(StorageError):
        catalog.update_item(item_id, "Idly", "99")
    with pytest.raises(StorageError):
        catalog.delete_item(item_id)

    assert [(item.name, item.price) for item in catalog.list_items()] == [("Idly", Decimal("30"))]


def test_search_is_case_insensitive_substring(catalog):
    catalog.add_item("Masala Dosa", "40")
    catalog.add_item("Idly", "30")
    catalog.add_item("Onion Dosa", "45")

    assert [item.name for item in catalog.search("dOsA")] == ["Masala Dosa", "Onion Dosa"]
    assert len(catalog.search("")) == 3
    assert catalog.search("pizza") == []


def test_sample_menu_only_seeds_an_empty_catalog(catalog):
    assert catalog.load_sample_menu() is True
    assert [item.name for item in catalog.list_items()] == [item.name for item in SAMPLE_MENU]
    assert catalog.get_item("1").price == Decimal("30.00")

    assert catalog.load_sample_menu() is False
    assert len(catalog) == len(SAMPLE_MENU)


@pytest.mark.parametrize(
    "stored",
    [
        [{"item_id": "1", "price": "30"}],
        [{"item_id": "1", "name": "Idly", "price": "thirty"}],
        ["Idly"],
    ],
)
def test_malformed_stored_menu_raises_storage_error(store, stored):
    store.set("menu_items", stored)
    menu = MenuCatalog(store)

    with pytest.raises(StorageError):
        menu.load()
    assert menu.list_items() == []
