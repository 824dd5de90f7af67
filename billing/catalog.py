"""Menu catalog: create, edit and delete sellable dishes."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any
from uuid import uuid4

from billing.constant import MENU_ITEMS_KEY
from billing.data import SAMPLE_MENU
from billing.errors import NotFoundError, StorageError, ValidationError
from billing.models import MenuItem, to_decimal
from billing.persistence import KeyValueStore

logger = logging.getLogger(__name__)


def _validated_fields(name: str, price: Any, image_ref: str | None) -> tuple[str, Decimal, str]:
    clean_name = (name or "").strip()
    if not clean_name:
        raise ValidationError("Item name is required")
    amount = to_decimal(price)
    if amount < 0:
        raise ValidationError("Price cannot be negative")
    return clean_name, amount, (image_ref or "").strip()


class MenuCatalog:
    """Insertion-ordered mapping of item id to MenuItem, persisted on every mutation."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self._items: dict[str, MenuItem] = {}
        # Ids handed out this session stay reserved even after deletion.
        self._issued_ids: set[str] = set()

    def load(self) -> None:
        raw = self.store.get(MENU_ITEMS_KEY) or []
        items: dict[str, MenuItem] = {}
        try:
            for entry in raw:
                item = MenuItem.from_dict(entry)
                items[item.item_id] = item
        except (KeyError, TypeError, ValueError) as exc:
            raise StorageError(f"Stored menu items are malformed: {exc!r}") from exc
        self._items = items
        self._issued_ids.update(self._items)
        logger.info("catalog_loaded items=%d", len(self._items))

    def _persist(self, previous: dict[str, MenuItem]) -> None:
        try:
            self.store.set(MENU_ITEMS_KEY, [item.to_dict() for item in self._items.values()])
        except StorageError:
            self._items = previous
            raise

    def _new_id(self) -> str:
        item_id = uuid4().hex
        while item_id in self._issued_ids:
            item_id = uuid4().hex
        return item_id

    def add_item(self, name: str, price: Any, image_ref: str = "", item_id: str | None = None) -> str:
        """Validate, store and persist a new dish; return its id."""
        clean_name, amount, clean_ref = _validated_fields(name, price, image_ref)
        if item_id is None:
            item_id = self._new_id()
        elif item_id in self._issued_ids:
            raise ValidationError(f"Item id {item_id!r} is already in use")

        previous = dict(self._items)
        self._items[item_id] = MenuItem(item_id=item_id, name=clean_name, price=amount, image_ref=clean_ref)
        self._persist(previous)
        self._issued_ids.add(item_id)
        logger.info("catalog_add id=%s name=%r price=%s", item_id, clean_name, amount)
        return item_id

    def update_item(self, item_id: str, name: str, price: Any, image_ref: str = "") -> None:
        """Replace the fields of an existing dish, keeping its id and position."""
        if item_id not in self._items:
            raise NotFoundError(f"No menu item with id {item_id!r}")
        clean_name, amount, clean_ref = _validated_fields(name, price, image_ref)

        previous = dict(self._items)
        self._items[item_id] = MenuItem(item_id=item_id, name=clean_name, price=amount, image_ref=clean_ref)
        self._persist(previous)
        logger.info("catalog_update id=%s name=%r price=%s", item_id, clean_name, amount)

    def delete_item(self, item_id: str) -> None:
        """Remove a dish. Cart lines and past invoices keep their own copies."""
        if item_id not in self._items:
            raise NotFoundError(f"No menu item with id {item_id!r}")

        previous = dict(self._items)
        del self._items[item_id]
        self._persist(previous)
        logger.info("catalog_delete id=%s", item_id)

    def get_item(self, item_id: str) -> MenuItem:
        try:
            return self._items[item_id]
        except KeyError:
            raise NotFoundError(f"No menu item with id {item_id!r}") from None

    def list_items(self) -> list[MenuItem]:
        return list(self._items.values())

    def search(self, query: str) -> list[MenuItem]:
        """Case-insensitive substring match on dish names."""
        items = self.list_items()
        q = query.strip().lower()
        if not q:
            return items
        return [item for item in items if q in item.name.lower()]

    def load_sample_menu(self) -> bool:
        """Seed the sample dishes when the catalog is empty."""
        if self._items:
            return False
        previous = dict(self._items)
        for item in SAMPLE_MENU:
            self._items[item.item_id] = item
        self._persist(previous)
        self._issued_ids.update(self._items)
        logger.info("catalog_seeded items=%d", len(self._items))
        return True

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items
