"""Static sample menu data."""

from __future__ import annotations

from billing.constant import SAMPLE_MENU_BY_ID
from billing.models import MenuItem, to_decimal

SAMPLE_MENU: list[MenuItem] = [
    MenuItem(
        item_id=item_id,
        name=meta["name"],
        price=to_decimal(meta["price"]),
        image_ref=meta["image_ref"],
    )
    for item_id, meta in SAMPLE_MENU_BY_ID.items()
]
