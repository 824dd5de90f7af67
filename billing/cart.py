"""In-memory cart: one line per dish, merge on add, quantity rules and totals."""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal

from billing.models import ZERO, CartLine, MenuItem

logger = logging.getLogger(__name__)


class Cart:
    """Working set of selected dishes before an invoice is generated.

    Lines are frozen ``CartLine`` values replaced on every quantity change, so
    snapshots handed out by :meth:`lines` never change underneath the caller.
    """

    def __init__(self) -> None:
        self._lines: list[CartLine] = []

    def _index_of(self, item_id: str) -> int | None:
        for idx, line in enumerate(self._lines):
            if line.item_id == item_id:
                return idx
        return None

    def add(self, item: MenuItem) -> CartLine:
        """Add one unit of ``item``; an existing line keeps its original name and price."""
        idx = self._index_of(item.item_id)
        if idx is None:
            line = CartLine(item_id=item.item_id, name=item.name, price=item.price, quantity=1)
            self._lines.append(line)
        else:
            line = replace(self._lines[idx], quantity=self._lines[idx].quantity + 1)
            self._lines[idx] = line
        logger.debug("cart_add id=%s qty=%d", line.item_id, line.quantity)
        return line

    def update_quantity(self, item_id: str, delta: int) -> None:
        """Shift a line's quantity by ``delta``, dropping it at zero or below."""
        idx = self._index_of(item_id)
        if idx is None:
            return
        quantity = self._lines[idx].quantity + delta
        if quantity <= 0:
            del self._lines[idx]
            logger.debug("cart_drop id=%s", item_id)
            return
        self._lines[idx] = replace(self._lines[idx], quantity=quantity)
        logger.debug("cart_qty id=%s qty=%d", item_id, quantity)

    def remove(self, item_id: str) -> None:
        idx = self._index_of(item_id)
        if idx is not None:
            del self._lines[idx]

    def clear(self) -> None:
        self._lines.clear()

    def get_line(self, item_id: str) -> CartLine | None:
        idx = self._index_of(item_id)
        return None if idx is None else self._lines[idx]

    def lines(self) -> list[CartLine]:
        return list(self._lines)

    def is_empty(self) -> bool:
        return not self._lines

    def subtotal(self) -> Decimal:
        return sum((line.line_total for line in self._lines), ZERO)

    def total_item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    def __len__(self) -> int:
        return len(self._lines)
