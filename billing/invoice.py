"""Invoice generation: turns the cart into an immutable, numbered transaction."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable

from billing.cart import Cart
from billing.constant import FIRST_INVOICE_NUMBER, INVOICE_COUNTER_KEY, TRANSACTIONS_KEY
from billing.errors import EmptyCartError, NotFoundError, StorageError
from billing.models import ZERO, CartLine, Transaction
from billing.persistence import KeyValueStore

logger = logging.getLogger(__name__)


def build_transaction(lines: Iterable[CartLine], invoice_number: int, timestamp: datetime) -> Transaction:
    """Snapshot cart lines into a transaction. Tax is always zero."""
    line_items = tuple(
        CartLine(item_id=line.item_id, name=line.name, price=line.price, quantity=line.quantity) for line in lines
    )
    if not line_items:
        raise EmptyCartError("Cannot generate an invoice for an empty cart")
    subtotal = sum((line.line_total for line in line_items), ZERO)
    tax = ZERO
    return Transaction(
        invoice_number=invoice_number,
        timestamp=timestamp,
        line_items=line_items,
        subtotal=subtotal,
        tax=tax,
        total=subtotal + tax,
    )


class InvoiceLedger:
    """Append-only transaction log plus the next invoice number."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self._transactions: list[Transaction] = []
        self._counter = FIRST_INVOICE_NUMBER

    def load(self) -> None:
        raw_log = self.store.get(TRANSACTIONS_KEY) or []
        stored_counter = self.store.get(INVOICE_COUNTER_KEY)
        try:
            transactions = [Transaction.from_dict(entry) for entry in raw_log]
            counter = int(stored_counter) if stored_counter is not None else FIRST_INVOICE_NUMBER
        except (KeyError, TypeError, ValueError) as exc:
            raise StorageError(f"Stored transaction log is malformed: {exc!r}") from exc
        self._transactions = transactions
        if self._transactions:
            highest = max(t.invoice_number for t in self._transactions)
            if counter <= highest:
                logger.warning("invoice_counter_repaired stored=%s highest=%d", stored_counter, highest)
                counter = highest + 1
        self._counter = max(counter, FIRST_INVOICE_NUMBER)
        logger.info("ledger_loaded transactions=%d next_invoice=%d", len(self._transactions), self._counter)

    @property
    def counter(self) -> int:
        """The invoice number the next commit will receive."""
        return self._counter

    def transactions(self) -> list[Transaction]:
        return list(self._transactions)

    def get(self, invoice_number: int) -> Transaction:
        for transaction in self._transactions:
            if transaction.invoice_number == invoice_number:
                return transaction
        raise NotFoundError(f"No invoice #{invoice_number}")

    def commit(self, cart: Cart, now: datetime | None = None) -> Transaction:
        """Generate an invoice from ``cart``.

        The new log and counter are written in one store call. In-memory state
        and the cart only change once that write succeeds; a ``StorageError``
        propagates with nothing applied.
        """
        if cart.is_empty():
            raise EmptyCartError("Cannot generate an invoice for an empty cart")

        timestamp = now or datetime.now(timezone.utc)
        transaction = build_transaction(cart.lines(), self._counter, timestamp)
        next_log = [*self._transactions, transaction]
        next_counter = self._counter + 1

        self.store.set_many(
            {
                TRANSACTIONS_KEY: [t.to_dict() for t in next_log],
                INVOICE_COUNTER_KEY: next_counter,
            }
        )

        self._transactions = next_log
        self._counter = next_counter
        cart.clear()
        logger.info(
            "invoice_committed number=%d lines=%d total=%s",
            transaction.invoice_number,
            len(transaction.line_items),
            transaction.total,
        )
        return transaction
