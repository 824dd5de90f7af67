"""Domain models for restaurant billing."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from billing.errors import ValidationError

ZERO = Decimal("0")


def to_decimal(value: Any, field_name: str = "price") -> Decimal:
    """Coerce a user or stored value into a finite Decimal."""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    if isinstance(value, float):
        value = repr(value)
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"{field_name} must be a number, got {value!r}") from exc
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a finite number")
    return amount


def parse_timestamp(raw: str) -> datetime:
    """Parse a stored ISO-8601 timestamp."""
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


@dataclass(frozen=True)
class MenuItem:
    """A sellable dish in the catalog."""

    item_id: str
    name: str
    price: Decimal
    image_ref: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"item_id": self.item_id, "name": self.name, "price": str(self.price), "image_ref": self.image_ref}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MenuItem:
        return cls(
            item_id=str(data["item_id"]),
            name=str(data["name"]),
            price=to_decimal(data["price"]),
            image_ref=str(data.get("image_ref") or ""),
        )


@dataclass(frozen=True)
class CartLine:
    """A cart row. Name and price are copied from the menu item when first added."""

    item_id: str
    name: str
    price: Decimal
    quantity: int = 1

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> dict[str, Any]:
        return {"item_id": self.item_id, "name": self.name, "price": str(self.price), "quantity": self.quantity}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CartLine:
        return cls(
            item_id=str(data["item_id"]),
            name=str(data["name"]),
            price=to_decimal(data["price"]),
            quantity=int(data["quantity"]),
        )


@dataclass(frozen=True)
class Transaction:
    """A committed invoice. Never mutated after creation."""

    invoice_number: int
    timestamp: datetime
    line_items: tuple[CartLine, ...]
    subtotal: Decimal
    tax: Decimal = ZERO
    total: Decimal = ZERO

    def to_dict(self) -> dict[str, Any]:
        return {
            "invoice_number": self.invoice_number,
            "timestamp": self.timestamp.isoformat(),
            "line_items": [line.to_dict() for line in self.line_items],
            "subtotal": str(self.subtotal),
            "tax": str(self.tax),
            "total": str(self.total),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Transaction:
        return cls(
            invoice_number=int(data["invoice_number"]),
            timestamp=parse_timestamp(str(data["timestamp"])),
            line_items=tuple(CartLine.from_dict(line) for line in data.get("line_items", [])),
            subtotal=to_decimal(data["subtotal"], "subtotal"),
            tax=to_decimal(data.get("tax", "0"), "tax"),
            total=to_decimal(data["total"], "total"),
        )
