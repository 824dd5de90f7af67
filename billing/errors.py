"""Error kinds raised by the billing core."""

from __future__ import annotations


class BillingError(Exception):
    """Base class for errors surfaced to the user interface."""


class ValidationError(BillingError, ValueError):
    """Bad input: empty name, negative price, malformed or inverted date range."""


class NotFoundError(BillingError, LookupError):
    """Operation on an unknown menu item or invoice."""


class EmptyCartError(BillingError):
    """Invoice generation attempted with nothing in the cart."""


class StorageError(BillingError):
    """Persistence read or write failure."""
