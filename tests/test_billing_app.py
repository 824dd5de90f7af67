from __future__ import annotations

from decimal import Decimal

from billing import billing_app
from billing.billing_app import generate_and_export_invoice


def test_invoice_is_saved_and_exported(session, tmp_path):
    idly = session.add_menu_item("Idly", "30")
    session.add_to_cart(idly)

    transaction, status = generate_and_export_invoice(session, tmp_path)

    assert transaction.invoice_number == 1
    assert (tmp_path / "invoice-1.pdf").exists()
    assert "Invoice #1 saved" in status


def test_export_error_is_reported_and_invoice_stands(session, tmp_path, monkeypatch):
    def broken_export(transaction, out_dir):
        raise UnicodeEncodeError("latin-1", "₹", 0, 1, "ordinal not in range(256)")

    monkeypatch.setattr(billing_app, "export_invoice_pdf", broken_export)
    idly = session.add_menu_item("Idly", "30")
    session.add_to_cart(idly)

    transaction, status = generate_and_export_invoice(session, tmp_path)

    assert transaction.total == Decimal("30")
    assert "PDF export failed" in status
    assert session.cart.is_empty()
    assert session.ledger.counter == 2


def test_empty_cart_is_reported_not_raised(session, tmp_path):
    transaction, status = generate_and_export_invoice(session, tmp_path)

    assert transaction is None
    assert status.startswith("Invoice not saved")
