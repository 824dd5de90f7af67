from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from billing.export import _PdfPages, export_invoice_pdf, export_sales_report_pdf, format_money
from billing.invoice import build_transaction
from billing.models import CartLine
from billing.reports import aggregate


def _transaction(number: int, lines: int = 2):
    stamp = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc) + timedelta(minutes=number)
    items = [
        CartLine(item_id=str(idx), name=f"Dish {idx}", price=Decimal("12.50"), quantity=idx + 1) for idx in range(lines)
    ]
    return build_transaction(items, number, stamp)


def test_format_money_uses_two_decimals():
    assert format_money(Decimal("75")).endswith("75.00")
    assert format_money(Decimal("0.5")).endswith("0.50")


def test_invoice_pdf_is_named_after_invoice_number(tmp_path):
    path = export_invoice_pdf(_transaction(42), tmp_path / "exports")

    assert path == tmp_path / "exports" / "invoice-42.pdf"
    assert path.read_bytes().startswith(b"%PDF")


def test_long_table_spills_onto_more_pages():
    pages = _PdfPages()
    pages.table(head=("Item", "Qty"), rows=[(f"Dish {n}", "1") for n in range(200)], widths=(0.7, 0.3))

    assert len(pages.pages) > 1


def test_sales_report_pdf(tmp_path):
    transactions = [_transaction(n) for n in range(1, 4)]
    now = datetime(2024, 1, 20, 9, 0)

    path = export_sales_report_pdf(transactions, aggregate(transactions), tmp_path, now=now)

    assert path.name == "sales-report-2024-01-20.pdf"
    assert path.read_bytes().startswith(b"%PDF")


def test_empty_sales_report_still_renders(tmp_path):
    path = export_sales_report_pdf([], aggregate([]), tmp_path, now=datetime(2024, 1, 20, 9, 0))
    assert path.exists()
