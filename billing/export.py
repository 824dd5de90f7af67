"""Invoice and sales report export as PDF, rendered with Pillow."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Sequence

from PIL import Image, ImageDraw, ImageFont

from billing.config import (
    CURRENCY_SYMBOL,
    PDF_BODY_FONT_SIZE,
    PDF_FONT_PATH,
    PDF_MARGIN_PX,
    PDF_PAGE_HEIGHT_PX,
    PDF_PAGE_WIDTH_PX,
    PDF_RESOLUTION_DPI,
    PDF_TITLE_FONT_SIZE,
)
from billing.models import Transaction
from billing.reports import SalesSummary

logger = logging.getLogger(__name__)

_FONT_OVERRIDE_ENV = "BILLING_PDF_FONT_PATH"
_LINUX_FONT_FALLBACKS = (
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
)
_HEADER_FILL = (102, 126, 234)
_HEADER_TEXT = (255, 255, 255)
_TEXT = (33, 37, 41)
_MUTED = (108, 117, 125)
_ROW_RULE = (222, 226, 230)
_ROW_PAD_PX = 8


def format_money(amount: Decimal) -> str:
    return f"{CURRENCY_SYMBOL}{amount:.2f}"


def resolve_font_path() -> str | None:
    """
    Resolve a TrueType font for PDF text.

    Resolution order:
    1. BILLING_PDF_FONT_PATH (if set)
    2. PDF_FONT_PATH
    3. Known Linux fallbacks
    """
    env_override = os.environ.get(_FONT_OVERRIDE_ENV, "").strip()
    candidates: list[str] = []
    if env_override:
        candidates.append(env_override)
    candidates.append(PDF_FONT_PATH)
    candidates.extend(_LINUX_FONT_FALLBACKS)

    seen: set[str] = set()
    for candidate in candidates:
        if not candidate or candidate in seen:
            continue
        seen.add(candidate)
        if Path(candidate).is_file():
            return candidate
    return None


def _load_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    font_path = resolve_font_path()
    if font_path is None:
        logger.warning("pdf_font_missing using Pillow default font; set %s for a custom font", _FONT_OVERRIDE_ENV)
        return ImageFont.load_default(size=size)
    return ImageFont.truetype(font_path, size)


class _PdfPages:
    """Accumulates rendered A4 pages, starting a new one when text runs off the bottom."""

    def __init__(self) -> None:
        self.title_font = _load_font(PDF_TITLE_FONT_SIZE)
        self.body_font = _load_font(PDF_BODY_FONT_SIZE)
        self.bold_font = _load_font(PDF_BODY_FONT_SIZE + 4)
        self.pages: list[Image.Image] = []
        self.y = 0
        self._new_page()

    def _new_page(self) -> None:
        page = Image.new("RGB", (PDF_PAGE_WIDTH_PX, PDF_PAGE_HEIGHT_PX), color=(255, 255, 255))
        self.pages.append(page)
        self.draw = ImageDraw.Draw(page)
        self.y = PDF_MARGIN_PX

    def _line_height(self, font: object) -> int:
        bbox = self.draw.textbbox((0, 0), "Hg", font=font)
        return (bbox[3] - bbox[1]) + _ROW_PAD_PX * 2

    def _ensure_room(self, height: int) -> None:
        if self.y + height > PDF_PAGE_HEIGHT_PX - PDF_MARGIN_PX:
            self._new_page()

    def text(self, value: str, font: object | None = None, fill: tuple[int, int, int] = _TEXT, gap: int = 0) -> None:
        font = font or self.body_font
        height = self._line_height(font)
        self._ensure_room(height)
        self.draw.text((PDF_MARGIN_PX, self.y + _ROW_PAD_PX), value, font=font, fill=fill)
        self.y += height + gap

    def spacer(self, height: int) -> None:
        self.y += height

    def table(self, head: Sequence[str], rows: Sequence[Sequence[str]], widths: Sequence[float]) -> None:
        """Draw a table; ``widths`` are fractions of the printable width."""
        usable = PDF_PAGE_WIDTH_PX - PDF_MARGIN_PX * 2
        offsets = [PDF_MARGIN_PX]
        for fraction in widths[:-1]:
            offsets.append(offsets[-1] + int(usable * fraction))
        height = self._line_height(self.body_font)

        def draw_head() -> None:
            self.draw.rectangle(
                (PDF_MARGIN_PX, self.y, PDF_PAGE_WIDTH_PX - PDF_MARGIN_PX, self.y + height),
                fill=_HEADER_FILL,
            )
            for x, label in zip(offsets, head):
                self.draw.text((x + _ROW_PAD_PX, self.y + _ROW_PAD_PX), label, font=self.body_font, fill=_HEADER_TEXT)
            self.y += height

        self._ensure_room(height * 2)
        draw_head()
        for row in rows:
            if self.y + height > PDF_PAGE_HEIGHT_PX - PDF_MARGIN_PX:
                self._new_page()
                draw_head()
            for x, cell in zip(offsets, row):
                self.draw.text((x + _ROW_PAD_PX, self.y + _ROW_PAD_PX), cell, font=self.body_font, fill=_TEXT)
            self.y += height
            self.draw.line(
                (PDF_MARGIN_PX, self.y, PDF_PAGE_WIDTH_PX - PDF_MARGIN_PX, self.y),
                fill=_ROW_RULE,
                width=1,
            )

    def save(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        first, *rest = self.pages
        first.save(path, "PDF", resolution=PDF_RESOLUTION_DPI, save_all=True, append_images=rest)
        return path


def export_invoice_pdf(transaction: Transaction, out_dir: str | Path) -> Path:
    """Render one invoice to ``<out_dir>/invoice-<number>.pdf``."""
    pages = _PdfPages()
    local_time = transaction.timestamp.astimezone()

    pages.text("Restaurant Invoice", font=pages.title_font, gap=10)
    pages.text(f"Invoice #: {transaction.invoice_number}")
    pages.text(f"Date: {local_time:%Y-%m-%d}")
    pages.text(f"Time: {local_time:%H:%M:%S}", gap=16)

    pages.table(
        head=("Item", "Qty", "Price", "Total"),
        rows=[
            (line.name, str(line.quantity), format_money(line.price), format_money(line.line_total))
            for line in transaction.line_items
        ],
        widths=(0.46, 0.14, 0.2, 0.2),
    )

    pages.spacer(20)
    pages.text(f"Subtotal: {format_money(transaction.subtotal)}")
    pages.text(f"Total: {format_money(transaction.total)}", font=pages.bold_font, gap=30)
    pages.text("Thank you for your business!", fill=_MUTED)

    path = pages.save(Path(out_dir) / f"invoice-{transaction.invoice_number}.pdf")
    logger.info("invoice_exported number=%d path=%s", transaction.invoice_number, path)
    return path


def export_sales_report_pdf(
    transactions: Sequence[Transaction],
    summary: SalesSummary,
    out_dir: str | Path,
    now: datetime | None = None,
    title: str = "Sales Report",
) -> Path:
    """Render a filtered transaction list with its totals to ``<out_dir>/sales-report-<date>.pdf``."""
    generated = (now or datetime.now()).astimezone()
    pages = _PdfPages()

    pages.text(title, font=pages.title_font, gap=10)
    pages.text(f"Generated: {generated:%Y-%m-%d %H:%M:%S}", gap=16)
    pages.text(f"Total Revenue: {format_money(summary.total_revenue)}")
    pages.text(f"Total Transactions: {summary.count}", gap=16)

    pages.table(
        head=("Invoice #", "Date", "Items", "Total"),
        rows=[
            (
                str(t.invoice_number),
                f"{t.timestamp.astimezone():%Y-%m-%d}",
                str(len(t.line_items)),
                format_money(t.total),
            )
            for t in transactions
        ],
        widths=(0.22, 0.34, 0.16, 0.28),
    )

    path = pages.save(Path(out_dir) / f"sales-report-{generated:%Y-%m-%d}.pdf")
    logger.info("report_exported transactions=%d path=%s", summary.count, path)
    return path
