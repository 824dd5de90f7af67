"""Runtime configuration defaults for persistence, logging and export."""

from __future__ import annotations

import os

DB_PATH = os.environ.get("BILLING_DB_PATH", "data/billing.db")
EXPORT_DIR = os.environ.get("BILLING_EXPORT_DIR", "exports")
DEBUG_LOG_PATH = os.environ.get("BILLING_DEBUG_LOG", "/tmp/billing-debug.log")

CURRENCY_SYMBOL = os.environ.get("BILLING_CURRENCY", "₹")

# A4 at 100 dpi.
PDF_PAGE_WIDTH_PX = 827
PDF_PAGE_HEIGHT_PX = 1169
PDF_RESOLUTION_DPI = 100.0
PDF_MARGIN_PX = 60
PDF_FONT_PATH = "/System/Library/Fonts/SFNS.ttf"
PDF_TITLE_FONT_SIZE = 34
PDF_BODY_FONT_SIZE = 18

QR_SEARCH_DIR = os.environ.get("BILLING_QR_DIR", ".")
