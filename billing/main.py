"""Entry point for the restaurant billing Textual app."""

from __future__ import annotations

import logging
from pathlib import Path

from billing.billing_app import BillingApp
from billing.config import DB_PATH, DEBUG_LOG_PATH, EXPORT_DIR
from billing.session import BillingSession

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(log_path: str | Path = DEBUG_LOG_PATH, level: int = logging.INFO) -> None:
    """Send logs to a file; the terminal belongs to the UI."""
    root = logging.getLogger("billing")
    root.setLevel(level)
    try:
        path = Path(log_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(path, encoding="utf-8")
    except OSError:
        # Logging must never interfere with app flow.
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(handler)


def main() -> None:
    """Run the Textual application."""
    configure_logging()
    session = BillingSession.open(DB_PATH)
    BillingApp(session, export_dir=EXPORT_DIR).run()


if __name__ == "__main__":
    main()
