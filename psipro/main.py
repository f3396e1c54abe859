"""Console entry point for PsiPro."""

import logging
import sys
from typing import Optional

from psipro.config import get_settings

# Libraries whose INFO output drowns the agenda logs.
NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "uvicorn.access")


def setup_logging(level: Optional[str] = None) -> None:
    """Send PsiPro logs to stdout at *level* (default: ``LOG_LEVEL``)."""
    level = level or get_settings().log_level
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, logging.getLogger().level))


def main() -> None:
    setup_logging()

    from psipro.cli.commands import app

    app()
