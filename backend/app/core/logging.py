from __future__ import annotations

import logging

from app.core.config import Settings


def configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )

    # SQL echo is noise next to the request log
    for name in ("sqlalchemy.engine", "sqlalchemy.pool", "multipart"):
        logging.getLogger(name).setLevel(logging.WARNING)
