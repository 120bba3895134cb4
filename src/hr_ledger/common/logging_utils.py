from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """Install one stream handler on the package logger.

    An unknown level name falls back to INFO.
    """
    logger = logging.getLogger("hr_ledger")
    unknown = None
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            unknown, resolved = level, logging.INFO
        level = resolved
    logger.setLevel(level)
    if not any(getattr(h, "_hr_ledger", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._hr_ledger = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    if unknown is not None:
        logger.warning("Unknown LOG_LEVEL %r, using INFO", unknown)
