from __future__ import annotations

import logging

from .common.logging_utils import configure_logging
from .config import get_settings_module, load_settings
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)


def bootstrap() -> Container:
    """Load settings for APP_ENV, configure logging and wire the ledgers."""
    settings = load_settings()
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    db_config = dict(settings.DB_CONFIG)
    debug = bool(getattr(settings, "DEBUG", False))
    strict = bool(getattr(settings, "STRICT_LEDGER", False))

    if debug:
        logger.debug(
            "settings=%s db=%s@%s:%s/%s strict=%s",
            get_settings_module(),
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
            strict,
        )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        apply_schema(conn)
        logger.info("Schema ready (tables=%d)", len(list_tables(conn)))

    return build_container(db_config=db_config, strict=strict)
