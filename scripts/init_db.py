from __future__ import annotations

import logging

from hr_ledger.common.logging_utils import configure_logging
from hr_ledger.config import load_settings
from hr_ledger.database.bootstrap import apply_schema, list_tables
from hr_ledger.database.connection import DBConfig, DatabaseConnection

logger = logging.getLogger("hr_ledger.scripts.init_db")


def main() -> None:
    settings = load_settings()
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    config = DBConfig.from_dict(dict(settings.DB_CONFIG))
    conn = DatabaseConnection.get_instance(config)

    apply_schema(conn)
    tables = list_tables(conn)
    logger.info(
        "Applied schema.sql -> %s@%s:%s/%s (tables=%d)",
        config.user,
        config.host,
        config.port,
        config.database,
        len(tables),
    )


if __name__ == "__main__":
    main()
