from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from employee_management.database.bootstrap import apply_schema, list_tables
from employee_management.database.connection import DBConfig, DatabaseConnection
from employee_management.settings import get_settings_module

logger = logging.getLogger("init_db")


def main() -> None:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection(DBConfig.from_dict(settings.DB_CONFIG))

    apply_schema(conn)
    db = conn.config
    logger.info(
        "applied schema.sql -> %s@%s:%s/%s (tables=%d)",
        db.user, db.host, db.port, db.database, len(list_tables(conn)),
    )


if __name__ == "__main__":
    main()
