from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv

from staffclock.database.bootstrap import apply_schema, list_tables
from staffclock.logging_utils import setup_json_logging
from staffclock.settings import get_settings_module

logger = logging.getLogger("staffclock.scripts.init_db")


def main() -> None:
    load_dotenv(override=False)
    setup_json_logging()
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    schema_path = Path(__file__).resolve().parents[1] / "database" / "schema.sql"
    apply_schema(db_config, schema_path=schema_path)
    logger.info(
        "schema applied",
        extra={
            "db": f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}",
            "tables": len(list_tables(db_config)),
        },
    )


if __name__ == "__main__":
    main()
