from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_link.attendance_link.database.bootstrap import apply_schema, ensure_admin_user, list_tables
from src.attendance_link.attendance_link.database.connection import DBConfig, DatabaseConnection

logger = logging.getLogger("init_db")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    load_dotenv(override=False)

    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(dict(settings.DB_CONFIG)))

    apply_schema(conn, schema_path=REPO_ROOT / "database" / "schema.sql")
    ensure_admin_user(
        conn,
        username=str(getattr(settings, "ADMIN_USERNAME", "admin")),
        password=str(getattr(settings, "ADMIN_PASSWORD", "admin123")),
    )

    cfg = conn.config
    logger.info(
        "Applied schema.sql -> %s@%s:%s/%s (tables=%d)",
        cfg.user,
        cfg.host,
        cfg.port,
        cfg.database,
        len(list_tables(conn)),
    )


if __name__ == "__main__":
    main()
