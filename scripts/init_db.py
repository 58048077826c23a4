from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.timeclock.timeclock.common.logging_setup import configure_logging
from src.timeclock.timeclock.database.bootstrap import apply_schema, list_tables
from src.timeclock.timeclock.database.connection import DBConfig, DatabaseConnection
from src.timeclock.timeclock.main import load_settings


def main() -> None:
    settings = load_settings()
    configure_logging(settings.get("LOG_LEVEL") or "INFO")

    conn = DatabaseConnection(DBConfig(url=str(settings["DATABASE_URL"])))
    rebuilt = apply_schema(conn)
    tables = list_tables(conn)
    print(
        f"OK: Applied schema -> {conn.engine.url.render_as_string()} "
        f"(tables={len(tables)}, cache days rebuilt={rebuilt})"
    )
    conn.dispose()


if __name__ == "__main__":
    main()
