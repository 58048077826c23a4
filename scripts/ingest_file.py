from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.timeclock.timeclock.common.logging_setup import configure_logging
from src.timeclock.timeclock.container import build_container
from src.timeclock.timeclock.core.exceptions import IngestionError
from src.timeclock.timeclock.database.bootstrap import apply_schema
from src.timeclock.timeclock.main import load_settings


def _print_progress(event) -> None:
    print(f"[{event.percent:3d}%] {event.phase.value:<9} {event.message} ({event.current}/{event.total})")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Ingest one punch file (CSV, DAT, XLS, XLSX).")
    parser.add_argument("path", help="file to ingest")
    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(settings.get("LOG_LEVEL") or "INFO")

    container = build_container(
        database_url=str(settings["DATABASE_URL"]),
        max_upload_bytes=int(settings.get("MAX_UPLOAD_MB") or 10) * 1024 * 1024,
    )
    apply_schema(container.conn)

    try:
        result = container.ingestion_service.ingest_file(args.path, on_progress=_print_progress)
    except IngestionError as e:
        print(f"FAILED: {e}", file=sys.stderr)
        return 1
    finally:
        container.conn.dispose()

    print(
        f"OK: upload {result.upload_id} ({result.filename}) "
        f"inserted={result.inserted} skipped={result.skipped} empty={result.empty} total={result.total}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
