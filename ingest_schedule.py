"""Ingest a scheduling export and store the resulting snapshot."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import structlog

from app.backend.src.core.config import get_settings
from app.backend.src.core.exceptions import ScheduleIngestError
from app.backend.src.core.logging import configure_logging
from app.backend.src.core.storage import snapshot_store
from app.backend.src.services.ingestion import ingest_schedule_document

LOGGER = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("export", type=Path, help="Path to the JSON export")
    parser.add_argument(
        "--store",
        type=Path,
        default=None,
        help="Snapshot file (defaults to SCHEDULE_STORAGE_PATH)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Normalize and report without persisting the snapshot",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    try:
        document = args.export.read_bytes()
    except OSError as exc:
        LOGGER.error("export_read_failed", path=str(args.export), error=str(exc))
        return 2

    try:
        snapshot = ingest_schedule_document(document, settings=get_settings())
    except ScheduleIngestError as exc:
        LOGGER.error("schedule_ingest_failed", error=str(exc), kind=type(exc).__name__)
        return 1

    metadata = snapshot.metadata
    LOGGER.info(
        "schedule_ingested",
        data_format=metadata.data_format,
        company=metadata.company_name,
        start_date=metadata.data_range.start_date,
        end_date=metadata.data_range.end_date,
        **metadata.stats.model_dump(),
    )
    print(
        f"{metadata.company_name}: {metadata.stats.total_jobs} jobs, "
        f"{metadata.stats.total_teams} teams, {metadata.stats.total_employees} employees "
        f"({metadata.data_range.start_date or '-'} to {metadata.data_range.end_date or '-'})"
    )

    if args.dry_run:
        return 0
    return 0 if snapshot_store(args.store).save(snapshot) else 1


if __name__ == "__main__":
    sys.exit(main())
