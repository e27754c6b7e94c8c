from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from logging.handlers import RotatingFileHandler
from pathlib import Path

from hms.bootstrap.startup import initialize_database
from hms.config import DB_FILE, LOG_DIR, settings
from hms.container import build_container

ROOT_DIR = Path(__file__).resolve().parent.parent


def _setup_logging(verbose: bool = False) -> Path:
    log_path = LOG_DIR / "app.log"
    handler = RotatingFileHandler(log_path, maxBytes=2_000_000, backupCount=3, encoding="utf-8")
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    root_logger.addHandler(handler)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    console.setLevel(logging.WARNING)
    root_logger.addHandler(console)
    return log_path


def _install_exception_hook(log_path: Path) -> None:
    def _handle_exception(exc_type, exc, tb) -> None:
        logging.getLogger(__name__).error("Unhandled exception", exc_info=(exc_type, exc, tb))
        print(f"Unexpected error. Details: {log_path}", file=sys.stderr)
        sys.__excepthook__(exc_type, exc, tb)

    sys.excepthook = _handle_exception


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hms", description="Hospital clinical rules toolkit")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug messages")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="apply database migrations")

    refresh = sub.add_parser("refresh-equipment", help="recompute equipment service statuses")
    refresh.add_argument("--today", type=_parse_date, default=None)

    summary = sub.add_parser("swab-summary", help="print swab contamination summary as JSON")
    summary.add_argument("--from", dest="date_from", type=_parse_date, default=None)
    summary.add_argument("--to", dest="date_to", type=_parse_date, default=None)

    swab_report = sub.add_parser("export-swab-report", help="write swab monitoring workbook")
    swab_report.add_argument("path", type=Path)
    swab_report.add_argument("--from", dest="date_from", type=_parse_date, default=None)
    swab_report.add_argument("--to", dest="date_to", type=_parse_date, default=None)

    equipment = sub.add_parser("export-equipment", help="write equipment register workbook")
    equipment.add_argument("path", type=Path)
    equipment.add_argument("--today", type=_parse_date, default=None)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    log_path = _setup_logging(args.verbose)
    _install_exception_hook(log_path)

    if not initialize_database(
        root_dir=ROOT_DIR,
        db_file=DB_FILE,
        database_url=settings.database_url,
        log_dir=LOG_DIR,
    ):
        print(f"Database initialization failed. Details: {log_path}", file=sys.stderr)
        return 1
    if args.command == "init-db":
        return 0

    container = build_container()
    if args.command == "refresh-equipment":
        changed = container.equipment_service.refresh_statuses(args.today)
        print(json.dumps({"changed": changed, "counts": container.equipment_service.status_counts()}))
    elif args.command == "swab-summary":
        summary = container.swab_service.summary(date_from=args.date_from, date_to=args.date_to)
        print(summary.model_dump_json(indent=2))
    elif args.command == "export-swab-report":
        result = container.reporting_service.export_swab_report_xlsx(
            args.path, date_from=args.date_from, date_to=args.date_to
        )
        print(result["path"], result["sha256"])
    elif args.command == "export-equipment":
        result = container.reporting_service.export_equipment_register_xlsx(args.path, today=args.today)
        print(result["path"], result["sha256"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
