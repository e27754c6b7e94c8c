from __future__ import annotations

import logging
import traceback
from pathlib import Path

from alembic import command
from alembic.config import Config

MIGRATIONS_DIR = Path(__file__).resolve().parents[1] / "infrastructure" / "db" / "migrations"

logger = logging.getLogger(__name__)


def check_startup_prerequisites(db_file: Path) -> bool:
    if not MIGRATIONS_DIR.exists():
        logger.error("Migrations directory is missing: %s", MIGRATIONS_DIR)
        return False
    try:
        test_file = db_file.parent / ".write_test"
        test_file.write_text("ok", encoding="utf-8")
        test_file.unlink(missing_ok=True)
    except OSError:
        logger.exception("Database directory is not writable: %s", db_file.parent)
        return False
    return True


def build_alembic_config(root_dir: Path, database_url: str) -> Config:
    ini_path = root_dir / "alembic.ini"
    # Installed copies ship without alembic.ini; logging then stays as configured by main.
    cfg = Config(str(ini_path)) if ini_path.exists() else Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    cfg.set_main_option("sqlalchemy.url", database_url)
    return cfg


def run_migrations(root_dir: Path, database_url: str, log_dir: Path, db_file: Path) -> bool:
    try:
        command.upgrade(build_alembic_config(root_dir, database_url), "head")
        return True
    except Exception:  # noqa: BLE001
        logger.exception("Failed to run migrations")
        try:
            error_path = log_dir / "migration_error.log"
            error_path.parent.mkdir(parents=True, exist_ok=True)
            with error_path.open("a", encoding="utf-8") as handle:
                handle.write("\n--- Migration error ---\n")
                handle.write(f"DB: {db_file}\n")
                handle.write(f"Migrations: {MIGRATIONS_DIR}\n")
                handle.write(traceback.format_exc())
        except OSError:
            logger.exception("Failed to write migration error log")
        return False


def initialize_database(*, root_dir: Path, db_file: Path, database_url: str, log_dir: Path) -> bool:
    if not check_startup_prerequisites(db_file):
        return False
    return run_migrations(root_dir, database_url, log_dir, db_file)
