"""Migrate the winners database and confirm the schema is in place.

Usage: ``python scripts/init_db.py [revision]`` (defaults to ``head``).
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import inspect

from guideraffle.db.engine import make_engine
from guideraffle.models import Base

logger = logging.getLogger("guideraffle.init_db")

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def alembic_config() -> Config:
    cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return cfg


def missing_tables() -> list[str]:
    """Return mapped tables that the configured database does not have yet."""
    existing = set(inspect(make_engine()).get_table_names())
    return sorted(name for name in Base.metadata.tables if name not in existing)


def main(argv: list[str]) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")
    revision = argv[0] if argv else "head"
    command.upgrade(alembic_config(), revision)

    missing = missing_tables()
    if missing and revision == "head":
        logger.error(f"Tables missing after upgrade: {', '.join(missing)}")
        return 1
    logger.info(f"Database migrated to '{revision}'")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
