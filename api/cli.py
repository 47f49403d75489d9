#!/usr/bin/env python3
"""CLI for Document Catalog API management tasks.

Usage:
    python -m cli <command>

Commands:
    migrate        Run database migrations (alembic upgrade)
    create-tables  Create tables straight from the models, skipping migrations
"""

import argparse
import asyncio
import sys
from pathlib import Path

from core.logger import configure_logging, get_logger

logger = get_logger(__name__)


def _get_alembic_config():
    from alembic.config import Config

    api_dir = Path(__file__).resolve().parent
    cfg = Config(str(api_dir / "alembic.ini"))
    # Absolute script_location so the command works from any working directory
    cfg.set_main_option("script_location", str(api_dir / "alembic"))
    return cfg


def cmd_migrate(target: str) -> int:
    """Run database migrations."""
    from alembic import command

    logger.info("migrations.start", target=target)
    command.upgrade(_get_alembic_config(), target)
    logger.info("migrations.complete", target=target)
    return 0


async def _create_tables() -> None:
    from core.database import create_engine, create_tables, dispose_engine

    engine = create_engine()
    try:
        await create_tables(engine)
    finally:
        await dispose_engine(engine)


def cmd_create_tables() -> int:
    """Create tables from the models. For local development and demos."""
    asyncio.run(_create_tables())
    return 0


def main() -> int:
    configure_logging()

    parser = argparse.ArgumentParser(
        description="Document Catalog API CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    migrate = subparsers.add_parser("migrate", help="Run database migrations")
    migrate.add_argument(
        "target",
        nargs="?",
        default="head",
        help="Target revision (default: head)",
    )
    subparsers.add_parser(
        "create-tables",
        help="Create tables from the models without migrations",
    )

    args = parser.parse_args()

    if args.command == "migrate":
        return cmd_migrate(args.target)
    elif args.command == "create-tables":
        return cmd_create_tables()
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
