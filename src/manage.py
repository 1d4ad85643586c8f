"""Marketplace database management CLI.

Creates or drops the schema for the configured SQL provider. The default
memory provider needs no schema, so both commands are no-ops unless
PROTEAN_ENV selects a SQL-backed overlay.

Usage:
    PROTEAN_ENV=staging python src/manage.py setup-db   # Create all tables
    PROTEAN_ENV=staging python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys

import structlog

logger = structlog.get_logger(__name__)


def _domain():
    from marketplace.domain import marketplace

    marketplace.init()
    return marketplace


def setup_database():
    from marketplace.utils.db import setup_db

    domain = _domain()
    logger.info("creating_schema", domain=domain.name)
    setup_db(domain)
    logger.info("schema_ready", domain=domain.name)


def drop_database():
    from marketplace.utils.db import drop_db

    domain = _domain()
    logger.info("dropping_schema", domain=domain.name)
    drop_db(domain)
    logger.info("schema_dropped", domain=domain.name)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Marketplace database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
