#!/usr/bin/env python3
"""gonnectian-console — TUI for per-tenant Atlassian Connect settings.

Installed usage:  gonnectian-console --db-url postgresql://... --table tenants
Development:      pip install -e .  then  gonnectian-console

Environment:
    GONNECTIAN_DB_URL / GONNECTIAN_DB_PATH   database (default: local SQLite)
    GONNECTIAN_DB_TAG                        handle name (default: "default")
    GONNECTIAN_TENANT_TABLE                  tenants table (default: "tenants")
    GONNECTIAN_LOG_FILE / GONNECTIAN_LOG_LEVEL
"""

import argparse
import os
import sys

from lib.host import BIN_NAME, HOST_VERSION


def build_parser() -> argparse.ArgumentParser:
    from db.database import DEFAULT_TAG, get_db_url
    from lib.log import default_log_file, default_log_level

    parser = argparse.ArgumentParser(prog=BIN_NAME, description="Atlas-Gonnect tenant console")
    parser.add_argument("--prefix", default="", help="Suffix shown in the window title as [PREFIX]")
    parser.add_argument("--db-url", default=None, help=f"SQLAlchemy database URL (default: {get_db_url()})")
    parser.add_argument(
        "--db-tag",
        default=os.environ.get("GONNECTIAN_DB_TAG", DEFAULT_TAG),
        help="Name the database handle is registered under",
    )
    parser.add_argument(
        "--table",
        default=os.environ.get("GONNECTIAN_TENANT_TABLE", "tenants"),
        help="Tenants table name",
    )
    parser.add_argument(
        "--descriptor",
        action="append",
        default=[],
        metavar="PATH",
        help="atlassian-connect.json descriptor to list under App Info (repeatable)",
    )
    parser.add_argument("--log-file", default=default_log_file(), help="Log file path")
    parser.add_argument("--log-level", default=default_log_level(), help="Log level (default: INFO)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {HOST_VERSION}")
    return parser


def main(argv=None):
    from sqlalchemy.exc import SQLAlchemyError

    from cli.app import ConsoleApp
    from cli.console import ConsoleFeature
    from db.database import register_database
    from lib.addons import load_addon_feature
    from lib.host import Host
    from lib.log import configure_logging, fatal

    args = build_parser().parse_args(argv)
    configure_logging(args.log_file, args.log_level)

    try:
        register_database(args.db_tag, args.db_url)
    except SQLAlchemyError as e:
        fatal(f"error opening database: {e}")

    host = Host()
    for path in args.descriptor:
        try:
            host.add(load_addon_feature(path))
        except (OSError, ValueError) as e:
            fatal(f"error loading add-on descriptor {path}: {e}")

    feature = ConsoleFeature().set_db_tag(args.db_tag).set_table_name(args.table).make()
    feature.setup(args, host)
    sys.exit(ConsoleApp().run(feature))


if __name__ == "__main__":
    main()
