#!/usr/bin/env python3
"""Seed a local database with demo Atlassian Connect tenants.

Creates the tenants table (if missing) and inserts a few tenants with a mix
of context flags, so the console has something to show during development.
The console itself never creates or migrates tables.

Usage:
    python scripts/seed_tenants.py
    python scripts/seed_tenants.py --db-url sqlite:////tmp/gonnectian.db --table tenants
"""

import argparse
import json
import os
import sys
from datetime import datetime, timedelta, timezone

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from rich.console import Console
from rich.table import Table
from sqlalchemy import insert

from db.database import get_session, register_database
from db.models import tenant_table

console = Console()

DEMO_TENANTS = [
    ("demo-key-1", "https://acme.atlassian.net", True, ""),
    ("demo-key-2", "https://globex.atlassian.net", True, json.dumps({"debug": "true", "license": "active"})),
    ("demo-key-3", "https://initech.atlassian.net", False,
     json.dumps({"debug": "false", "allowed-unlicensed": False, "reject": "unlicensed"})),
    ("demo-key-4", "https://hooli.atlassian.net", True, json.dumps({"allowed-unlicensed": True, "theme": "dark"})),
]


def main():
    parser = argparse.ArgumentParser(description="Seed demo tenants for gonnectian-console")
    parser.add_argument("--db-url", default=None, help="SQLAlchemy URL (default: GONNECTIAN_DB_URL or local SQLite)")
    parser.add_argument("--table", default=os.environ.get("GONNECTIAN_TENANT_TABLE", "tenants"))
    args = parser.parse_args()

    engine = register_database("seed", args.db_url)
    table = tenant_table(args.table)
    table.create(engine, checkfirst=True)

    now = datetime.now(timezone.utc).replace(tzinfo=None, second=0, microsecond=0)
    result = Table(title=f"Seeded tenants ({args.table})", show_lines=True)
    result.add_column("Client Key", style="bold cyan")
    result.add_column("Base URL")
    result.add_column("Installed")
    result.add_column("Context")

    with get_session("seed") as session:
        for offset, (client_key, base_url, installed, context) in enumerate(DEMO_TENANTS):
            created = now - timedelta(days=30 - offset)
            session.execute(insert(table).values(
                client_key=client_key,
                base_url=base_url,
                addon_installed=installed,
                context=context,
                created_at=created,
                updated_at=created,
            ))
            result.add_row(client_key, base_url, "yes" if installed else "no", context or "[dim]—[/dim]")

    console.print(result)
    console.print(f"[green]✓ {len(DEMO_TENANTS)} tenants written to {engine.url}[/green]")


if __name__ == "__main__":
    main()
