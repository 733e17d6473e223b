"""Tenant store adapter.

Reads the add-on's tenants table as a snapshot and writes single tenants
back.  The table belongs to the add-on host; its name and the database it
lives in are configuration, not code.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, List

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from db.database import get_session
from db.models import TENANT_COLUMNS, Tenant, tenant_table
from lib.errors import ConfigError, StoreError

logger = logging.getLogger(__name__)


def _context_text(value: Any) -> str:
    # JSON-typed columns may hand back already-decoded values.
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8")
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))


class TenantStore:
    """Snapshot reads and whole-row writes against the tenants table."""

    def __init__(self, db_tag: str, table_name: str):
        if not db_tag:
            raise ConfigError("tenant store requires a database tag")
        if not table_name:
            raise ConfigError("tenant store requires a table name")
        self.db_tag = db_tag
        self.table_name = table_name
        self.table = tenant_table(table_name)

    def list(self) -> List[Tenant]:
        """Return every tenant, oldest installation first."""
        stmt = select(self.table).order_by(self.table.c.created_at, self.table.c.base_url)
        try:
            with get_session(self.db_tag) as session:
                rows = session.execute(stmt).mappings().all()
        except SQLAlchemyError as e:
            raise StoreError(f"error listing tenants from {self.table_name!r}: {e}") from e
        return [self._to_tenant(row) for row in rows]

    def save(self, tenant: Tenant) -> None:
        """Write every column of *tenant* back to its row."""
        values = {name: getattr(tenant, name) for name in TENANT_COLUMNS}
        values["updated_at"] = datetime.now(timezone.utc).replace(tzinfo=None)
        stmt = update(self.table).where(self.table.c.client_key == tenant.client_key).values(**values)
        try:
            with get_session(self.db_tag) as session:
                result = session.execute(stmt)
                if result.rowcount == 0:
                    raise StoreError(f"tenant {tenant.client_key!r} not found in {self.table_name!r}")
        except SQLAlchemyError as e:
            raise StoreError(f"error saving tenant {tenant.client_key!r}: {e}") from e
        tenant.updated_at = values["updated_at"]
        logger.info("saved tenant %s (%s)", tenant.client_key, tenant.base_url)

    @staticmethod
    def _to_tenant(row) -> Tenant:
        return Tenant(
            client_key=row["client_key"],
            base_url=row["base_url"] or "",
            addon_installed=bool(row["addon_installed"]),
            context=_context_text(row["context"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            public_key=row["public_key"] or "",
            oauth_client_id=row["oauth_client_id"] or "",
            shared_secret=row["shared_secret"] or "",
            product_type=row["product_type"] or "",
            description=row["description"] or "",
            service_entitlement_number=row["service_entitlement_number"] or "",
        )
