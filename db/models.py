from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Column, DateTime, MetaData, String, Table, Text


@dataclass
class Tenant:
    """One Atlassian site that installed the add-on.

    Mirrors a row of the atlas-gonnect tenants table.  ``context`` holds the
    raw JSON text of the per-tenant context blob ("" when the column is empty).
    """

    client_key: str
    base_url: str = ""
    addon_installed: bool = False
    context: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    public_key: str = ""
    oauth_client_id: str = ""
    shared_secret: str = ""
    product_type: str = ""
    description: str = ""
    service_entitlement_number: str = ""

    def __repr__(self) -> str:
        return f"<Tenant base_url={self.base_url!r} installed={self.addon_installed}>"


# Columns written back on save, in table order (client_key is the key).
TENANT_COLUMNS = (
    "base_url",
    "addon_installed",
    "context",
    "created_at",
    "updated_at",
    "public_key",
    "oauth_client_id",
    "shared_secret",
    "product_type",
    "description",
    "service_entitlement_number",
)


def tenant_table(name: str, metadata: Optional[MetaData] = None) -> Table:
    """Return the atlas-gonnect tenant table definition under *name*.

    The schema is owned by the add-on host; this definition only names the
    columns the console reads and writes.  ``context`` is declared as text so
    the raw JSON reaches the context codec untouched.
    """
    return Table(
        name,
        metadata if metadata is not None else MetaData(),
        Column("client_key", String(255), primary_key=True),
        Column("public_key", Text, nullable=True),
        Column("oauth_client_id", Text, nullable=True),
        Column("shared_secret", Text, nullable=True),
        Column("base_url", String(255), nullable=True),
        Column("product_type", Text, nullable=True),
        Column("description", Text, nullable=True),
        Column("addon_installed", Boolean, default=False),
        Column("service_entitlement_number", Text, nullable=True),
        Column("context", Text, nullable=True),
        Column("created_at", DateTime, nullable=True),
        Column("updated_at", DateTime, nullable=True),
    )
