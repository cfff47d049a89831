from __future__ import annotations

from databricks.sdk import WorkspaceClient

from hivefinder.core.hive import HiveTable

DEFAULT_CATALOG = "hive_metastore"


def _enum_value(value) -> str | None:
    """Render SDK enums (or plain strings) as their string value."""
    if value is None:
        return None
    return str(getattr(value, "value", value))


class MetastoreClient:
    """Adapter around Databricks SDK Unity Catalog APIs (databases are schemas of one catalog)."""

    def __init__(self, client: WorkspaceClient, catalog: str = DEFAULT_CATALOG) -> None:
        self.client = client
        self.catalog = catalog

    def get_all_databases(self) -> list[str]:
        """List database (schema) names, in catalog order."""
        out: list[str] = []
        for s in self.client.schemas.list(catalog_name=self.catalog):
            name = getattr(s, "name", None)
            if not name:
                full_name = getattr(s, "full_name", None)
                name = full_name.split(".")[-1] if full_name else None
            if name:
                out.append(name)
        return out

    def get_all_tables(self, db: str) -> list[str]:
        """List table names in a database, in catalog order."""
        out: list[str] = []
        for t in self.client.tables.list(catalog_name=self.catalog, schema_name=db):
            name = getattr(t, "name", None)
            if name:
                out.append(name)
        return out

    def get_table(self, db: str, table: str) -> HiveTable:
        """Fetch full metadata for one table."""
        info = self.client.tables.get(full_name=f"{self.catalog}.{db}.{table}")
        columns = tuple(
            c.name for c in (getattr(info, "columns", None) or []) if getattr(c, "name", None)
        )
        return HiveTable(
            db=getattr(info, "schema_name", None) or db,
            name=getattr(info, "name", None) or table,
            table_type=_enum_value(getattr(info, "table_type", None)),
            data_source_format=_enum_value(getattr(info, "data_source_format", None)),
            storage_location=getattr(info, "storage_location", None),
            owner=getattr(info, "owner", None),
            properties=dict(getattr(info, "properties", None) or {}),
            columns=columns,
        )
