from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from hivefinder.core.hive import HiveTable  # noqa: E402
from hivefinder.core.pool import MetastoreClientPool  # noqa: E402


class StubCatalogClient:
    """In-memory catalog: {db: [table, ...]} in listing order."""

    def __init__(self, catalog, *, broken_tables=(), fail_listing=False):
        self.catalog = catalog
        self.broken_tables = set(broken_tables)
        self.fail_listing = fail_listing
        self.calls: list[str] = []

    def get_all_databases(self) -> list[str]:
        self.calls.append("get_all_databases")
        if self.fail_listing:
            raise ConnectionError("metastore unreachable")
        return list(self.catalog)

    def get_all_tables(self, db: str) -> list[str]:
        self.calls.append(f"get_all_tables:{db}")
        return list(self.catalog[db])

    def get_table(self, db: str, table: str) -> HiveTable:
        self.calls.append(f"get_table:{db}.{table}")
        if f"{db}.{table}" in self.broken_tables:
            raise RuntimeError(f"cannot read {db}.{table}")
        return HiveTable(
            db=db,
            name=table,
            table_type="MANAGED",
            data_source_format="DELTA",
            storage_location=f"/{db}/{table}",
        )


class StubConfigClient:
    """Config store returning configs by exact URI."""

    def __init__(self, configs):
        self.configs = configs
        self.uris: list[str] = []

    def get_config(self, uri: str) -> dict[str, str]:
        self.uris.append(uri)
        return dict(self.configs.get(uri, {}))


@pytest.fixture
def make_pool():
    def _make(client) -> MetastoreClientPool:
        return MetastoreClientPool(lambda: client, max_size=2)

    return _make
