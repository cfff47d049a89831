"""The dataset descriptor produced for each discovered table."""

from __future__ import annotations

from typing import Any, Mapping

from hivefinder.core.dataset_config import DatasetConfig, get_boolean, get_string
from hivefinder.core.hive import DbAndTable, HiveTable
from hivefinder.core.pool import MetastoreClientPool


class HiveDataset:
    """
    A catalog table together with everything needed to process it.

    Attributes:
        fs: Filesystem handle, passed through untouched.
        client_pool: Pool the table was fetched from, for follow-up lookups.
        table: Catalog metadata of the table.
        properties: Job properties.
        dataset_config: Effective config of this dataset.
    """

    def __init__(
        self,
        fs: Any,
        client_pool: MetastoreClientPool,
        table: HiveTable,
        properties: Mapping[str, str],
        dataset_config: DatasetConfig,
    ) -> None:
        self.fs = fs
        self.client_pool = client_pool
        self.table = table
        self.properties = dict(properties)
        self.dataset_config = dict(dataset_config)

    @property
    def db_and_table(self) -> DbAndTable:
        return self.table.db_and_table

    @property
    def urn(self) -> str:
        return str(self.db_and_table)

    @property
    def table_location(self) -> str | None:
        return self.table.storage_location

    def config_string(self, key: str, default: str | None = None) -> str | None:
        return get_string(self.dataset_config, key, default)

    def config_boolean(self, key: str, default: bool) -> bool:
        return get_boolean(self.dataset_config, key, default)

    def __repr__(self) -> str:
        return f"HiveDataset({self.urn})"
