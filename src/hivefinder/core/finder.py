"""Discovery of catalog tables as datasets.

``HiveDatasetFinder`` lists the databases and tables of the catalog, keeps
the ones accepted by a ``WhitelistBlacklist`` and lazily turns each of them
into a ``HiveDataset`` carrying its resolved config.

Listing is all-or-nothing: a failure while listing databases or tables
raises ``DatasetDiscoveryError``. Creating datasets is best-effort: a table
whose config, metadata or dataset cannot be built is logged, reported as a
``DatasetError`` event and skipped, and discovery moves on to the next table.
"""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import Any, Iterator, Mapping

from hivefinder.core.dataset import HiveDataset
from hivefinder.core.dataset_config import (
    ConfigClient,
    DatasetConfig,
    build_config_resolver,
    get_boolean,
    scope_config,
)
from hivefinder.core.events import (
    DATASET_ERROR,
    DATASET_FOUND,
    DATASET_URN_KEY,
    FAILURE_CONTEXT_KEY,
    EventSubmitter,
    NoOpEventSubmitter,
)
from hivefinder.core.hive import DbAndTable, HiveTable
from hivefinder.core.pool import MetastoreClientPool
from hivefinder.core.selectors import WHITELIST, WhitelistBlacklist

log = logging.getLogger(__name__)

HIVE_DATASET_PREFIX = "hive.dataset"
HIVE_METASTORE_URI_KEY = f"{HIVE_DATASET_PREFIX}.hive.metastore.uri"
DB_KEY = f"{HIVE_DATASET_PREFIX}.database"
TABLE_PATTERN_KEY = f"{HIVE_DATASET_PREFIX}.table.pattern"
DEFAULT_TABLE_PATTERN = "*"
WHITELIST_KEY = f"{HIVE_DATASET_PREFIX}.{WHITELIST}"

HIVE_DATASET_IS_BLACKLISTED_KEY = "is.blacklisted"
DEFAULT_HIVE_DATASET_IS_BLACKLISTED = False


class DatasetDiscoveryError(RuntimeError):
    """Raised when the catalog cannot be listed."""


def build_whitelist_blacklist(properties: Mapping[str, str]) -> WhitelistBlacklist:
    """
    Build the table selection policy from job properties.

    A fixed database (with an optional table pattern) takes precedence over
    the general whitelist/blacklist keys.

    Raises:
        ValueError: If neither the database nor the whitelist key is set.
    """
    if DB_KEY not in properties and WHITELIST_KEY not in properties:
        raise ValueError(f"Must specify {DB_KEY} or {WHITELIST_KEY}.")
    if DB_KEY in properties:
        pattern = properties.get(TABLE_PATTERN_KEY) or DEFAULT_TABLE_PATTERN
        return WhitelistBlacklist(f"{properties[DB_KEY]}.{pattern}", "")
    return WhitelistBlacklist.from_config(scope_config(properties, HIVE_DATASET_PREFIX))


class HiveDatasetFinder:
    """
    Finds HiveDatasets in the catalog.

    Args:
        fs: Filesystem handle handed to every dataset.
        properties: Job properties.
        client_pool: Catalog client pool. Defaults to the shared pool for
                     the configured metastore URI.
        event_submitter: Sink for DatasetFound/DatasetError events.
        config_client: Config store client, used when a config store URI
                       is configured.
    """

    def __init__(
        self,
        fs: Any,
        properties: Mapping[str, str],
        client_pool: MetastoreClientPool | None = None,
        event_submitter: EventSubmitter | None = None,
        config_client: ConfigClient | None = None,
    ) -> None:
        self.fs = fs
        self.properties = dict(properties)
        self.whitelist_blacklist = build_whitelist_blacklist(self.properties)
        self.client_pool = client_pool or MetastoreClientPool.get(
            self.properties, self.properties.get(HIVE_METASTORE_URI_KEY)
        )
        self.event_submitter = event_submitter or NoOpEventSubmitter()
        self._resolve_config = build_config_resolver(self.properties, config_client)

    def get_tables(self) -> list[DbAndTable]:
        """
        Return every accepted table, in catalog order.

        Raises:
            DatasetDiscoveryError: If listing databases or tables fails.
        """
        tables: list[DbAndTable] = []
        try:
            with self.client_pool.get_client() as client:
                for db in client.get_all_databases():
                    if not self.whitelist_blacklist.accept_db(db):
                        continue
                    for name in client.get_all_tables(db):
                        if self.whitelist_blacklist.accept_table(db, name):
                            tables.append(DbAndTable(db, name))
        except Exception as exc:
            raise DatasetDiscoveryError(f"Failed to list catalog tables: {exc}") from exc

        log.debug("Found %d candidate tables", len(tables))
        return tables

    def resolve_config(self, db_and_table: DbAndTable) -> DatasetConfig:
        """Return the effective config of one dataset."""
        return self._resolve_config(db_and_table)

    def iter_datasets(self) -> Iterator[HiveDataset]:
        """
        Lazily yield a HiveDataset per accepted table.

        Nothing is listed until the iterator is first advanced. Tables that
        are blacklisted through their config are skipped silently; tables
        that fail are reported and skipped.
        """
        for db_and_table in self.get_tables():
            dataset = self._create_dataset(db_and_table)
            if dataset is not None:
                yield dataset

    def find_datasets(self) -> list[HiveDataset]:
        """Return every dataset that could be created."""
        return list(self.iter_datasets())

    def common_dataset_root(self) -> PurePosixPath:
        return PurePosixPath("/")

    def create_hive_dataset(
        self, table: HiveTable, dataset_config: DatasetConfig
    ) -> HiveDataset:
        """Build the dataset for a table; override to return a subclass."""
        return HiveDataset(
            self.fs, self.client_pool, table, self.properties, dataset_config
        )

    def _create_dataset(self, db_and_table: DbAndTable) -> HiveDataset | None:
        urn = str(db_and_table)
        try:
            with self.client_pool.get_client() as client:
                dataset_config = self.resolve_config(db_and_table)
                if get_boolean(
                    dataset_config,
                    HIVE_DATASET_IS_BLACKLISTED_KEY,
                    DEFAULT_HIVE_DATASET_IS_BLACKLISTED,
                ):
                    log.debug("Skipping blacklisted dataset %s", urn)
                    return None
                table = client.get_table(db_and_table.db, db_and_table.table)
                dataset = self.create_hive_dataset(table, dataset_config)
                self.event_submitter.submit(DATASET_FOUND, **{DATASET_URN_KEY: urn})
                return dataset
        except Exception as exc:  # keep discovery going; surface per-table errors
            log.error("Failed to create HiveDataset for table %s", urn, exc_info=True)
            self.event_submitter.submit(
                DATASET_ERROR,
                **{DATASET_URN_KEY: urn, FAILURE_CONTEXT_KEY: repr(exc)},
            )
            return None
