"""Pooled metastore clients.

Every catalog call made during discovery goes through a client checked out
of a ``MetastoreClientPool`` with a ``with`` block, so the client is handed
back to the pool on normal exit and when an exception escapes the block.

The pool is meant for single-threaded, pull-based use: acquisition never
blocks, it fails once ``max_size`` clients are checked out.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Mapping, Protocol

from hivefinder.core.adapters.metastore import DEFAULT_CATALOG, MetastoreClient
from hivefinder.core.auth import get_client
from hivefinder.core.dataset_config import get_int
from hivefinder.core.hive import HiveTable

log = logging.getLogger(__name__)

POOL_SIZE_KEY = "hive.metastore.client.pool.size"
DEFAULT_POOL_SIZE = 8
PROFILE_KEY = "databricks.profile"
CATALOG_KEY = "hive.dataset.catalog"


class PoolExhaustedError(RuntimeError):
    """Raised when every pooled client is already checked out."""


class CatalogClient(Protocol):
    """Interface for catalog lookups used by the dataset finder."""

    def get_all_databases(self) -> list[str]:
        ...

    def get_all_tables(self, db: str) -> list[str]:
        ...

    def get_table(self, db: str, table: str) -> HiveTable:
        ...


class MetastoreClientPool:
    """A bounded pool of catalog clients created on demand."""

    _pools: dict[tuple[str | None, str | None, str | None], MetastoreClientPool] = {}

    def __init__(
        self,
        factory: Callable[[], CatalogClient],
        max_size: int = DEFAULT_POOL_SIZE,
    ) -> None:
        if max_size < 1:
            raise ValueError("max_size must be >= 1")
        self.factory = factory
        self.max_size = max_size
        self._idle: list[CatalogClient] = []
        self._in_use = 0

    @property
    def in_use(self) -> int:
        return self._in_use

    @property
    def idle(self) -> int:
        return len(self._idle)

    def _acquire(self) -> CatalogClient:
        if self._idle:
            client = self._idle.pop()
        elif self._in_use + len(self._idle) < self.max_size:
            client = self.factory()
        else:
            raise PoolExhaustedError(
                f"All {self.max_size} metastore clients are in use."
            )
        self._in_use += 1
        return client

    def _release(self, client: CatalogClient) -> None:
        self._in_use -= 1
        self._idle.append(client)

    @contextmanager
    def get_client(self) -> Iterator[CatalogClient]:
        """Check out a client for the duration of a ``with`` block."""
        client = self._acquire()
        try:
            yield client
        finally:
            self._release(client)

    @classmethod
    def get(
        cls, properties: Mapping[str, str], metastore_uri: str | None = None
    ) -> MetastoreClientPool:
        """
        Return the shared pool for an endpoint, creating it if needed.

        Pools are keyed by Databricks profile, metastore URI and catalog.
        """
        profile = properties.get(PROFILE_KEY) or None
        catalog = properties.get(CATALOG_KEY) or DEFAULT_CATALOG
        key = (profile, metastore_uri, catalog)
        if key not in cls._pools:
            log.debug(
                "Creating metastore client pool (profile=%s, uri=%s, catalog=%s)",
                profile,
                metastore_uri,
                catalog,
            )

            def factory() -> CatalogClient:
                return MetastoreClient(get_client(profile, metastore_uri), catalog=catalog)

            cls._pools[key] = cls(
                factory, max_size=get_int(properties, POOL_SIZE_KEY, DEFAULT_POOL_SIZE)
            )
        return cls._pools[key]
