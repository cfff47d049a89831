"""Per-dataset configuration resolution.

The effective config of a dataset is computed by a small chain of sources:

1. If a config store URI is configured, the config of the dataset's node in
   the store (``<store uri>/hive/<db>/<table>``) is the base config.
2. Otherwise the job properties are the base config.
3. If a config prefix is configured, only the keys under that prefix are
   kept, with the prefix stripped.

The prefix lets different pipelines (copy, conversion, retention) share the
same store or job file without reading each other's keys, e.g.
``hive.dataset.copy`` for copy and ``hive.dataset.retention`` for retention.
"""

from __future__ import annotations

from typing import Callable, Mapping, Protocol

from hivefinder.core.config_store import get_config_client
from hivefinder.core.hive import DbAndTable

DatasetConfig = dict[str, str]
ConfigSource = Callable[[DbAndTable], DatasetConfig]

CONFIG_STORE_URI_KEY = "config.management.store.uri"
HIVE_DATASET_CONFIG_PREFIX_KEY = "hive.dataset.configPrefix"
HIVE_DATASETS_CONFIG_NAMESPACE = "hive"

_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}


class ConfigClient(Protocol):
    """Interface for config store lookups used by the resolver."""

    def get_config(self, uri: str) -> DatasetConfig:
        """Return the resolved config of the node at ``uri``."""
        ...


def dataset_uri(db_and_table: DbAndTable) -> str:
    """Return the config store path of a dataset, relative to the store root."""
    return f"/{HIVE_DATASETS_CONFIG_NAMESPACE}/{db_and_table.db}/{db_and_table.table}"


def scope_config(config: Mapping[str, str], prefix: str) -> DatasetConfig:
    """Return the keys under ``prefix`` with the prefix stripped (empty if absent)."""
    head = prefix.strip().rstrip(".") + "."
    return {k[len(head) :]: v for k, v in config.items() if k.startswith(head)}


def get_string(config: Mapping[str, str], key: str, default: str | None = None):
    value = config.get(key)
    return default if value is None else value


def get_int(config: Mapping[str, str], key: str, default: int) -> int:
    value = config.get(key)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError as exc:
        raise ValueError(f"Config key '{key}' is not an integer: '{value}'") from exc


def get_boolean(config: Mapping[str, str], key: str, default: bool) -> bool:
    """
    Read a boolean config value.

    Accepts true/false, yes/no, on/off and 1/0 (case-insensitive).

    Raises:
        ValueError: If the value is set but is not a recognised boolean.
    """
    value = config.get(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    raise ValueError(f"Config key '{key}' is not a boolean: '{value}'")


def job_config_source(job_config: Mapping[str, str]) -> ConfigSource:
    """Use the job properties as every dataset's config."""
    frozen = dict(job_config)

    def source(db_and_table: DbAndTable) -> DatasetConfig:
        return dict(frozen)

    return source


def config_store_source(client: ConfigClient, store_uri: str) -> ConfigSource:
    """Look each dataset up in the config store under ``store_uri``."""
    root = store_uri.rstrip("/")

    def source(db_and_table: DbAndTable) -> DatasetConfig:
        return dict(client.get_config(root + dataset_uri(db_and_table)))

    return source


def with_prefix(source: ConfigSource, prefix: str | None) -> ConfigSource:
    """Narrow a source to ``prefix`` (no-op when the prefix is blank)."""
    if not prefix or not prefix.strip():
        return source

    def scoped(db_and_table: DbAndTable) -> DatasetConfig:
        return scope_config(source(db_and_table), prefix)

    return scoped


def build_config_resolver(
    properties: Mapping[str, str],
    config_client: ConfigClient | None = None,
) -> ConfigSource:
    """
    Build the config source chain for a set of job properties.

    Args:
        properties: Job properties.
        config_client: Client used when a config store URI is configured.
                       Defaults to the shared client.

    Returns:
        A callable mapping a DbAndTable to its effective config.
    """
    store_uri = properties.get(CONFIG_STORE_URI_KEY)
    if store_uri:
        if config_client is None:
            config_client = get_config_client()
        base = config_store_source(config_client, store_uri)
    else:
        base = job_config_source(properties)
    return with_prefix(base, properties.get(HIVE_DATASET_CONFIG_PREFIX_KEY))
