"""Hierarchical, path-addressed config store client.

A config store is addressed by URI. The URI scheme selects a store factory;
the rest of the URI names a node in the store. A node's config is the merge
of its own config with the configs of all its ancestors, children
overriding parents.

The built-in ``file`` scheme reads a directory tree:

    <root>/_CONFIG_STORE          marker file identifying the store root
    <root>/main.conf              root config
    <root>/hive/main.conf         config shared by all hive datasets
    <root>/hive/db1/main.conf     config for database db1
    <root>/hive/db1/t1/main.conf  config for table db1.t1

Each ``main.conf`` is a properties file.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Callable
from urllib.parse import urlparse

from hivefinder.core.properties import load_properties

log = logging.getLogger(__name__)

STORE_MARKER = "_CONFIG_STORE"
NODE_CONFIG_FILE = "main.conf"


class ConfigStoreError(RuntimeError):
    """Base class for config store failures."""


class ConfigStoreFactoryDoesNotExistError(ConfigStoreError):
    """Raised when no store factory is registered for a URI scheme."""


class ConfigStoreCreationError(ConfigStoreError):
    """Raised when a store cannot be opened for a URI."""


class MalformedConfigUriError(ConfigStoreError):
    """Raised when a config URI has no scheme or no path."""


class ConfigStore(ABC):
    """A single opened config store."""

    @abstractmethod
    def get_config(self, node: PurePosixPath) -> dict[str, str]:
        """Return the resolved config of ``node`` (a path relative to the root)."""
        ...


class ConfigStoreFactory(ABC):
    """Opens config stores for one URI scheme."""

    @abstractmethod
    def store_root(self, path: PurePosixPath) -> PurePosixPath:
        """Return the root of the store holding ``path``."""
        ...

    @abstractmethod
    def create_store(self, root: PurePosixPath) -> ConfigStore:
        """Open the store at ``root``."""
        ...


class FileConfigStore(ConfigStore):
    """Config store backed by a local directory tree."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def _node_config(self, directory: Path) -> dict[str, str]:
        conf = directory / NODE_CONFIG_FILE
        if not conf.is_file():
            return {}
        return load_properties(conf)

    def get_config(self, node: PurePosixPath) -> dict[str, str]:
        merged = self._node_config(self.root)
        directory = self.root
        for part in node.parts:
            directory = directory / part
            merged.update(self._node_config(directory))
        return merged


class FileConfigStoreFactory(ConfigStoreFactory):
    """Factory for the ``file`` scheme."""

    def store_root(self, path: PurePosixPath) -> PurePosixPath:
        for candidate in (path, *path.parents):
            if (Path(candidate) / STORE_MARKER).is_file():
                return candidate
        raise ConfigStoreCreationError(
            f"No config store found for '{path}' (missing {STORE_MARKER} marker)."
        )

    def create_store(self, root: PurePosixPath) -> ConfigStore:
        directory = Path(root)
        if not directory.is_dir():
            raise ConfigStoreCreationError(f"Config store root '{root}' is not a directory.")
        return FileConfigStore(directory)


_FACTORIES: dict[str, Callable[[], ConfigStoreFactory]] = {
    "file": FileConfigStoreFactory,
}


def register_factory(scheme: str, factory: Callable[[], ConfigStoreFactory]) -> None:
    """Register a store factory for a URI scheme."""
    _FACTORIES[scheme.lower()] = factory


class ConfigClient:
    """
    Resolves configs by URI across any registered store.

    Opened stores are kept for the lifetime of the client, keyed by scheme
    and root.
    """

    def __init__(self) -> None:
        self._factories: dict[str, ConfigStoreFactory] = {}
        self._stores: dict[tuple[str, PurePosixPath], ConfigStore] = {}

    def _factory(self, scheme: str) -> ConfigStoreFactory:
        if scheme not in self._factories:
            if scheme not in _FACTORIES:
                raise ConfigStoreFactoryDoesNotExistError(
                    f"No config store factory for scheme '{scheme}'."
                )
            self._factories[scheme] = _FACTORIES[scheme]()
        return self._factories[scheme]

    def get_config(self, uri: str) -> dict[str, str]:
        """
        Return the resolved config of the node at ``uri``.

        Raises:
            MalformedConfigUriError: If the URI has no scheme or no path.
            ConfigStoreFactoryDoesNotExistError: If the scheme is unknown.
            ConfigStoreCreationError: If the store cannot be opened.
        """
        parsed = urlparse(uri)
        if not parsed.scheme or not parsed.path:
            raise MalformedConfigUriError(f"Malformed config store URI: '{uri}'")
        scheme = parsed.scheme.lower()
        factory = self._factory(scheme)

        path = PurePosixPath(parsed.path)
        root = factory.store_root(path)
        key = (scheme, root)
        if key not in self._stores:
            log.debug("Opening %s config store at %s", scheme, root)
            self._stores[key] = factory.create_store(root)
        return self._stores[key].get_config(path.relative_to(root))


_shared_client: ConfigClient | None = None


def get_config_client() -> ConfigClient:
    """Return the process-wide config client."""
    global _shared_client
    if _shared_client is None:
        _shared_client = ConfigClient()
    return _shared_client
