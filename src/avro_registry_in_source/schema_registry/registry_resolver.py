"""Fingerprint-addressed schema lookup over layered sources."""

from __future__ import annotations

import logging
from importlib.resources import files
from importlib.resources.abc import Traversable
from pathlib import Path

from avro_registry_in_source.schema_management import SchemaDefinition

from .registry_entries import load_registry_entry, locate_registry_entry, registry_entry_key
from .schema_cache import SchemaCache
from .schema_providers import NullSchemaProvider, SchemaProvider

_LOGGER = logging.getLogger(__name__)


class SchemaRegistry:
    """Resolve ``(namespace, type, fingerprint)`` to a schema definition.

    Sources are consulted in order: the cache, the bundled registry rooted at
    ``root``, then the external provider. Hits from either source are cached.
    A bundled entry that exists but cannot be loaded raises
    ``CorruptRegistryEntryError``; it never falls through to the provider.
    """

    def __init__(
        self,
        root: Traversable | Path | str,
        *,
        provider: SchemaProvider | None = None,
        cache: SchemaCache | None = None,
    ) -> None:
        self._root: Traversable = Path(root) if isinstance(root, str) else root
        self._provider = provider or NullSchemaProvider()
        self._cache = cache if cache is not None else SchemaCache()

    @classmethod
    def from_package(
        cls,
        package: str,
        resource_dir: str = "avro-registry",
        *,
        provider: SchemaProvider | None = None,
        cache: SchemaCache | None = None,
    ) -> SchemaRegistry:
        """Build a registry over a directory shipped as package data."""
        return cls(files(package) / resource_dir, provider=provider, cache=cache)

    @property
    def cache(self) -> SchemaCache:
        return self._cache

    def resolve(
        self, namespace: str | None, type_name: str, fingerprint: int
    ) -> SchemaDefinition | None:
        """Return the matching definition, or ``None`` when no source knows it."""
        key = registry_entry_key(namespace, type_name, fingerprint)
        cache_key = str(key.with_suffix(""))
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        entry = locate_registry_entry(self._root, key)
        if entry is not None:
            _LOGGER.debug("Loading bundled registry entry %s", key)
            definition = load_registry_entry(entry, type_name=type_name, fingerprint=fingerprint)
            return self._cache.put(cache_key, definition)

        _LOGGER.debug("No bundled registry entry %s; asking external provider", key)
        definition = self._provider.lookup(namespace, type_name, fingerprint)
        if definition is None:
            return None
        return self._cache.put(cache_key, definition)
