"""External schema providers consulted after the bundled registry."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from avro_registry_in_source.schema_management import SchemaDefinition

from .registry_entries import load_registry_entry, locate_registry_entry, registry_entry_key


class SchemaProvider(Protocol):  # pylint: disable=too-few-public-methods
    """Capability returning a schema for an identity, or ``None`` when unknown."""

    def lookup(
        self, namespace: str | None, type_name: str, fingerprint: int
    ) -> SchemaDefinition | None: ...


class NullSchemaProvider:  # pylint: disable=too-few-public-methods
    """Provider that never finds anything."""

    def lookup(
        self, namespace: str | None, type_name: str, fingerprint: int
    ) -> SchemaDefinition | None:
        return None


class DirectorySchemaProvider:  # pylint: disable=too-few-public-methods
    """Provider reading the registry layout from an additional directory."""

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root)

    def lookup(
        self, namespace: str | None, type_name: str, fingerprint: int
    ) -> SchemaDefinition | None:
        key = registry_entry_key(namespace, type_name, fingerprint)
        entry = locate_registry_entry(self._root, key)
        if entry is None:
            return None
        return load_registry_entry(entry, type_name=type_name, fingerprint=fingerprint)
