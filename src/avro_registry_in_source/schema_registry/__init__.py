"""Schema registry exports."""

from .registry_entries import (
    SCHEMA_FILE_EXTENSION,
    load_registry_entry,
    registry_entry_key,
    registry_entry_path,
    write_registry_entry,
)
from .registry_resolver import SchemaRegistry
from .schema_cache import SchemaCache
from .schema_providers import DirectorySchemaProvider, NullSchemaProvider, SchemaProvider

__all__ = [
    "SCHEMA_FILE_EXTENSION",
    "DirectorySchemaProvider",
    "NullSchemaProvider",
    "SchemaCache",
    "SchemaProvider",
    "SchemaRegistry",
    "load_registry_entry",
    "registry_entry_key",
    "registry_entry_path",
    "write_registry_entry",
]
