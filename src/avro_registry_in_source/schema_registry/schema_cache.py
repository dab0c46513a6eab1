"""Process-wide cache of resolved schema definitions."""

from __future__ import annotations

import threading

from avro_registry_in_source.schema_management import SchemaDefinition


class SchemaCache:
    """Schema definitions keyed by registry entry location.

    Entries are added on first resolution and never evicted: the content stored
    under a fingerprint cannot change. Lookups are lock-free; population takes a
    lock and keeps the first definition stored under a key, so concurrent misses
    on the same key all return one shared instance.
    """

    def __init__(self) -> None:
        self._entries: dict[str, SchemaDefinition] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> SchemaDefinition | None:
        """Return the cached definition or ``None``."""
        return self._entries.get(key)

    def put(self, key: str, definition: SchemaDefinition) -> SchemaDefinition:
        """Store ``definition`` unless the key is already populated; return the stored one."""
        with self._lock:
            return self._entries.setdefault(key, definition)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
