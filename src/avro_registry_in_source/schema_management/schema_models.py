"""Schema management entities."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SchemaDefinition:
    """Standalone Avro named type identified by namespace, name and fingerprint.

    ``schema`` is the JSON form with every referenced named type inlined at its
    first use, so it parses on its own. ``parsed`` is the toolkit's parsed form
    of the same schema. Neither takes part in equality: two definitions with the
    same fingerprint are interchangeable for decoding.
    """

    namespace: str | None
    name: str
    fingerprint: int
    schema: Mapping[str, Any] = field(compare=False, repr=False)
    parsed: Any = field(compare=False, repr=False)

    @property
    def full_name(self) -> str:
        """Dotted full name of the type."""
        return f"{self.namespace}.{self.name}" if self.namespace else self.name

    @property
    def schema_type(self) -> str:
        """Avro type of the definition (record, enum, fixed or error)."""
        return str(self.schema.get("type"))

    def to_json(self, *, pretty: bool = True) -> str:
        """Serialize the standalone schema as written to registry entries."""
        if pretty:
            return json.dumps(self.schema, indent=2)
        return json.dumps(self.schema, separators=(",", ":"))
