"""Registry entry layout: fingerprinted schema files grouped by namespace."""

from __future__ import annotations

from importlib.resources.abc import Traversable
from pathlib import Path, PurePosixPath

from avro_registry_in_source.errors import CorruptRegistryEntryError, SchemaParseError
from avro_registry_in_source.schema_management import (
    SchemaDefinition,
    parse_schema_text,
    sanitize_identifier,
)

SCHEMA_FILE_EXTENSION = ".avsc"


def registry_entry_key(namespace: str | None, type_name: str, fingerprint: int) -> PurePosixPath:
    """Relative location ``<namespace>/<type>_<fingerprint>.avsc`` of one entry.

    Schemas without a namespace live at the registry root.
    """
    filename = f"{sanitize_identifier(type_name)}_{fingerprint}{SCHEMA_FILE_EXTENSION}"
    if namespace:
        return PurePosixPath(sanitize_identifier(namespace), filename)
    return PurePosixPath(filename)


def registry_entry_path(registry_dir: Path, definition: SchemaDefinition) -> Path:
    """Filesystem path of the entry for ``definition`` below ``registry_dir``."""
    key = registry_entry_key(definition.namespace, definition.name, definition.fingerprint)
    return registry_dir.joinpath(*key.parts)


def write_registry_entry(registry_dir: Path, definition: SchemaDefinition) -> Path:
    """Write the definition's canonical JSON, replacing any existing file."""
    entry_path = registry_entry_path(registry_dir, definition)
    entry_path.parent.mkdir(parents=True, exist_ok=True)
    entry_path.write_text(definition.to_json(pretty=True), encoding="utf-8")
    return entry_path


def locate_registry_entry(root: Traversable, key: PurePosixPath) -> Traversable | None:
    """Return the entry below ``root`` or ``None`` when it does not exist."""
    entry = root
    for part in key.parts:
        entry = entry / part
    return entry if entry.is_file() else None


def load_registry_entry(
    entry: Traversable, *, type_name: str, fingerprint: int
) -> SchemaDefinition:
    """Parse an existing entry and check it against the identity encoded in its filename.

    Raises:
      CorruptRegistryEntryError: If the entry cannot be read or parsed, or if its
        recomputed fingerprint or type name disagrees with the filename.
    """
    try:
        text = entry.read_text(encoding="utf-8")
    except OSError as exc:
        raise CorruptRegistryEntryError(f"Failed to read registry entry [{entry}]: {exc}") from exc
    try:
        definition = parse_schema_text(text)
    except SchemaParseError as exc:
        raise CorruptRegistryEntryError(
            f"Failed to parse registry entry [{entry}]: {exc}"
        ) from exc
    if definition.fingerprint != fingerprint:
        raise CorruptRegistryEntryError(
            f"Fingerprint of registry entry [{entry}] is [{definition.fingerprint}] "
            f"instead of [{fingerprint}]"
        )
    if sanitize_identifier(definition.name) != sanitize_identifier(type_name):
        raise CorruptRegistryEntryError(
            f"Registry entry [{entry}] defines [{definition.name}] instead of [{type_name}]"
        )
    return definition
