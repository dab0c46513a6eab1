"""Avro toolkit adapter: schema parsing, fingerprints and Avro-JSON encoding via fastavro."""

from __future__ import annotations

import io
import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import fastavro
from fastavro.read import SchemaResolutionError
from fastavro.schema import SchemaParseException, fingerprint, to_parsing_canonical_form
from fastavro.validation import ValidationError

from avro_registry_in_source.errors import EncodeFailureError, SchemaParseError

from .schema_models import SchemaDefinition

FINGERPRINT_ALGORITHM = "CRC-64-AVRO"
PRIMITIVE_TYPES = frozenset(
    {"null", "boolean", "int", "long", "float", "double", "bytes", "string"}
)
NAMED_TYPES = frozenset({"record", "error", "enum", "fixed"})

# Raised by fastavro while resolving a writer body into a reader schema.
DECODE_ERRORS: tuple[type[Exception], ...] = (
    SchemaResolutionError,
    ValueError,
    TypeError,
    KeyError,
    IndexError,
    AttributeError,
    StopIteration,
)

_PARSE_ERRORS = (SchemaParseException, ValueError, TypeError, KeyError)


def compute_fingerprint(schema: Any) -> int:
    """Return the signed 64-bit CRC-64-AVRO fingerprint of the schema's canonical form."""
    canonical_form = to_parsing_canonical_form(schema)
    digest = fingerprint(canonical_form, FINGERPRINT_ALGORITHM)
    # CRC-64-AVRO fingerprints are little-endian byte strings.
    return int.from_bytes(bytes.fromhex(digest), byteorder="little", signed=True)


def definition_from_schema(
    schema: Mapping[str, Any], default_namespace: str | None = None
) -> SchemaDefinition:
    """Parse one named-type schema into a SchemaDefinition."""
    if not isinstance(schema, Mapping) or schema.get("type") not in NAMED_TYPES:
        raise SchemaParseError("Schema root must be a named Avro type (record, enum or fixed).")
    namespace, name = _split_full_name(schema, default_namespace)
    standalone = dict(schema)
    standalone["name"] = name
    if namespace:
        standalone["namespace"] = namespace
    else:
        standalone.pop("namespace", None)
    try:
        parsed = fastavro.parse_schema(standalone)
        schema_fingerprint = compute_fingerprint(parsed)
    except _PARSE_ERRORS as exc:
        raise SchemaParseError(f"Invalid Avro schema [{_join_name(namespace, name)}]: {exc}") from exc
    return SchemaDefinition(
        namespace=namespace,
        name=name,
        fingerprint=schema_fingerprint,
        schema=standalone,
        parsed=parsed,
    )


def parse_schema_text(text: str, default_namespace: str | None = None) -> SchemaDefinition:
    """Parse ``.avsc`` text holding one named type."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SchemaParseError(f"Invalid Avro schema JSON: {exc}") from exc
    return definition_from_schema(document, default_namespace)


def parse_schema_source(source_path: Path | str) -> list[SchemaDefinition]:
    """Parse a protocol (``.avpr``) or schema (``.avsc``) file into standalone definitions.

    Every named type declared in the source, including types imported from other
    files and types defined inline inside another type, yields one definition, in
    declaration order.
    """
    path = Path(source_path)
    known: dict[str, dict[str, Any]] = {}
    order: list[str] = []
    for node, namespace in _load_declarations(path, visited=set()):
        _collect_named_types(node, namespace, known, order)
    if not order:
        raise SchemaParseError(f"Schema source [{path}] declares no named types.")
    definitions = []
    for full_name in order:
        standalone = _inline_named(known[full_name], known, emitted={full_name})
        definitions.append(definition_from_schema(standalone))
    return definitions


def encode_json(definition: SchemaDefinition, datum: Any, *, pretty: bool = False) -> str:
    """Encode one datum as Avro JSON text under the definition's schema."""
    buffer = io.StringIO()
    try:
        fastavro.json_writer(buffer, definition.parsed, [datum], validator=True)
    except (ValidationError, ValueError, TypeError, KeyError, AttributeError) as exc:
        raise EncodeFailureError(
            f"Failed to encode value as [{definition.full_name}]: {exc}"
        ) from exc
    body = buffer.getvalue().strip()
    if pretty:
        return json.dumps(json.loads(body), indent=2)
    return body


def decode_json(writer: SchemaDefinition, reader: SchemaDefinition, body: str) -> Any:
    """Decode Avro JSON written under ``writer`` into the shape of ``reader``.

    Fields only the writer knows are dropped; fields only the reader knows take
    the reader's declared default. Raises one of ``DECODE_ERRORS`` on failure.
    """
    records = fastavro.json_reader(io.StringIO(body), writer.parsed, reader.parsed)
    return next(iter(records))


def _load_declarations(path: Path, visited: set[Path]) -> list[tuple[Any, str | None]]:
    resolved = path.resolve()
    if resolved in visited:
        return []
    visited.add(resolved)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaParseError(f"Failed to read schema source [{path}]: {exc}") from exc
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SchemaParseError(f"Invalid schema source [{path}]: {exc}") from exc

    if isinstance(document, Mapping) and "protocol" in document:
        namespace = document.get("namespace") or None
        declarations: list[tuple[Any, str | None]] = []
        imports = document.get("imports", [])
        if not isinstance(imports, Sequence) or isinstance(imports, str):
            raise SchemaParseError(f"Protocol imports in [{path}] must be a list of paths.")
        for imported in imports:
            if not isinstance(imported, str):
                raise SchemaParseError(f"Protocol imports in [{path}] must be strings.")
            declarations.extend(_load_declarations(path.parent / imported, visited))
        types = document.get("types", [])
        if not isinstance(types, list):
            raise SchemaParseError(f"Protocol types in [{path}] must be a list.")
        declarations.extend((node, namespace) for node in types)
        return declarations
    if isinstance(document, list):
        return [(node, None) for node in document]
    return [(document, None)]


def _collect_named_types(
    node: Any, namespace: str | None, known: dict[str, dict[str, Any]], order: list[str]
) -> None:
    if isinstance(node, list):
        for branch in node:
            _collect_named_types(branch, namespace, known, order)
        return
    if not isinstance(node, Mapping):
        return

    node_type = node.get("type")
    if node_type in NAMED_TYPES:
        normalized = _normalize_named(node, namespace)
        full_name = _join_name(normalized.get("namespace"), normalized["name"])
        if full_name in known:
            if known[full_name] != normalized:
                raise SchemaParseError(f"Named type [{full_name}] is defined more than once.")
            return
        known[full_name] = normalized
        order.append(full_name)
        if node_type in {"record", "error"}:
            for record_field in _record_fields(normalized, full_name):
                _collect_named_types(
                    record_field.get("type"), normalized.get("namespace"), known, order
                )
    elif node_type == "array":
        _collect_named_types(node.get("items"), namespace, known, order)
    elif node_type == "map":
        _collect_named_types(node.get("values"), namespace, known, order)
    elif isinstance(node_type, (list, Mapping)):
        _collect_named_types(node_type, namespace, known, order)


def _inline(
    node: Any, namespace: str | None, known: dict[str, dict[str, Any]], emitted: set[str]
) -> Any:
    if isinstance(node, str):
        if node in PRIMITIVE_TYPES:
            return node
        full_name = _resolve_reference(node, namespace, known)
        if full_name in emitted:
            return full_name
        emitted.add(full_name)
        return _inline_named(known[full_name], known, emitted)
    if isinstance(node, list):
        return [_inline(branch, namespace, known, emitted) for branch in node]
    if not isinstance(node, Mapping):
        return node

    node_type = node.get("type")
    if node_type in NAMED_TYPES:
        normalized = _normalize_named(node, namespace)
        full_name = _join_name(normalized.get("namespace"), normalized["name"])
        if full_name in emitted:
            return full_name
        emitted.add(full_name)
        return _inline_named(known[full_name], known, emitted)
    if node_type == "array":
        return {**node, "items": _inline(node.get("items"), namespace, known, emitted)}
    if node_type == "map":
        return {**node, "values": _inline(node.get("values"), namespace, known, emitted)}
    if isinstance(node_type, (list, Mapping)) or (
        isinstance(node_type, str) and node_type not in PRIMITIVE_TYPES
    ):
        return {**node, "type": _inline(node_type, namespace, known, emitted)}
    return dict(node)


def _inline_named(
    definition: Mapping[str, Any], known: dict[str, dict[str, Any]], emitted: set[str]
) -> dict[str, Any]:
    result = dict(definition)
    if definition.get("type") in {"record", "error"}:
        namespace = definition.get("namespace")
        full_name = _join_name(namespace, definition["name"])
        result["fields"] = [
            {**record_field, "type": _inline(record_field.get("type"), namespace, known, emitted)}
            for record_field in _record_fields(definition, full_name)
        ]
    return result


def _resolve_reference(reference: str, namespace: str | None, known: Mapping[str, Any]) -> str:
    if "." in reference:
        candidates = [reference]
    elif namespace:
        candidates = [f"{namespace}.{reference}", reference]
    else:
        candidates = [reference]
    for candidate in candidates:
        if candidate in known:
            return candidate
    raise SchemaParseError(f"Unknown Avro type reference: {reference}")


def _record_fields(definition: Mapping[str, Any], full_name: str) -> list[Mapping[str, Any]]:
    fields = definition.get("fields")
    if not isinstance(fields, list):
        raise SchemaParseError(f"Avro record [{full_name}] requires a fields array.")
    for record_field in fields:
        if not isinstance(record_field, Mapping) or "name" not in record_field:
            raise SchemaParseError(f"Avro record [{full_name}] has a field without a name.")
    return fields


def _normalize_named(node: Mapping[str, Any], namespace: str | None) -> dict[str, Any]:
    node_namespace, name = _split_full_name(node, namespace)
    normalized = {key: value for key, value in node.items() if key != "namespace"}
    normalized["name"] = name
    if node_namespace:
        normalized["namespace"] = node_namespace
    return normalized


def _split_full_name(
    schema: Mapping[str, Any], default_namespace: str | None
) -> tuple[str | None, str]:
    raw_name = schema.get("name")
    if not isinstance(raw_name, str) or not raw_name:
        raise SchemaParseError("Named Avro types require a non-empty name.")
    if "." in raw_name:
        namespace, name = raw_name.rsplit(".", 1)
        return namespace or None, name
    namespace = schema.get("namespace", default_namespace)
    if namespace is not None and not isinstance(namespace, str):
        raise SchemaParseError(f"Namespace of [{raw_name}] must be a string.")
    return namespace or None, raw_name


def _join_name(namespace: str | None, name: str) -> str:
    return f"{namespace}.{name}" if namespace else name
