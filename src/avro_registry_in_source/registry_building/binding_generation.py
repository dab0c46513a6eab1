"""Python binding generation: one dataclass module per Avro namespace."""

from __future__ import annotations

import keyword
from collections import defaultdict
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from avro_registry_in_source.schema_management import SchemaDefinition, parse_schema_source
from avro_registry_in_source.schema_management.schema_toolkit import NAMED_TYPES

ROOT_MODULE_NAME = "avro_types"

_PRIMITIVE_ANNOTATIONS = {
    "null": "None",
    "boolean": "bool",
    "int": "int",
    "long": "int",
    "float": "float",
    "double": "float",
    "bytes": "bytes",
    "string": "str",
}

_MODULE_HEADER = '''"""Generated from {source}. Do not edit."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar
'''


def generate_bindings(schema_source: Path | str, output_dir: Path | str) -> list[Path]:
    """Render dataclass bindings for every named type in the schema source.

    Types of namespace ``a.b`` are written to ``<output_dir>/a/b/__init__.py``;
    types without a namespace go to ``<output_dir>/avro_types.py``. Missing
    package markers are created for intermediate directories.

    Raises:
      SchemaParseError: If the source does not parse.
      ValueError: If a type cannot be represented as a Python dataclass.
      OSError: If writing a module fails.
    """
    source = Path(schema_source)
    destination = Path(output_dir)
    definitions = parse_schema_source(source)
    kinds = {definition.full_name: definition.schema_type for definition in definitions}
    schemas = {definition.full_name: definition.schema for definition in definitions}

    grouped: dict[str | None, list[SchemaDefinition]] = defaultdict(list)
    for definition in definitions:
        grouped[definition.namespace].append(definition)

    written: list[Path] = []
    for namespace, group in grouped.items():
        module_path = _module_path(destination, namespace)
        module_path.parent.mkdir(parents=True, exist_ok=True)
        module_source = render_module(namespace, group, kinds, source.name, schemas=schemas)
        module_path.write_text(module_source, encoding="utf-8")
        written.append(module_path)
    for module_path in written:
        _ensure_package_markers(destination, module_path.parent)
    return written


def render_module(
    namespace: str | None,
    definitions: Sequence[SchemaDefinition],
    kinds: Mapping[str, str],
    source_name: str,
    *,
    schemas: Mapping[str, Mapping[str, Any]] | None = None,
) -> str:
    """Render the module source for the types of one namespace.

    ``schemas`` maps full names to standalone schemas; record-typed defaults of
    referenced types render as binding instances only when their schema is known.
    """
    renderer = _ModuleRenderer(namespace, kinds, schemas or {})
    enums = [item for item in definitions if item.schema_type == "enum"]
    fixed = [item for item in definitions if item.schema_type == "fixed"]
    records = [item for item in definitions if item.schema_type in {"record", "error"}]

    blocks = [renderer.render_enum(item) for item in enums]
    blocks.extend(renderer.render_fixed(item) for item in fixed)
    blocks.extend(renderer.render_record(item) for item in records)

    parts = [_MODULE_HEADER.format(source=source_name)]
    if renderer.imports:
        parts.append(
            "\n".join(
                f"from {module} import {name}" for module, name in sorted(renderer.imports)
            )
            + "\n"
        )
    exported = ", ".join(f'"{item.name}"' for item in definitions)
    parts.append(f"__all__ = [{exported}]\n")
    parts.extend(blocks)
    return "\n\n\n".join(part.rstrip("\n") for part in parts) + "\n"


class _ModuleRenderer:
    def __init__(
        self,
        namespace: str | None,
        kinds: Mapping[str, str],
        schemas: Mapping[str, Mapping[str, Any]],
    ) -> None:
        self._namespace = namespace
        self._kinds = kinds
        self._schemas = schemas
        self.imports: set[tuple[str, str]] = set()

    def render_enum(self, definition: SchemaDefinition) -> str:
        lines = [
            f"class {definition.name}(str, Enum):",
            f'    """Avro enum {definition.full_name}."""',
            "",
        ]
        for symbol in definition.schema.get("symbols", []):
            lines.append(f"    {_identifier(symbol)} = {symbol!r}")
        return "\n".join(lines)

    def render_fixed(self, definition: SchemaDefinition) -> str:
        return f"{definition.name} = bytes"

    def render_record(self, definition: SchemaDefinition) -> str:
        lines = [
            "@dataclass(kw_only=True)",
            f"class {definition.name}:",
            f'    """Avro record {definition.full_name}."""',
            "",
            f"    AVRO_SCHEMA: ClassVar[str] = {definition.to_json(pretty=False)!r}",
            f"    AVRO_FINGERPRINT: ClassVar[int] = {definition.fingerprint}",
        ]
        fields = definition.schema.get("fields", [])
        if fields:
            lines.append("")
        for record_field in fields:
            name = _identifier(record_field["name"])
            annotation = self._annotation(record_field.get("type"))
            if "default" in record_field:
                default = self._default(record_field.get("type"), record_field["default"])
                lines.append(f"    {name}: {annotation} = {default}")
            else:
                lines.append(f"    {name}: {annotation}")
        return "\n".join(lines)

    def _annotation(self, node: Any) -> str:
        if isinstance(node, str):
            if node in _PRIMITIVE_ANNOTATIONS:
                return _PRIMITIVE_ANNOTATIONS[node]
            return self._reference(node)
        if isinstance(node, list):
            branches: list[str] = []
            for branch in node:
                rendered = self._annotation(branch)
                if rendered not in branches:
                    branches.append(rendered)
            return " | ".join(branches)
        if isinstance(node, Mapping):
            node_type = node.get("type")
            if node_type in NAMED_TYPES:
                return self._reference(_full_name(node))
            if node_type == "array":
                return f"list[{self._annotation(node.get('items'))}]"
            if node_type == "map":
                return f"dict[str, {self._annotation(node.get('values'))}]"
            return self._annotation(node_type)
        raise ValueError(f"Unsupported Avro type node: {node!r}")

    def _default(self, node: Any, default: Any) -> str:
        if default is None:
            return "None"
        expression = self._value(node, default)
        if isinstance(default, (list, dict)):
            return f"field(default_factory=lambda: {expression})"
        return expression

    def _value(self, node: Any, value: Any) -> str:
        """Render a JSON default as a Python expression of the node's binding type."""
        if isinstance(node, list):
            # Union defaults always belong to the first branch.
            return self._value(node[0], value) if node else repr(value)
        if isinstance(node, str):
            if node in _PRIMITIVE_ANNOTATIONS:
                return repr(value)
            return self._named_value(node, self._schemas.get(node), value)
        if not isinstance(node, Mapping):
            return repr(value)

        node_type = node.get("type")
        if node_type in NAMED_TYPES:
            return self._named_value(_full_name(node), node, value)
        if node_type == "array" and isinstance(value, list):
            items = ", ".join(self._value(node.get("items"), item) for item in value)
            return f"[{items}]"
        if node_type == "map" and isinstance(value, Mapping):
            entries = ", ".join(
                f"{key!r}: {self._value(node.get('values'), item)}" for key, item in value.items()
            )
            return f"{{{entries}}}"
        return self._value(node_type, value)

    def _named_value(self, full_name: str, schema: Mapping[str, Any] | None, value: Any) -> str:
        kind = schema.get("type") if schema is not None else self._kinds.get(full_name)
        if kind == "enum":
            return f"{self._reference(full_name)}.{_identifier(value)}"
        if kind in {"record", "error"} and schema is not None and isinstance(value, Mapping):
            arguments = ", ".join(
                f"{_identifier(record_field['name'])}="
                f"{self._value(record_field.get('type'), value[record_field['name']])}"
                for record_field in schema.get("fields", [])
                if record_field["name"] in value
            )
            return f"{self._reference(full_name)}({arguments})"
        return repr(value)

    def _reference(self, full_name: str) -> str:
        namespace, _, name = full_name.rpartition(".")
        if (namespace or None) != self._namespace:
            module = namespace if namespace else ROOT_MODULE_NAME
            self.imports.add((module, name))
        return name


def _full_name(node: Mapping[str, Any]) -> str:
    namespace = node.get("namespace")
    return f"{namespace}.{node['name']}" if namespace else str(node["name"])


def _identifier(name: str) -> str:
    if not name.isidentifier() or keyword.iskeyword(name):
        raise ValueError(f"Avro name [{name}] cannot be used as a Python identifier.")
    return name


def _module_path(output_dir: Path, namespace: str | None) -> Path:
    if not namespace:
        return output_dir / f"{ROOT_MODULE_NAME}.py"
    return output_dir.joinpath(*namespace.split("."), "__init__.py")


def _ensure_package_markers(output_dir: Path, package_dir: Path) -> None:
    current = package_dir
    while current != output_dir and output_dir in current.parents:
        marker = current / "__init__.py"
        if not marker.exists():
            marker.write_text("", encoding="utf-8")
        current = current.parent
