"""Binding generation tests."""

from __future__ import annotations

import ast
import importlib
import json
import sys
from pathlib import Path

import pytest
from avro_registry_in_source.registry_building import generate_bindings
from avro_registry_in_source.registry_building.binding_generation import render_module
from avro_registry_in_source.schema_management import parse_schema_source


def _samples_dir() -> Path:
    return Path(__file__).resolve().parents[3] / "samples"


def test_writes_one_module_per_namespace_with_package_markers(tmp_path: Path) -> None:
    written = generate_bindings(_samples_dir() / "house.avpr", tmp_path)

    module_path = tmp_path / "com" / "example" / "package" / "__init__.py"
    assert written == [module_path]
    assert (tmp_path / "com" / "__init__.py").read_text(encoding="utf-8") == ""
    assert (tmp_path / "com" / "example" / "__init__.py").is_file()
    ast.parse(module_path.read_text(encoding="utf-8"))


def test_rendered_module_declares_enums_and_records() -> None:
    definitions = parse_schema_source(_samples_dir() / "house.avpr")
    kinds = {definition.full_name: definition.schema_type for definition in definitions}

    source = render_module("com.example.package", definitions, kinds, "house.avpr")

    assert '"""Generated from house.avpr. Do not edit."""' in source
    assert "class BedSize(str, Enum):" in source
    assert "    KING = 'KING'" in source
    assert "@dataclass(kw_only=True)\nclass Bed:" in source
    assert "    firmness: BedFirmness = BedFirmness.HARD" in source
    assert "    beds: list[Bed]" in source
    assert f"    AVRO_FINGERPRINT: ClassVar[int] = {definitions[-1].fingerprint}" in source
    assert source.index("class BedFirmness") < source.index("class Bed:")


def test_types_without_namespace_and_cross_namespace_references(tmp_path: Path) -> None:
    source_path = tmp_path / "mixed.avpr"
    source_path.write_text(
        json.dumps(
            {
                "protocol": "Mixed",
                "types": [
                    {
                        "type": "enum",
                        "name": "Level",
                        "namespace": "shared",
                        "symbols": ["LOW", "HIGH"],
                    },
                    {
                        "type": "record",
                        "name": "Reading",
                        "fields": [
                            {"name": "level", "type": "shared.Level", "default": "LOW"},
                            {"name": "note", "type": ["null", "string"], "default": None},
                            {"name": "tags", "type": {"type": "map", "values": "long"}, "default": {}},
                            {"name": "digest", "type": {"type": "fixed", "name": "Digest", "size": 4}},
                        ],
                    },
                ],
            }
        ),
        encoding="utf-8",
    )

    written = generate_bindings(source_path, tmp_path / "out")

    assert sorted(path.relative_to(tmp_path / "out").as_posix() for path in written) == [
        "avro_types.py",
        "shared/__init__.py",
    ]
    root_module = (tmp_path / "out" / "avro_types.py").read_text(encoding="utf-8")
    assert "from shared import Level" in root_module
    assert "    level: Level = Level.LOW" in root_module
    assert "    note: None | str = None" in root_module
    assert "    tags: dict[str, int] = field(default_factory=lambda: {})" in root_module
    assert "Digest = bytes" in root_module
    assert "    digest: Digest" in root_module


def test_keyword_field_names_cannot_become_bindings(tmp_path: Path) -> None:
    source_path = tmp_path / "keyword.avsc"
    source_path.write_text(
        json.dumps(
            {"type": "record", "name": "Flow", "fields": [{"name": "from", "type": "string"}]}
        ),
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match="from"):
        generate_bindings(source_path, tmp_path / "out")


def test_record_defaults_become_binding_instances(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    inner = {
        "type": "record",
        "name": "Inner",
        "fields": [{"name": "x", "type": "int"}, {"name": "label", "type": "string"}],
    }
    source_path = tmp_path / "outer.avsc"
    source_path.write_text(
        json.dumps(
            {
                "type": "record",
                "name": "Outer",
                "fields": [
                    {"name": "inner", "type": inner, "default": {"x": 1, "label": "a"}},
                    {
                        "name": "more",
                        "type": {"type": "array", "items": "Inner"},
                        "default": [{"x": 2, "label": "b"}],
                    },
                ],
            }
        ),
        encoding="utf-8",
    )
    output_dir = tmp_path / "out"

    generate_bindings(source_path, output_dir)

    module_source = (output_dir / "avro_types.py").read_text(encoding="utf-8")
    assert "    inner: Inner = field(default_factory=lambda: Inner(x=1, label='a'))" in module_source
    assert (
        "    more: list[Inner] = field(default_factory=lambda: [Inner(x=2, label='b')])"
        in module_source
    )

    monkeypatch.syspath_prepend(str(output_dir))
    monkeypatch.delitem(sys.modules, "avro_types", raising=False)
    bindings = importlib.import_module("avro_types")
    try:
        outer = bindings.Outer()
        assert outer.inner == bindings.Inner(x=1, label="a")
        assert outer.more == [bindings.Inner(x=2, label="b")]
        assert bindings.Outer().inner is not outer.inner
    finally:
        sys.modules.pop("avro_types", None)
