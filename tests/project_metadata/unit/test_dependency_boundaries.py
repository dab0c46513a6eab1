"""Boundary tests for internal package dependencies."""

from __future__ import annotations

from pathlib import Path


def _package_dir() -> Path:
    return Path(__file__).resolve().parents[3] / "src" / "avro_registry_in_source"


def _assert_no_imports(package: str, forbidden_import_fragments: tuple[str, ...]) -> None:
    for module_path in sorted((_package_dir() / package).glob("*.py")):
        text = module_path.read_text(encoding="utf-8")
        for fragment in forbidden_import_fragments:
            assert fragment not in text, f"Forbidden dependency in {module_path}: {fragment}"


def test_schema_management_does_not_import_runtime_or_build_packages() -> None:
    _assert_no_imports(
        "schema_management",
        (
            "avro_registry_in_source.schema_registry",
            "avro_registry_in_source.envelope_codec",
            "avro_registry_in_source.registry_building",
            "avro_registry_in_source.cli",
        ),
    )


def test_runtime_packages_do_not_import_build_pipeline() -> None:
    for package in ("schema_registry", "envelope_codec"):
        _assert_no_imports(
            package,
            (
                "avro_registry_in_source.registry_building",
                "avro_registry_in_source.configuration",
                "avro_registry_in_source.cli",
            ),
        )
