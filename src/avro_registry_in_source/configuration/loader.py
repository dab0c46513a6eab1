"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import (
    DEFAULT_BINDINGS_DIR,
    DEFAULT_REGISTRY_DIR,
    DEFAULT_STAGING_DIR,
    BindingSettings,
    Configuration,
    RegistrySettings,
    SchemaSourceSettings,
)


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file.

    Relative paths are resolved against the directory holding the file.
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    base_path = path.resolve().parent
    return Configuration(
        path=path,
        schema=_parse_schema_section(parsed.get("schema"), base_path),
        registry=_parse_registry_section(parsed.get("registry"), base_path),
        bindings=_parse_bindings_section(parsed.get("bindings"), base_path),
    )


def _parse_schema_section(value: Any, base_path: Path) -> SchemaSourceSettings:
    section = _require_mapping(value, "schema")
    source = _require_non_empty_string(section.get("source"), "schema.source")
    source_path = _resolve_path(base_path, source)
    if not source_path.exists():
        raise ConfigurationError(f"Schema source not found: {source_path}")
    return SchemaSourceSettings(source_path=source_path)


def _parse_registry_section(value: Any, base_path: Path) -> RegistrySettings:
    section = _optional_mapping(value, "registry")
    staging_dir = _optional_string(section.get("staging_dir"), "registry.staging_dir")
    committed_dir = _optional_string(section.get("committed_dir"), "registry.committed_dir")
    return RegistrySettings(
        staging_dir=_resolve_path(base_path, staging_dir or DEFAULT_STAGING_DIR),
        committed_dir=_resolve_path(base_path, committed_dir or DEFAULT_REGISTRY_DIR),
    )


def _parse_bindings_section(value: Any, base_path: Path) -> BindingSettings:
    section = _optional_mapping(value, "bindings")
    output_dir = _optional_string(section.get("output_dir"), "bindings.output_dir")
    return BindingSettings(output_dir=_resolve_path(base_path, output_dir or DEFAULT_BINDINGS_DIR))


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None
