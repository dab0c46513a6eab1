"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_STAGING_DIR = "build/generated-avro-schemas"
DEFAULT_REGISTRY_DIR = "avro-registry"
DEFAULT_BINDINGS_DIR = "build/generated-avro-bindings"


@dataclass(frozen=True)
class SchemaSourceSettings:
    """Root schema source of the build."""

    source_path: Path


@dataclass(frozen=True)
class RegistrySettings:
    """Directories holding exported and committed registry entries."""

    staging_dir: Path
    committed_dir: Path


@dataclass(frozen=True)
class BindingSettings:
    """Destination of generated bindings."""

    output_dir: Path


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    schema: SchemaSourceSettings
    registry: RegistrySettings
    bindings: BindingSettings
