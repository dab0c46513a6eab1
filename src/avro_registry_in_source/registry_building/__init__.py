"""Registry building exports."""

from .binding_generation import generate_bindings
from .build_contracts import (
    BindingGenerationError,
    BuildDirectoryError,
    BuildOutcome,
    BuildRequest,
    BuildStage,
    FingerprintMismatchError,
    MissingRegistryFileError,
    RegistryBuildError,
    SchemaSourceError,
)
from .registry_builder import RegistryBuilder, validate_registry_files

__all__ = [
    "BindingGenerationError",
    "BuildDirectoryError",
    "BuildOutcome",
    "BuildRequest",
    "BuildStage",
    "FingerprintMismatchError",
    "MissingRegistryFileError",
    "RegistryBuildError",
    "RegistryBuilder",
    "SchemaSourceError",
    "generate_bindings",
    "validate_registry_files",
]
