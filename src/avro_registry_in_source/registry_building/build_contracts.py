"""Registry build entities and pipeline errors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from avro_registry_in_source.errors import AvroRegistryError, ErrorKind


class BuildStage(str, Enum):
    """Stages of the export-validate-compile pipeline, in execution order."""

    INIT = "init"
    EXPORT = "export"
    VALIDATE = "validate"
    GENERATE_BINDINGS = "generate_bindings"
    DONE = "done"


@dataclass(frozen=True)
class BuildRequest:
    """Input contract for one pipeline run."""

    schema_source: Path
    staging_dir: Path
    registry_dir: Path
    bindings_dir: Path


@dataclass(frozen=True)
class BuildOutcome:
    """Output contract for one pipeline run."""

    stage: BuildStage
    exported: tuple[Path, ...]
    validated: tuple[Path, ...]
    bindings: tuple[Path, ...]


class RegistryBuildError(AvroRegistryError):
    """Raised when a pipeline stage fails; the remaining stages do not run."""

    def __init__(self, message: str, *, stage: BuildStage) -> None:
        super().__init__(message)
        self.stage = stage


class SchemaSourceError(RegistryBuildError):
    """The schema source is unreadable or does not parse."""

    kind = ErrorKind.SCHEMA_SOURCE


class BuildDirectoryError(RegistryBuildError):
    """A staging, registry or binding directory cannot be created."""

    kind = ErrorKind.BUILD_DIRECTORY


class MissingRegistryFileError(RegistryBuildError):
    """A schema exported from the source has no committed registry entry."""

    kind = ErrorKind.MISSING_REGISTRY_FILE

    def __init__(self, message: str, *, expected_path: Path, staging_dir: Path) -> None:
        super().__init__(message, stage=BuildStage.VALIDATE)
        self.expected_path = expected_path
        self.staging_dir = staging_dir


class FingerprintMismatchError(RegistryBuildError):
    """A committed registry entry no longer matches the schema it is named after."""

    kind = ErrorKind.FINGERPRINT_MISMATCH

    def __init__(self, message: str, *, entry_path: Path, staging_dir: Path) -> None:
        super().__init__(message, stage=BuildStage.VALIDATE)
        self.entry_path = entry_path
        self.staging_dir = staging_dir


class BindingGenerationError(RegistryBuildError):
    """Bindings could not be written."""

    kind = ErrorKind.BINDING_GENERATION_FAILURE
