"""Export-validate-compile pipeline keeping the committed registry in step with the schema source."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from avro_registry_in_source.errors import SchemaParseError
from avro_registry_in_source.schema_management import (
    SchemaDefinition,
    compute_fingerprint,
    parse_schema_source,
    parse_schema_text,
)
from avro_registry_in_source.schema_registry import registry_entry_key, write_registry_entry

from .binding_generation import generate_bindings
from .build_contracts import (
    BindingGenerationError,
    BuildDirectoryError,
    BuildOutcome,
    BuildRequest,
    BuildStage,
    FingerprintMismatchError,
    MissingRegistryFileError,
    SchemaSourceError,
)

BindingGenerator = Callable[[Path, Path], Sequence[Path]]

_LOGGER = logging.getLogger(__name__)


class RegistryBuilder:
    """Run Init -> Export -> Validate -> GenerateBindings, aborting on the first failure.

    Export writes every named type of the schema source to the staging directory
    under its fingerprinted name. Validate then requires the very same files in
    the committed registry directory, which may be the staging directory itself.
    Bindings are generated only once the committed registry is complete.
    """

    def __init__(
        self, request: BuildRequest, *, binding_generator: BindingGenerator | None = None
    ) -> None:
        self._request = request
        self._binding_generator = binding_generator or generate_bindings
        self.stage = BuildStage.INIT

    def run(self, *, stop_after: BuildStage = BuildStage.GENERATE_BINDINGS) -> BuildOutcome:
        """Execute the pipeline up to and including ``stop_after``."""
        self.stage = BuildStage.INIT
        self._initialize()

        self.stage = BuildStage.EXPORT
        definitions, exported = self._export()
        validated: list[Path] = []
        bindings: Sequence[Path] = ()

        if stop_after != BuildStage.EXPORT:
            self.stage = BuildStage.VALIDATE
            validated = self._validate(definitions)

        if stop_after not in {BuildStage.EXPORT, BuildStage.VALIDATE}:
            self.stage = BuildStage.GENERATE_BINDINGS
            bindings = self._generate_bindings()
            self.stage = BuildStage.DONE

        return BuildOutcome(
            stage=self.stage,
            exported=tuple(exported),
            validated=tuple(validated),
            bindings=tuple(bindings),
        )

    def _initialize(self) -> None:
        source = self._request.schema_source
        if not source.is_file():
            raise SchemaSourceError(
                f"Schema source [{source}] is not accessible", stage=BuildStage.INIT
            )
        for directory, description in (
            (self._request.staging_dir, "Staging schema"),
            (self._request.registry_dir, "Committed registry"),
            (self._request.bindings_dir, "Binding output"),
        ):
            _ensure_directory(directory, description)

    def _export(self) -> tuple[list[SchemaDefinition], list[Path]]:
        source = self._request.schema_source
        try:
            definitions = parse_schema_source(source)
        except SchemaParseError as exc:
            raise SchemaSourceError(
                f"Failed to process schema source [{source}]: {exc}", stage=BuildStage.EXPORT
            ) from exc

        exported = []
        for definition in definitions:
            try:
                exported.append(write_registry_entry(self._request.staging_dir, definition))
            except OSError as exc:
                raise BuildDirectoryError(
                    f"Failed to write schema to [{self._request.staging_dir}]: {exc}",
                    stage=BuildStage.EXPORT,
                ) from exc
        _LOGGER.info(
            "Exported %d schema(s) from %s to %s",
            len(exported),
            source,
            self._request.staging_dir,
        )
        return definitions, exported

    def _validate(self, definitions: Sequence[SchemaDefinition]) -> list[Path]:
        try:
            return validate_registry_files(
                definitions,
                registry_dir=self._request.registry_dir,
                staging_dir=self._request.staging_dir,
                schema_source=self._request.schema_source,
            )
        except (MissingRegistryFileError, FingerprintMismatchError):
            _LOGGER.error(
                "Missing/invalid Avro schema files in [%s]. "
                "This is likely resolved by copying the contents of [%s] over.",
                self._request.registry_dir,
                self._request.staging_dir,
            )
            raise

    def _generate_bindings(self) -> Sequence[Path]:
        source = self._request.schema_source
        target = self._request.bindings_dir
        try:
            generated = self._binding_generator(source, target)
        except (OSError, SchemaParseError, ValueError) as exc:
            raise BindingGenerationError(
                f"Failed to generate bindings for [{source}] into [{target}]: {exc}",
                stage=BuildStage.GENERATE_BINDINGS,
            ) from exc
        _LOGGER.info("Generated %d binding module(s) in %s", len(generated), target)
        return generated


def validate_registry_files(
    definitions: Sequence[SchemaDefinition],
    *,
    registry_dir: Path,
    staging_dir: Path,
    schema_source: Path,
) -> list[Path]:
    """Require a committed, fingerprint-consistent registry entry for every definition.

    Raises:
      MissingRegistryFileError: If an expected entry does not exist.
      FingerprintMismatchError: If an entry does not parse or parses to another fingerprint.
    """
    validated = []
    for definition in definitions:
        expected_fingerprint = compute_fingerprint(definition.parsed)
        key = registry_entry_key(definition.namespace, definition.name, expected_fingerprint)
        entry_path = registry_dir.joinpath(*key.parts)
        if not entry_path.is_file():
            raise MissingRegistryFileError(
                f"Missing schema file [{entry_path}], which should have been extracted "
                f"from [{schema_source}]. Copy the contents of [{staging_dir}] "
                f"into [{registry_dir}].",
                expected_path=entry_path,
                staging_dir=staging_dir,
            )

        try:
            committed = parse_schema_text(entry_path.read_text(encoding="utf-8"))
        except (OSError, SchemaParseError) as exc:
            raise FingerprintMismatchError(
                f"Failed to parse schema file [{entry_path}]: {exc}",
                entry_path=entry_path,
                staging_dir=staging_dir,
            ) from exc
        if committed.fingerprint != expected_fingerprint:
            raise FingerprintMismatchError(
                f"Fingerprint of [{entry_path}] is [{committed.fingerprint}] "
                f"instead of [{expected_fingerprint}]",
                entry_path=entry_path,
                staging_dir=staging_dir,
            )
        validated.append(entry_path)
    return validated


def _ensure_directory(directory: Path, description: str) -> None:
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise BuildDirectoryError(
            f"{description} directory [{directory}] is not accessible: {exc}",
            stage=BuildStage.INIT,
        ) from exc
    if not directory.is_dir():
        raise BuildDirectoryError(
            f"{description} directory [{directory}] is not accessible", stage=BuildStage.INIT
        )
