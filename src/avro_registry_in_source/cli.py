"""Command line interface entry point."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import click

from avro_registry_in_source.configuration import (
    DEFAULT_CONFIG_FILENAME,
    Configuration,
    ConfigurationError,
    load_configuration,
    write_placeholder_configuration,
)
from avro_registry_in_source.envelope_codec import EnvelopeCodec
from avro_registry_in_source.errors import AvroRegistryError
from avro_registry_in_source.registry_building import (
    BuildOutcome,
    BuildRequest,
    BuildStage,
    FingerprintMismatchError,
    RegistryBuildError,
    RegistryBuilder,
)
from avro_registry_in_source.schema_management import SchemaDefinition, parse_schema_source
from avro_registry_in_source.schema_registry import DirectorySchemaProvider, SchemaRegistry


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="avro-registry-in-source")
@click.option("--verbose", "-v", count=True, help="Log pipeline stages (-v) or lookups (-vv).")
def cli(verbose: int) -> None:
    """Fingerprint-addressed Avro schema registry kept in source control."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG if verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML build configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML build configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


_CONFIG_OPTION = click.option(
    "--config",
    "config_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML build configuration file",
)


@cli.command(name="build")
@_CONFIG_OPTION
def build(config_path: str) -> None:
    """Export, validate and generate bindings for the configured schema source."""
    outcome = _run_pipeline(config_path, BuildStage.GENERATE_BINDINGS)
    click.echo(
        f"validated {len(outcome.validated)} schema(s); "
        f"generated {len(outcome.bindings)} binding module(s)"
    )


@cli.command(name="export")
@_CONFIG_OPTION
def export(config_path: str) -> None:
    """Export fingerprinted schemas to the staging directory."""
    outcome = _run_pipeline(config_path, BuildStage.EXPORT)
    for path in outcome.exported:
        click.echo(str(path))


@cli.command(name="validate")
@_CONFIG_OPTION
def validate(config_path: str) -> None:
    """Check that every exported schema is committed to the registry directory."""
    outcome = _run_pipeline(config_path, BuildStage.VALIDATE)
    click.echo(f"validated {len(outcome.validated)} schema(s)")


@cli.command(name="encode")
@click.option(
    "--schema",
    "schema_path",
    required=True,
    type=click.Path(path_type=str),
    help="Schema source (.avsc or .avpr) declaring the writer type",
)
@click.option(
    "--input",
    "input_path",
    required=True,
    type=click.Path(path_type=str),
    help="JSON file holding the value to encode",
)
@click.option("--type", "type_name", required=False, help="Named type to encode as")
@click.option("--pretty", is_flag=True, default=False, help="Indent the envelope body.")
def encode(schema_path: str, input_path: str, type_name: str | None, pretty: bool) -> None:
    """Wrap a JSON value in a schema-tagged envelope."""
    schema = _load_schema(schema_path, type_name)
    value = _read_json(input_path)
    try:
        envelope = EnvelopeCodec().to_json(value, schema, pretty=pretty)
    except AvroRegistryError as exc:
        raise CliError(str(exc)) from exc
    click.echo(envelope)


@cli.command(name="decode")
@click.option(
    "--registry",
    "registry_dir",
    required=True,
    type=click.Path(path_type=str),
    help="Registry directory holding fingerprinted schemas",
)
@click.option(
    "--schema",
    "schema_path",
    required=True,
    type=click.Path(path_type=str),
    help="Schema source (.avsc or .avpr) declaring the reader type",
)
@click.option(
    "--input",
    "input_path",
    required=True,
    type=click.Path(path_type=str),
    help="File holding the envelope to decode",
)
@click.option("--type", "type_name", required=False, help="Named type to decode into")
@click.option(
    "--fallback-dir",
    "fallback_dir",
    required=False,
    type=click.Path(path_type=str),
    help="Additional registry directory consulted when the registry has no match",
)
def decode(
    registry_dir: str,
    schema_path: str,
    input_path: str,
    type_name: str | None,
    fallback_dir: str | None,
) -> None:
    """Decode an envelope into the reader type and print it as JSON."""
    schema = _load_schema(schema_path, type_name)
    provider = DirectorySchemaProvider(fallback_dir) if fallback_dir else None
    codec = EnvelopeCodec(SchemaRegistry(Path(registry_dir), provider=provider))
    try:
        text = Path(input_path).read_text(encoding="utf-8")
        value = codec.from_json(text, schema)
    except OSError as exc:
        raise CliError(f"Failed to read envelope [{input_path}]: {exc}") from exc
    except AvroRegistryError as exc:
        raise CliError(f"{exc.kind.value}: {exc}") from exc
    click.echo(json.dumps(value, indent=2, default=_json_fallback))


def build_request(configuration: Configuration) -> BuildRequest:
    """Map a loaded configuration onto the build pipeline's request."""
    return BuildRequest(
        schema_source=configuration.schema.source_path,
        staging_dir=configuration.registry.staging_dir,
        registry_dir=configuration.registry.committed_dir,
        bindings_dir=configuration.bindings.output_dir,
    )


def _run_pipeline(config_path: str, stop_after: BuildStage) -> BuildOutcome:
    try:
        configuration = load_configuration(config_path)
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc
    try:
        return RegistryBuilder(build_request(configuration)).run(stop_after=stop_after)
    except FingerprintMismatchError as exc:
        raise CliError(
            f"{exc}\nCopy the new files from [{exc.staging_dir}] into "
            f"[{configuration.registry.committed_dir}] and commit them."
        ) from exc
    except RegistryBuildError as exc:
        raise CliError(f"{exc.stage.value} failed: {exc}") from exc


def _load_schema(schema_path: str, type_name: str | None) -> SchemaDefinition:
    try:
        definitions = parse_schema_source(schema_path)
    except AvroRegistryError as exc:
        raise CliError(str(exc)) from exc
    return select_definition(definitions, type_name)


def select_definition(
    definitions: Sequence[SchemaDefinition], type_name: str | None
) -> SchemaDefinition:
    """Pick the named type by full or short name; a single-type source needs no name."""
    if type_name is None:
        if len(definitions) == 1:
            return definitions[0]
        names = ", ".join(definition.full_name for definition in definitions)
        raise CliError(f"Schema source declares several types; choose one with --type: {names}")
    for definition in definitions:
        if type_name in {definition.full_name, definition.name}:
            return definition
    raise CliError(f"Schema source does not declare type [{type_name}]")


def _read_json(input_path: str) -> Any:
    try:
        return json.loads(Path(input_path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise CliError(f"Failed to read input [{input_path}]: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CliError(f"Input [{input_path}] is not valid JSON: {exc}") from exc


def _json_fallback(value: Any) -> Any:
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return str(value)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
