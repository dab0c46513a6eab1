"""CLI smoke tests."""

from click.testing import CliRunner
from avro_registry_in_source.cli import cli


def test_cli_displays_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    for command in ("generate-config", "build", "export", "validate", "encode", "decode"):
        assert command in result.output
    assert "--verbose" in result.output
