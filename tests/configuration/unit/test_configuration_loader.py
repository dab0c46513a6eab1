"""Configuration loader tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from avro_registry_in_source.configuration.loader import ConfigurationError, load_configuration


def _write_file(path: Path, contents: str) -> Path:
    path.write_text(contents, encoding="utf-8")
    return path


def test_loads_yaml_configuration_with_defaults(tmp_path: Path) -> None:
    source = _write_file(tmp_path / "house.avpr", "{}")
    config_path = _write_file(
        tmp_path / "avro-registry.yaml",
        """
schema:
  source: house.avpr
""",
    )

    configuration = load_configuration(config_path)

    assert configuration.path == config_path
    assert configuration.schema.source_path == source.resolve()
    assert configuration.registry.staging_dir == (tmp_path / "build/generated-avro-schemas").resolve()
    assert configuration.registry.committed_dir == (tmp_path / "avro-registry").resolve()
    assert configuration.bindings.output_dir == (
        tmp_path / "build/generated-avro-bindings"
    ).resolve()


def test_resolves_relative_paths_against_config_directory(tmp_path: Path) -> None:
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    _write_file(tmp_path / "house.avpr", "{}")
    config_path = _write_file(
        config_dir / "avro-registry.yaml",
        f"""
schema:
  source: ../house.avpr
registry:
  staging_dir: staging
  committed_dir: "{tmp_path / 'committed'}"
bindings:
  output_dir: out
""",
    )

    configuration = load_configuration(config_path)

    assert configuration.schema.source_path == (tmp_path / "house.avpr").resolve()
    assert configuration.registry.staging_dir == (config_dir / "staging").resolve()
    assert configuration.registry.committed_dir == tmp_path / "committed"
    assert configuration.bindings.output_dir == (config_dir / "out").resolve()


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="not found"):
        load_configuration(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    ("contents", "message"),
    [
        ("", "'schema' is required"),
        ("- a\n- b\n", "root must be a mapping"),
        ("schema:\n  source: ''\n", "must not be empty"),
        ("schema:\n  source: 5\n", "must be a string"),
        ("schema:\n  source: missing.avpr\n", "Schema source not found"),
        ("schema:\n  source: house.avpr\nregistry: []\n", "'registry' must be a mapping"),
        (
            "schema:\n  source: house.avpr\nbindings:\n  output_dir: 3\n",
            "bindings.output_dir must be a string",
        ),
    ],
)
def test_invalid_configuration_is_rejected(tmp_path: Path, contents: str, message: str) -> None:
    _write_file(tmp_path / "house.avpr", "{}")
    config_path = _write_file(tmp_path / "avro-registry.yaml", contents)

    with pytest.raises(ConfigurationError, match=message):
        load_configuration(config_path)
