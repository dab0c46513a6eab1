"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "avro-registry.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Build configuration for avro-registry-in-source.
# Replace every <REQUIRED> placeholder before running build, export or validate.
# Uncomment an <OPTIONAL> setting to override its default.
# Relative paths are resolved against the directory holding this file.

schema:
  # Root schema source: an Avro protocol (.avpr) or schema (.avsc) file.
  source: "<REQUIRED>"

registry:
  # Exported fingerprinted schemas; copy new files from here into committed_dir.
  # staging_dir: "<OPTIONAL>"  # default: build/generated-avro-schemas
  # Source-controlled registry holding every schema version ever released.
  # committed_dir: "<OPTIONAL>"  # default: avro-registry

bindings:
  # Generated Python dataclass modules; build output, not committed.
  # output_dir: "<OPTIONAL>"  # default: build/generated-avro-bindings
"""


def build_placeholder_configuration() -> str:
    """Build a YAML configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
