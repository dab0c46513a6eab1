"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import ConfigurationError, load_configuration
from .runtime_settings import (
    DEFAULT_BINDINGS_DIR,
    DEFAULT_REGISTRY_DIR,
    DEFAULT_STAGING_DIR,
    BindingSettings,
    Configuration,
    RegistrySettings,
    SchemaSourceSettings,
)

__all__ = [
    "BindingSettings",
    "Configuration",
    "ConfigurationError",
    "DEFAULT_BINDINGS_DIR",
    "DEFAULT_CONFIG_FILENAME",
    "DEFAULT_REGISTRY_DIR",
    "DEFAULT_STAGING_DIR",
    "RegistrySettings",
    "SchemaSourceSettings",
    "build_placeholder_configuration",
    "load_configuration",
    "write_placeholder_configuration",
]
