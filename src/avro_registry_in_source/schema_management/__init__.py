"""Schema management exports."""

from .identifier_sanitizer import sanitize_identifier
from .schema_models import SchemaDefinition
from .schema_toolkit import (
    compute_fingerprint,
    decode_json,
    definition_from_schema,
    encode_json,
    parse_schema_source,
    parse_schema_text,
)

__all__ = [
    "SchemaDefinition",
    "compute_fingerprint",
    "decode_json",
    "definition_from_schema",
    "encode_json",
    "parse_schema_source",
    "parse_schema_text",
    "sanitize_identifier",
]
