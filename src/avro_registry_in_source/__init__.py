"""Fingerprint-addressed Avro schema registry kept in source control."""

from .envelope_codec import DecodeOutcome, EnvelopeCodec, EnvelopeHeader
from .errors import AvroRegistryError, EnvelopeDecodeError, ErrorKind
from .schema_management import SchemaDefinition, parse_schema_source, parse_schema_text
from .schema_registry import DirectorySchemaProvider, SchemaCache, SchemaRegistry

__all__ = [
    "AvroRegistryError",
    "DecodeOutcome",
    "DirectorySchemaProvider",
    "EnvelopeCodec",
    "EnvelopeDecodeError",
    "EnvelopeHeader",
    "ErrorKind",
    "SchemaCache",
    "SchemaDefinition",
    "SchemaRegistry",
    "parse_schema_source",
    "parse_schema_text",
]
