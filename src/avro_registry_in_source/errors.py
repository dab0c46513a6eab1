"""Error kinds shared by the registry, the envelope codec and the build pipeline."""

from __future__ import annotations

from enum import Enum
from typing import ClassVar


class ErrorKind(str, Enum):
    """Kind tag carried by every domain error."""

    MISSING_HEADER = "missing_header"
    MISSING_BODY = "missing_body"
    TYPE_MISMATCH = "type_mismatch"
    INVALID_FINGERPRINT = "invalid_fingerprint"
    SCHEMA_NOT_FOUND = "schema_not_found"
    CORRUPT_REGISTRY_ENTRY = "corrupt_registry_entry"
    DECODE_FAILURE = "decode_failure"
    ENCODE_FAILURE = "encode_failure"
    SCHEMA_SOURCE = "schema_source"
    BUILD_DIRECTORY = "build_directory"
    MISSING_REGISTRY_FILE = "missing_registry_file"
    FINGERPRINT_MISMATCH = "fingerprint_mismatch"
    BINDING_GENERATION_FAILURE = "binding_generation_failure"


class AvroRegistryError(Exception):
    """Base class for all domain errors."""

    kind: ClassVar[ErrorKind]
    recoverable: ClassVar[bool] = False


class EnvelopeDecodeError(AvroRegistryError):
    """Raised when an envelope cannot be decoded into the requested schema."""


class MissingHeaderError(EnvelopeDecodeError):
    """Envelope lacks the type or fingerprint header."""

    kind = ErrorKind.MISSING_HEADER


class MissingBodyError(EnvelopeDecodeError):
    """Envelope lacks the data object."""

    kind = ErrorKind.MISSING_BODY


class TypeMismatchError(EnvelopeDecodeError):
    """Envelope type differs from the reader schema name."""

    kind = ErrorKind.TYPE_MISMATCH


class InvalidFingerprintError(EnvelopeDecodeError):
    """Envelope fingerprint is not a signed 64-bit integer."""

    kind = ErrorKind.INVALID_FINGERPRINT


class SchemaNotFoundError(EnvelopeDecodeError):
    """No registry entry and no provider hit for the writer schema.

    Callers may refresh an external schema source and retry.
    """

    kind = ErrorKind.SCHEMA_NOT_FOUND
    recoverable = True


class DecodeFailureError(EnvelopeDecodeError):
    """The envelope body could not be resolved against the reader schema."""

    kind = ErrorKind.DECODE_FAILURE


class CorruptRegistryEntryError(AvroRegistryError):
    """A registry entry exists but cannot be parsed or disagrees with its filename."""

    kind = ErrorKind.CORRUPT_REGISTRY_ENTRY


class SchemaParseError(AvroRegistryError):
    """Raised when schema text or a schema source file cannot be parsed."""

    kind = ErrorKind.SCHEMA_SOURCE


class EncodeFailureError(AvroRegistryError):
    """Raised when a value cannot be encoded under its schema."""

    kind = ErrorKind.ENCODE_FAILURE
