"""Envelope codec exports."""

from .envelope_codec import EnvelopeCodec
from .envelope_models import (
    AVRO_HEADER_DATA,
    AVRO_HEADER_FINGERPRINT,
    AVRO_HEADER_NAMESPACE,
    AVRO_HEADER_TYPE,
    DecodeOutcome,
    EnvelopeHeader,
)

__all__ = [
    "AVRO_HEADER_DATA",
    "AVRO_HEADER_FINGERPRINT",
    "AVRO_HEADER_NAMESPACE",
    "AVRO_HEADER_TYPE",
    "DecodeOutcome",
    "EnvelopeCodec",
    "EnvelopeHeader",
]
