"""Envelope wire-format entities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from avro_registry_in_source.errors import EnvelopeDecodeError, ErrorKind

AVRO_HEADER_NAMESPACE = "avroNamespace"
AVRO_HEADER_TYPE = "avroType"
AVRO_HEADER_FINGERPRINT = "avroVer"
AVRO_HEADER_DATA = "avroData"


@dataclass(frozen=True)
class EnvelopeHeader:
    """Writer identity carried by an envelope.

    ``namespace`` is ``None`` for envelopes written before namespaces were emitted.
    """

    namespace: str | None
    type_name: str
    fingerprint: int


@dataclass(frozen=True)
class DecodeOutcome:
    """Result of decoding one envelope: either a value or a decode error."""

    value: Any
    error: EnvelopeDecodeError | None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        return None if self.error is None else self.error.kind

    @staticmethod
    def decoded(value: Any) -> DecodeOutcome:
        return DecodeOutcome(value=value, error=None)

    @staticmethod
    def failed(error: EnvelopeDecodeError) -> DecodeOutcome:
        return DecodeOutcome(value=None, error=error)
