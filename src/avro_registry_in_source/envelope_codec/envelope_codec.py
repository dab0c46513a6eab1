"""JSON envelope serialization with schema-resolving decode."""

from __future__ import annotations

import dataclasses
import io
import json
import logging
import re
from collections.abc import Mapping
from enum import Enum
from functools import lru_cache
from typing import Any, TextIO

from avro_registry_in_source.errors import (
    DecodeFailureError,
    EnvelopeDecodeError,
    InvalidFingerprintError,
    MissingBodyError,
    MissingHeaderError,
    SchemaNotFoundError,
    TypeMismatchError,
)
from avro_registry_in_source.schema_management import SchemaDefinition, decode_json, encode_json
from avro_registry_in_source.schema_management.schema_toolkit import DECODE_ERRORS
from avro_registry_in_source.schema_registry import SchemaRegistry

from .envelope_models import (
    AVRO_HEADER_DATA,
    AVRO_HEADER_FINGERPRINT,
    AVRO_HEADER_NAMESPACE,
    AVRO_HEADER_TYPE,
    DecodeOutcome,
    EnvelopeHeader,
)

_LOGGER = logging.getLogger(__name__)

_MESSAGE_PLACEHOLDER = "##MSG##"
_PLACEHOLDER_TOKEN = json.dumps(_MESSAGE_PLACEHOLDER)
_FINGERPRINT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class EnvelopeCodec:
    """Wrap values in schema-tagged JSON envelopes and decode them back.

    Decoding resolves the writer schema through the registry and reads the body
    into the caller's reader schema, so envelopes written under older schema
    versions still load. A codec without a registry can only encode.
    """

    def __init__(self, registry: SchemaRegistry | None = None) -> None:
        self._registry = registry

    def to_json(self, value: Any, schema: SchemaDefinition, *, pretty: bool = False) -> str:
        """Serialize ``value`` under ``schema`` into an envelope string."""
        out = io.StringIO()
        self.write_json(value, schema, out, pretty=pretty)
        return out.getvalue()

    def write_json(
        self, value: Any, schema: SchemaDefinition, out: TextIO, *, pretty: bool = False
    ) -> None:
        """Write the envelope for ``value`` to ``out``.

        The body is encoded before anything is written, so an encoding failure
        leaves ``out`` untouched.
        """
        prefix, suffix = _header_template(schema.namespace, schema.name, schema.fingerprint)
        body = encode_json(schema, _to_datum(value), pretty=pretty)
        out.write(prefix)
        if pretty:
            out.write("\n")
        out.write(body)
        if pretty:
            out.write("\n")
        out.write(suffix)

    def read_header(self, text: str | bytes) -> EnvelopeHeader:
        """Return the writer identity of an envelope without decoding its body."""
        namespace, type_name, raw_fingerprint, _ = _split_envelope(text)
        return EnvelopeHeader(
            namespace=namespace,
            type_name=type_name,
            fingerprint=_parse_fingerprint(raw_fingerprint),
        )

    def from_json(self, text: str | bytes, reader_schema: SchemaDefinition) -> Any:
        """Decode an envelope into the shape of ``reader_schema``.

        Raises:
          MissingHeaderError, MissingBodyError, TypeMismatchError,
          InvalidFingerprintError, SchemaNotFoundError, DecodeFailureError:
            For envelopes that cannot be decoded.
          CorruptRegistryEntryError: If the writer schema's registry entry is broken.
        """
        namespace, type_name, raw_fingerprint, data = _split_envelope(text)
        if type_name != reader_schema.name:
            raise TypeMismatchError(
                f"Cannot load JSON message of type [{type_name}] as [{reader_schema.name}]"
            )
        fingerprint = _parse_fingerprint(raw_fingerprint)

        writer_schema = self._resolve_writer(namespace, type_name, fingerprint, reader_schema)
        if writer_schema is None:
            raise SchemaNotFoundError(
                f"No schema found for [{type_name}] with fingerprint [{fingerprint}]"
            )
        if writer_schema.fingerprint != reader_schema.fingerprint:
            _LOGGER.debug(
                "Resolving %s from writer fingerprint %s to reader fingerprint %s",
                reader_schema.full_name,
                writer_schema.fingerprint,
                reader_schema.fingerprint,
            )

        body = json.dumps(data, separators=(",", ":"))
        try:
            return decode_json(writer_schema, reader_schema, body)
        except DECODE_ERRORS as exc:
            raise DecodeFailureError(
                f"Failed to decode JSON message as [{reader_schema.full_name}]: {exc}"
            ) from exc

    def _resolve_writer(
        self,
        namespace: str | None,
        type_name: str,
        fingerprint: int,
        reader_schema: SchemaDefinition,
    ) -> SchemaDefinition | None:
        if self._registry is None:
            return None
        if namespace is not None:
            return self._registry.resolve(namespace, type_name, fingerprint)
        # No namespace header: the reader's namespace first, then the registry root.
        candidates: list[str | None] = [None]
        if reader_schema.namespace:
            candidates.insert(0, reader_schema.namespace)
        for candidate in candidates:
            writer_schema = self._registry.resolve(candidate, type_name, fingerprint)
            if writer_schema is not None:
                return writer_schema
        return None

    def try_from_json(self, text: str | bytes, reader_schema: SchemaDefinition) -> DecodeOutcome:
        """Decode like :meth:`from_json`, returning decode errors as an outcome."""
        try:
            return DecodeOutcome.decoded(self.from_json(text, reader_schema))
        except EnvelopeDecodeError as exc:
            return DecodeOutcome.failed(exc)


@lru_cache(maxsize=256)
def _header_template(namespace: str | None, type_name: str, fingerprint: int) -> tuple[str, str]:
    header: dict[str, str] = {}
    if namespace:
        header[AVRO_HEADER_NAMESPACE] = namespace
    header[AVRO_HEADER_TYPE] = type_name
    header[AVRO_HEADER_FINGERPRINT] = str(fingerprint)
    header[AVRO_HEADER_DATA] = _MESSAGE_PLACEHOLDER
    wrapper = json.dumps(header, separators=(",", ":"))
    start = wrapper.rfind(_PLACEHOLDER_TOKEN)
    if start < 0:
        raise RuntimeError("Envelope placeholder missing from header template.")
    return wrapper[:start], wrapper[start + len(_PLACEHOLDER_TOKEN) :]


def _split_envelope(text: str | bytes) -> tuple[str | None, str, str, Mapping[str, Any]]:
    try:
        root = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeFailureError(f"JSON message is not valid JSON: {exc}") from exc
    if not isinstance(root, Mapping):
        raise MissingHeaderError("JSON message root must be an object carrying Avro headers.")

    type_name = root.get(AVRO_HEADER_TYPE)
    raw_fingerprint = root.get(AVRO_HEADER_FINGERPRINT)
    if not _is_present(type_name) or not _is_present(raw_fingerprint):
        raise MissingHeaderError(
            "JSON message does not contain Avro header(s) "
            f"({AVRO_HEADER_TYPE}, {AVRO_HEADER_FINGERPRINT})"
        )
    data = root.get(AVRO_HEADER_DATA)
    if not isinstance(data, Mapping):
        raise MissingBodyError(f"JSON message does not contain Avro body ({AVRO_HEADER_DATA})")

    namespace = root.get(AVRO_HEADER_NAMESPACE)
    if not _is_present(namespace):
        namespace = None
    return namespace, type_name, raw_fingerprint, data


def _is_present(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _parse_fingerprint(raw: str) -> int:
    candidate = raw.strip()
    if not _FINGERPRINT_PATTERN.fullmatch(candidate):
        raise InvalidFingerprintError(f"Avro fingerprint [{raw}] is not an integer")
    fingerprint = int(candidate)
    if not _INT64_MIN <= fingerprint <= _INT64_MAX:
        raise InvalidFingerprintError(f"Avro fingerprint [{raw}] is outside the 64-bit range")
    return fingerprint


def _to_datum(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _to_datum(dataclasses.asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {key: _to_datum(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_to_datum(item) for item in value]
    return value
