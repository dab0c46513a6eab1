"""Filesystem-safe tokens for Avro names and namespaces."""

from __future__ import annotations

import re

_UNSAFE_CHARACTERS = re.compile(r"[^A-Za-z0-9_-]")


def sanitize_identifier(raw: str) -> str:
    """Replace every character outside ``[A-Za-z0-9_-]`` with ``_``.

    Slashes and periods are replaced too, so a sanitized token can never walk
    directories when used as a path segment. Distinct names may collapse to the
    same token.
    """
    return _UNSAFE_CHARACTERS.sub("_", raw)
