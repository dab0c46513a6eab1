"""Identifier sanitizer tests."""

from __future__ import annotations

import pytest
from avro_registry_in_source.schema_management import sanitize_identifier


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("com.example.package", "com_example_package"),
        ("com/example/package", "com_example_package"),
        ("../etc/passwd", "___etc_passwd"),
        ("Bed-Size_2", "Bed-Size_2"),
        ("", ""),
    ],
)
def test_sanitize_replaces_characters_outside_safe_set(raw: str, expected: str) -> None:
    assert sanitize_identifier(raw) == expected


def test_sanitize_is_idempotent() -> None:
    once = sanitize_identifier("a.b/c d$e")

    assert sanitize_identifier(once) == once
    assert "." not in once
    assert "/" not in once
