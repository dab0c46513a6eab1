"""Schema evolution scenarios across registry, codec and generated bindings."""

from __future__ import annotations

import importlib
import sys
from collections.abc import Iterator
from pathlib import Path
from types import ModuleType

import pytest
from avro_registry_in_source.envelope_codec import EnvelopeCodec
from avro_registry_in_source.registry_building import generate_bindings
from avro_registry_in_source.schema_management import SchemaDefinition, parse_schema_source
from avro_registry_in_source.schema_registry import SchemaRegistry, write_registry_entry

NAMESPACE = "com.example.package"


def _samples_dir() -> Path:
    return Path(__file__).resolve().parents[3] / "samples"


def _by_name(source: str) -> dict[str, SchemaDefinition]:
    return {
        definition.name: definition for definition in parse_schema_source(_samples_dir() / source)
    }


@pytest.fixture
def registry_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "avro-registry"
    for source in ("house-before-firmness.avpr", "house.avpr"):
        for definition in _by_name(source).values():
            write_registry_entry(directory, definition)
    return directory


@pytest.fixture
def generated_package(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[ModuleType]:
    output_dir = tmp_path / "bindings"
    generate_bindings(_samples_dir() / "house.avpr", output_dir)
    monkeypatch.syspath_prepend(str(output_dir))
    for name in ("com", "com.example", NAMESPACE):
        monkeypatch.delitem(sys.modules, name, raising=False)
    yield importlib.import_module(NAMESPACE)
    for name in ("com", "com.example", NAMESPACE):
        sys.modules.pop(name, None)


def test_old_house_decodes_with_default_firmness(registry_dir: Path) -> None:
    old = _by_name("house-before-firmness.avpr")["House"]
    new = _by_name("house.avpr")["House"]
    codec = EnvelopeCodec(SchemaRegistry(registry_dir))
    value = {"rooms": [{"beds": [{"size": "KING"}, {"size": "TWIN"}]}, {"beds": []}]}

    envelope = codec.to_json(value, old, pretty=True)
    decoded = codec.from_json(envelope, new)

    assert codec.read_header(envelope).fingerprint == old.fingerprint
    assert old.fingerprint != new.fingerprint
    assert decoded == {
        "rooms": [
            {
                "beds": [
                    {"size": "KING", "firmness": "HARD"},
                    {"size": "TWIN", "firmness": "HARD"},
                ]
            },
            {"beds": []},
        ]
    }


def test_new_house_decodes_into_old_reader_dropping_firmness(registry_dir: Path) -> None:
    old = _by_name("house-before-firmness.avpr")["House"]
    new = _by_name("house.avpr")["House"]
    codec = EnvelopeCodec(SchemaRegistry(registry_dir))
    value = {"rooms": [{"beds": [{"size": "QUEEN", "firmness": "SOFT"}]}]}

    decoded = codec.from_json(codec.to_json(value, new), old)

    assert decoded == {"rooms": [{"beds": [{"size": "QUEEN"}]}]}


def test_generated_bindings_encode_through_codec(
    registry_dir: Path, generated_package: ModuleType
) -> None:
    house_module = generated_package
    house = house_module.House(
        rooms=[
            house_module.Room(beds=[house_module.Bed(size=house_module.BedSize.FULL)]),
        ]
    )
    schema = _by_name("house.avpr")["House"]
    codec = EnvelopeCodec(SchemaRegistry(registry_dir))

    decoded = codec.from_json(codec.to_json(house, schema), schema)

    assert house_module.House.AVRO_FINGERPRINT == schema.fingerprint
    assert decoded == {"rooms": [{"beds": [{"size": "FULL", "firmness": "HARD"}]}]}


@pytest.mark.parametrize("pretty", [False, True])
def test_two_room_house_round_trips_with_default_firmness(
    registry_dir: Path, generated_package: ModuleType, pretty: bool
) -> None:
    bindings = generated_package
    house = bindings.House(
        rooms=[
            bindings.Room(beds=[bindings.Bed(size=bindings.BedSize.KING)]),
            bindings.Room(
                beds=[
                    bindings.Bed(size=bindings.BedSize.QUEEN),
                    bindings.Bed(size=bindings.BedSize.TWIN),
                ]
            ),
        ]
    )
    schema = _by_name("house.avpr")["House"]
    codec = EnvelopeCodec(SchemaRegistry(registry_dir))

    envelope = codec.to_json(house, schema, pretty=pretty)
    rooms = codec.from_json(envelope, schema)["rooms"]

    assert ("\n" in envelope) is pretty
    assert len(rooms) == 2
    assert rooms[0]["beds"][0] == {"size": "KING", "firmness": "HARD"}
    assert len(rooms[1]["beds"]) == 2
    assert rooms[1]["beds"][1]["size"] == "TWIN"
    assert rooms[1]["beds"][0]["firmness"] == "HARD"
