"""Unit tests for JSON / YAML dictionary export."""

from __future__ import annotations

import json

import pytest
import yaml

from raddict.dictionary import (
    DictionaryHandle,
    dump_dictionary,
    export_dictionary,
    load_dictionary_from_buffer,
)
from raddict.domain import AttributeType


@pytest.fixture
def handle() -> DictionaryHandle:
    handle = DictionaryHandle()
    handle.add_vendor("Cisco", 9)
    handle.add_attribute("User-Name", 1, AttributeType.STRING)
    handle.add_attribute("Cisco-AVPair", 1, AttributeType.STRING, vendor=9)
    handle.add_value("Service-Type", "Login-User", 1)
    return handle


@pytest.mark.unit
def test_export_lists_records_in_definition_order(handle: DictionaryHandle) -> None:
    payload = export_dictionary(handle)

    assert payload["vendors"] == [{"name": "Cisco", "code": 9}]
    assert payload["attributes"] == [
        {"name": "User-Name", "identifier": 1, "value_type": "string", "vendor": 0, "code": 1},
        {
            "name": "Cisco-AVPair",
            "identifier": (9 << 32) | 1,
            "value_type": "string",
            "vendor": 9,
            "code": 1,
        },
    ]
    assert payload["values"] == [
        {"attribute_name": "Service-Type", "name": "Login-User", "value": 1}
    ]


@pytest.mark.unit
def test_json_and_yaml_dumps_carry_the_same_payload(handle: DictionaryHandle) -> None:
    expected = export_dictionary(handle)

    as_json = dump_dictionary(handle, "json")
    as_yaml = dump_dictionary(handle, "yaml")

    assert as_json.endswith("\n")
    assert as_yaml.endswith("\n")
    assert json.loads(as_json) == expected
    assert yaml.safe_load(as_yaml) == expected
    assert as_yaml.startswith("vendors:")


@pytest.mark.unit
def test_dump_is_deterministic(handle: DictionaryHandle) -> None:
    assert dump_dictionary(handle, "yaml") == dump_dictionary(handle, "yaml")


@pytest.mark.unit
def test_empty_handle_exports_empty_lists() -> None:
    assert export_dictionary(DictionaryHandle()) == {"vendors": [], "attributes": [], "values": []}


@pytest.mark.unit
def test_unknown_format_is_rejected(handle: DictionaryHandle) -> None:
    with pytest.raises(ValueError, match="unsupported export format 'xml'"):
        dump_dictionary(handle, "xml")  # type: ignore[arg-type]


@pytest.mark.unit
@pytest.mark.parametrize("fmt", ["json", "yaml"])
def test_dumps_are_ascii_for_non_utf8_names(fmt: str) -> None:
    handle = DictionaryHandle()
    load_dictionary_from_buffer(handle, b"VENDOR Caf\xe9 9\nVENDOR R\xc3\xa9seau 10\n")

    rendered = dump_dictionary(handle, fmt)  # type: ignore[arg-type]

    assert rendered.isascii()
