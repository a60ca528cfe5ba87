"""Unit tests for immutable dictionary records."""

from __future__ import annotations

import dataclasses
import json

import pytest

from raddict.constants import U32_MAX
from raddict.domain import (
    TYPE_KEYWORDS,
    AttributeDef,
    AttributeType,
    ValueDef,
    VendorDef,
    attribute_type_from_keyword,
    encode_attribute_id,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("keyword", "expected"),
    [
        ("string", AttributeType.STRING),
        ("integer", AttributeType.INTEGER),
        ("ipaddr", AttributeType.IPADDR),
        ("ipv4addr", AttributeType.IPADDR),
        ("ipv6addr", AttributeType.IPV6ADDR),
        ("ipv6prefix", AttributeType.IPV6PREFIX),
        ("date", AttributeType.DATE),
    ],
)
def test_type_keywords_map_to_attribute_types(keyword: str, expected: AttributeType) -> None:
    assert attribute_type_from_keyword(keyword) is expected


@pytest.mark.unit
def test_type_keywords_are_case_sensitive_and_closed() -> None:
    assert attribute_type_from_keyword("STRING") is None
    assert attribute_type_from_keyword("octets") is None
    assert attribute_type_from_keyword("") is None
    assert len(TYPE_KEYWORDS) == 7


@pytest.mark.unit
def test_attribute_exposes_vendor_and_code() -> None:
    record = AttributeDef(
        name="Cisco-AVPair",
        identifier=encode_attribute_id(1, 9),
        value_type=AttributeType.STRING,
    )
    assert record.vendor == 9
    assert record.code == 1
    assert json.loads(record.to_json()) == {
        "identifier": (9 << 32) | 1,
        "name": "Cisco-AVPair",
        "value_type": "string",
    }


@pytest.mark.unit
def test_records_are_frozen() -> None:
    record = VendorDef(name="Cisco", code=9)
    with pytest.raises(dataclasses.FrozenInstanceError):
        record.code = 10  # type: ignore[misc]


@pytest.mark.unit
def test_records_validate_their_fields() -> None:
    with pytest.raises(ValueError, match="AttributeDef.name"):
        AttributeDef(name="", identifier=1, value_type=AttributeType.STRING)
    with pytest.raises(ValueError, match="AttributeDef.value_type"):
        AttributeDef(name="X", identifier=1, value_type="string")  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="AttributeDef.identifier"):
        AttributeDef(name="X", identifier=-1, value_type=AttributeType.STRING)
    with pytest.raises(ValueError, match="ValueDef.value"):
        ValueDef(attribute_name="Service-Type", name="Login-User", value=U32_MAX + 1)
    with pytest.raises(ValueError, match="VendorDef.code"):
        VendorDef(name="Cisco", code=-1)


@pytest.mark.unit
def test_value_to_dict_is_plain_json() -> None:
    record = ValueDef(attribute_name="Service-Type", name="Login-User", value=1)
    assert record.to_dict() == {
        "attribute_name": "Service-Type",
        "name": "Login-User",
        "value": 1,
    }
