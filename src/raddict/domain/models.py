"""Immutable dictionary records with canonical serialization."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from enum import Enum
from typing import TYPE_CHECKING, Final, NoReturn

from raddict.constants import U32_MAX
from raddict.domain import ids as domain_ids

if TYPE_CHECKING:
    from enum import StrEnum
else:
    try:
        from enum import StrEnum
    except ImportError:

        class StrEnum(str, Enum):
            """Compatibility fallback for Python < 3.11."""


JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]

# Names keep the raw bytes of the source: undecodable bytes survive as surrogates.
NAME_ENCODING: Final[str] = "utf-8"
NAME_ERRORS: Final[str] = "surrogateescape"


class AttributeType(StrEnum):
    STRING = "string"
    INTEGER = "integer"
    IPADDR = "ipaddr"
    IPV6ADDR = "ipv6addr"
    IPV6PREFIX = "ipv6prefix"
    DATE = "date"


# Exact, case-sensitive keywords accepted in the TYPE field of ATTRIBUTE lines.
TYPE_KEYWORDS: Final[dict[str, AttributeType]] = {
    "string": AttributeType.STRING,
    "integer": AttributeType.INTEGER,
    "ipaddr": AttributeType.IPADDR,
    "ipv4addr": AttributeType.IPADDR,
    "ipv6addr": AttributeType.IPV6ADDR,
    "ipv6prefix": AttributeType.IPV6PREFIX,
    "date": AttributeType.DATE,
}


def attribute_type_from_keyword(keyword: str) -> AttributeType | None:
    """Map a dictionary type keyword to an ``AttributeType``; ``None`` when unknown."""
    return TYPE_KEYWORDS.get(keyword)


def name_byte_length(name: str) -> int:
    """Length of ``name`` in bytes as read from a dictionary file."""
    return len(name.encode(NAME_ENCODING, NAME_ERRORS))


def truncate_name_bytes(name: str, limit: int) -> str:
    """Cut ``name`` to at most ``limit`` bytes, keeping the bytes as read."""
    encoded = name.encode(NAME_ENCODING, NAME_ERRORS)
    return encoded[:limit].decode(NAME_ENCODING, NAME_ERRORS)


class CanonicalModel:
    """Mixin for canonical dict/json serialization."""

    def to_dict(self) -> dict[str, JSONValue]:
        out: dict[str, JSONValue] = {}
        for model_field in fields(self):  # type: ignore[arg-type]
            out[model_field.name] = _serialize_value(
                getattr(self, model_field.name),
                f"{self.__class__.__name__}.{model_field.name}",
            )
        return out

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _fail(path: str, message: str) -> NoReturn:
    raise ValueError(f"{path}: {message}")


def _serialize_value(value: object, path: str) -> JSONValue:
    if isinstance(value, Enum):
        raw = value.value
        if not isinstance(raw, str):
            _fail(path, "enum value must be string")
        return raw
    if isinstance(value, (str, int)):
        return value
    _fail(path, f"cannot serialize value of type {type(value).__name__}")


def _as_name(value: object, path: str) -> str:
    if not isinstance(value, str):
        _fail(path, f"expected string, got {type(value).__name__}")
    if not value:
        _fail(path, "must not be empty")
    return value


def _as_u32(value: object, path: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        _fail(path, f"expected integer, got {type(value).__name__}")
    if not 0 <= value <= U32_MAX:
        _fail(path, f"must be within 0..{U32_MAX}")
    return value


@dataclass(frozen=True, slots=True)
class AttributeDef(CanonicalModel):
    name: str
    identifier: int
    value_type: AttributeType

    def __post_init__(self) -> None:
        _as_name(self.name, "AttributeDef.name")
        try:
            domain_ids.validate_attribute_id(self.identifier)
        except ValueError as exc:
            _fail("AttributeDef.identifier", str(exc))
        if not isinstance(self.value_type, AttributeType):
            _fail("AttributeDef.value_type", f"expected AttributeType, got {self.value_type!r}")

    @property
    def vendor(self) -> int:
        return domain_ids.vendor_of(self.identifier)

    @property
    def code(self) -> int:
        return domain_ids.attribute_code_of(self.identifier)


@dataclass(frozen=True, slots=True)
class ValueDef(CanonicalModel):
    """A named enumerated constant belonging (by name only) to one attribute."""

    attribute_name: str
    name: str
    value: int

    def __post_init__(self) -> None:
        _as_name(self.attribute_name, "ValueDef.attribute_name")
        _as_name(self.name, "ValueDef.name")
        _as_u32(self.value, "ValueDef.value")


@dataclass(frozen=True, slots=True)
class VendorDef(CanonicalModel):
    name: str
    code: int

    def __post_init__(self) -> None:
        _as_name(self.name, "VendorDef.name")
        _as_u32(self.code, "VendorDef.code")


__all__ = [
    "AttributeDef",
    "AttributeType",
    "CanonicalModel",
    "JSONValue",
    "NAME_ENCODING",
    "NAME_ERRORS",
    "TYPE_KEYWORDS",
    "ValueDef",
    "VendorDef",
    "attribute_type_from_keyword",
    "name_byte_length",
    "truncate_name_bytes",
]
