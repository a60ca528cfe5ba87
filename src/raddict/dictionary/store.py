"""Per-handle storage, lookup and teardown of dictionary records.

A ``DictionaryHandle`` owns three collections (attributes, enumerated values
and vendors). Insertion is O(1) and records are never edited once stored; a
redefinition is a new record that shadows older ones because every lookup scans
newest first. Lookups are linear and return ``None`` when nothing matches.

The handle performs no locking. Load it from one thread, then share it with
readers only until ``free_all`` is called.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, NoReturn, TypeVar

from raddict.constants import NAME_LENGTH, STANDARD_VENDOR, U32_MAX
from raddict.dictionary.errors import DictionaryError, DictionaryErrorKind
from raddict.domain import ids as domain_ids
from raddict.domain.models import (
    AttributeDef,
    AttributeType,
    ValueDef,
    VendorDef,
    attribute_type_from_keyword,
    name_byte_length,
    truncate_name_bytes,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

_TRecord = TypeVar("_TRecord", AttributeDef, ValueDef, VendorDef)


@dataclass(frozen=True, slots=True)
class DictionaryCounts:
    attributes: int
    values: int
    vendors: int

    @property
    def total(self) -> int:
        return self.attributes + self.values + self.vendors


class DictionaryHandle:
    """Owner of one loaded dictionary."""

    __slots__ = ("_attributes", "_values", "_vendors", "first_loaded_path")

    def __init__(self) -> None:
        # Stored oldest first; scans walk the lists in reverse.
        self._attributes: list[AttributeDef] = []
        self._values: list[ValueDef] = []
        self._vendors: list[VendorDef] = []
        # Path of the first top-level load, used to make reloading it a no-op.
        self.first_loaded_path: str | None = None

    # -- direct mutation -------------------------------------------------

    def add_attribute(
        self,
        name: str,
        code: int,
        value_type: AttributeType | str,
        vendor: int = STANDARD_VENDOR,
        *,
        truncate_name: bool = False,
    ) -> AttributeDef:
        """Add an attribute without consulting vendor scope or checking for duplicates.

        ``value_type`` is an ``AttributeType`` or one of the dictionary type
        keywords. Over-long names are rejected unless ``truncate_name`` is set,
        in which case they are cut to ``NAME_LENGTH`` bytes.
        """

        checked_name = _checked_name(name, "add_attribute", "attribute", truncate=truncate_name)
        resolved_type = _resolve_type(value_type)
        if resolved_type is None:
            _reject("add_attribute", DictionaryErrorKind.INVALID_TYPE, "invalid attribute type")
        _checked_u32(code, "add_attribute", "attribute code")
        _checked_u32(vendor, "add_attribute", "vendor specifier")

        record = AttributeDef(
            name=checked_name,
            identifier=domain_ids.encode_attribute_id(code, vendor),
            value_type=resolved_type,
        )
        return self.insert_attribute(record)

    def add_value(
        self,
        attribute_name: str,
        name: str,
        value: int,
        *,
        truncate_names: bool = False,
    ) -> ValueDef:
        """Add an enumerated value; the owning attribute is not required to exist."""

        checked_attribute = _checked_name(
            attribute_name, "add_value", "attribute", truncate=truncate_names
        )
        checked_name = _checked_name(name, "add_value", "name", truncate=truncate_names)
        _checked_u32(value, "add_value", "value")
        return self.insert_value(
            ValueDef(attribute_name=checked_attribute, name=checked_name, value=value)
        )

    def add_vendor(self, name: str, code: int, *, truncate_name: bool = False) -> VendorDef:
        checked_name = _checked_name(name, "add_vendor", "vendor name", truncate=truncate_name)
        _checked_u32(code, "add_vendor", "vendor code")
        return self.insert_vendor(VendorDef(name=checked_name, code=code))

    def insert_attribute(self, record: AttributeDef) -> AttributeDef:
        """Store an already validated attribute record as the newest entry."""
        return _append(self._attributes, record, "insert_attribute")

    def insert_value(self, record: ValueDef) -> ValueDef:
        return _append(self._values, record, "insert_value")

    def insert_vendor(self, record: VendorDef) -> VendorDef:
        return _append(self._vendors, record, "insert_vendor")

    # -- lookup -----------------------------------------------------------

    def find_attribute_by_id(self, identifier: int) -> AttributeDef | None:
        """Return the newest attribute whose namespaced identifier equals ``identifier``."""
        for attribute in reversed(self._attributes):
            if attribute.identifier == identifier:
                return attribute
        return None

    def find_attribute(self, name: str) -> AttributeDef | None:
        """Return the newest attribute named ``name`` (case-insensitive)."""
        folded = name.lower()
        for attribute in reversed(self._attributes):
            if attribute.name.lower() == folded:
                return attribute
        return None

    def find_value(self, name: str) -> ValueDef | None:
        """Return the newest value whose own name matches ``name`` (case-insensitive)."""
        folded = name.lower()
        for value in reversed(self._values):
            if value.name.lower() == folded:
                return value
        return None

    def find_value_by_attribute(self, attribute_name: str, value: int) -> ValueDef | None:
        """Return the newest value owned by ``attribute_name`` with number ``value``.

        The attribute name comparison is case-sensitive, unlike the name lookups.
        """
        for candidate in reversed(self._values):
            if candidate.attribute_name == attribute_name and candidate.value == value:
                return candidate
        return None

    def find_vendor(self, name: str) -> VendorDef | None:
        folded = name.lower()
        for vendor in reversed(self._vendors):
            if vendor.name.lower() == folded:
                return vendor
        return None

    def find_vendor_by_code(self, code: int) -> VendorDef | None:
        for vendor in reversed(self._vendors):
            if vendor.code == code:
                return vendor
        return None

    def values_for_attribute(self, attribute_name: str) -> list[ValueDef]:
        """All values owned by ``attribute_name`` (case-sensitive), newest first."""
        return [value for value in reversed(self._values) if value.attribute_name == attribute_name]

    # -- inspection -------------------------------------------------------

    def attributes(self) -> Iterator[AttributeDef]:
        return reversed(self._attributes)

    def values(self) -> Iterator[ValueDef]:
        return reversed(self._values)

    def vendors(self) -> Iterator[VendorDef]:
        return reversed(self._vendors)

    def counts(self) -> DictionaryCounts:
        return DictionaryCounts(
            attributes=len(self._attributes),
            values=len(self._values),
            vendors=len(self._vendors),
        )

    @property
    def is_empty(self) -> bool:
        return not (self._attributes or self._values or self._vendors)

    # -- lifecycle --------------------------------------------------------

    def free_all(self) -> None:
        """Release every record and reset all three collections to empty.

        Safe on an empty handle. The first-loaded path guard is kept.
        """
        released = self.counts()
        self._attributes = []
        self._values = []
        self._vendors = []
        if released.total:
            logger.debug(
                "dictionary freed",
                extra={
                    "attributes": released.attributes,
                    "values": released.values,
                    "vendors": released.vendors,
                },
            )

    def __repr__(self) -> str:
        counts = self.counts()
        return (
            f"DictionaryHandle(attributes={counts.attributes}, values={counts.values}, "
            f"vendors={counts.vendors})"
        )


def _append(collection: list[_TRecord], record: _TRecord, operation: str) -> _TRecord:
    try:
        collection.append(record)
    except MemoryError as exc:
        logger.critical("%s: out of memory", operation)
        raise DictionaryError(DictionaryErrorKind.ALLOCATION_FAILURE, "out of memory") from exc
    return record


def _reject(operation: str, kind: DictionaryErrorKind, message: str) -> NoReturn:
    logger.error("%s: %s", operation, message)
    raise DictionaryError(kind, message)


def _checked_name(value: str, operation: str, label: str, *, truncate: bool) -> str:
    if not isinstance(value, str) or not value:
        _reject(operation, DictionaryErrorKind.INVALID_NAME_LENGTH, f"invalid {label} length")
    if name_byte_length(value) > NAME_LENGTH:
        if not truncate:
            _reject(operation, DictionaryErrorKind.INVALID_NAME_LENGTH, f"invalid {label} length")
        return truncate_name_bytes(value, NAME_LENGTH)
    return value


def _checked_u32(value: int, operation: str, label: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= U32_MAX:
        _reject(operation, DictionaryErrorKind.INVALID_NUMERIC_FIELD, f"invalid {label}")


def _resolve_type(value_type: AttributeType | str) -> AttributeType | None:
    if isinstance(value_type, AttributeType):
        return value_type
    if isinstance(value_type, str):
        return attribute_type_from_keyword(value_type)
    return None


__all__ = [
    "DictionaryCounts",
    "DictionaryHandle",
]
