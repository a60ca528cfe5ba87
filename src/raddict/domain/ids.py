"""Namespaced attribute identifiers.

An attribute is keyed by one 64-bit identifier built from its per-vendor
attribute code and the vendor specifier that owns it. The vendor occupies the
high 32 bits and the code the low 32 bits, so standard attributes (vendor 0)
keep their wire code as identifier and no vendor-scoped attribute can collide
with a standard one.
"""

from __future__ import annotations

from typing import Final

from raddict.constants import STANDARD_VENDOR, U32_MAX, U64_MAX

VENDOR_SHIFT: Final[int] = 32
ATTRIBUTE_CODE_MASK: Final[int] = U32_MAX

__all__ = [
    "ATTRIBUTE_CODE_MASK",
    "VENDOR_SHIFT",
    "attribute_code_of",
    "encode_attribute_id",
    "is_vendor_specific",
    "validate_attribute_id",
    "vendor_of",
]


def encode_attribute_id(code: int, vendor: int = STANDARD_VENDOR) -> int:
    """Combine an attribute ``code`` and ``vendor`` specifier into one identifier."""
    _validate_u32(code, "attribute code")
    _validate_u32(vendor, "vendor specifier")
    return (vendor << VENDOR_SHIFT) | code


def vendor_of(identifier: int) -> int:
    """Return the vendor specifier half of an identifier."""
    validate_attribute_id(identifier)
    return identifier >> VENDOR_SHIFT


def attribute_code_of(identifier: int) -> int:
    """Return the per-vendor attribute code half of an identifier."""
    validate_attribute_id(identifier)
    return identifier & ATTRIBUTE_CODE_MASK


def is_vendor_specific(identifier: int) -> bool:
    return vendor_of(identifier) != STANDARD_VENDOR


def validate_attribute_id(identifier: int) -> None:
    """Validate that ``identifier`` fits the unsigned 64-bit identifier space."""
    if isinstance(identifier, bool) or not isinstance(identifier, int):
        raise ValueError(f"attribute id must be an integer, got {type(identifier).__name__}")
    if not 0 <= identifier <= U64_MAX:
        raise ValueError(f"attribute id out of range: expected 0..{U64_MAX}, got {identifier}")


def _validate_u32(value: int, label: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{label} must be an integer, got {type(value).__name__}")
    if not 0 <= value <= U32_MAX:
        raise ValueError(f"{label} out of range: expected 0..{U32_MAX}, got {value}")
