"""Unit tests for namespaced attribute identifier helpers."""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from raddict.constants import U32_MAX, U64_MAX
from raddict.domain import ids

_U32 = st.integers(min_value=0, max_value=U32_MAX)


@pytest.mark.unit
def test_standard_attribute_keeps_its_code_as_identifier() -> None:
    assert ids.encode_attribute_id(1) == 1
    assert ids.encode_attribute_id(26, 0) == 26
    assert not ids.is_vendor_specific(26)


@pytest.mark.unit
def test_vendor_occupies_high_half() -> None:
    identifier = ids.encode_attribute_id(1, 9)
    assert identifier == (9 << 32) | 1
    assert ids.vendor_of(identifier) == 9
    assert ids.attribute_code_of(identifier) == 1
    assert ids.is_vendor_specific(identifier)


@pytest.mark.unit
def test_extremes_fit_identifier_space() -> None:
    identifier = ids.encode_attribute_id(U32_MAX, U32_MAX)
    assert identifier == U64_MAX
    ids.validate_attribute_id(identifier)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("code", "vendor", "match"),
    [
        (-1, 0, "attribute code out of range"),
        (U32_MAX + 1, 0, "attribute code out of range"),
        (1, -1, "vendor specifier out of range"),
        (1, U32_MAX + 1, "vendor specifier out of range"),
        (True, 0, "attribute code must be an integer"),
        ("1", 0, "attribute code must be an integer"),
    ],
)
def test_encode_rejects_values_outside_u32(code: object, vendor: object, match: str) -> None:
    with pytest.raises(ValueError, match=match):
        ids.encode_attribute_id(code, vendor)  # type: ignore[arg-type]


@pytest.mark.unit
def test_validate_rejects_identifier_outside_u64() -> None:
    with pytest.raises(ValueError, match="out of range"):
        ids.validate_attribute_id(U64_MAX + 1)
    with pytest.raises(ValueError, match="out of range"):
        ids.vendor_of(-1)


@pytest.mark.unit
@given(left=st.tuples(_U32, _U32), right=st.tuples(_U32, _U32))
@settings(max_examples=200, derandomize=True, deadline=None)
def test_encoding_is_injective(left: tuple[int, int], right: tuple[int, int]) -> None:
    left_id = ids.encode_attribute_id(*left)
    right_id = ids.encode_attribute_id(*right)
    assert (left_id == right_id) == (left == right)


@pytest.mark.unit
@given(code=_U32, vendor=_U32)
@settings(max_examples=200, derandomize=True, deadline=None)
def test_halves_recover_inputs(code: int, vendor: int) -> None:
    identifier = ids.encode_attribute_id(code, vendor)
    assert ids.attribute_code_of(identifier) == code
    assert ids.vendor_of(identifier) == vendor
