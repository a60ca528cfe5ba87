"""Unit tests for dictionary storage, lookup and teardown."""

from __future__ import annotations

import logging

import pytest

from raddict.constants import NAME_LENGTH, U32_MAX
from raddict.dictionary import DictionaryError, DictionaryErrorKind, DictionaryHandle
from raddict.domain import AttributeType, encode_attribute_id


@pytest.fixture
def handle() -> DictionaryHandle:
    return DictionaryHandle()


@pytest.mark.unit
def test_new_handle_is_empty(handle: DictionaryHandle) -> None:
    assert handle.is_empty
    assert handle.counts().total == 0
    assert handle.find_attribute("User-Name") is None
    assert handle.find_attribute_by_id(1) is None
    assert handle.find_value("Login-User") is None
    assert handle.find_vendor("Cisco") is None
    assert handle.first_loaded_path is None


@pytest.mark.unit
def test_add_attribute_is_found_by_name_and_identifier(handle: DictionaryHandle) -> None:
    record = handle.add_attribute("User-Name", 1, AttributeType.STRING)

    assert handle.find_attribute("User-Name") is record
    assert handle.find_attribute_by_id(1) is record
    assert record.value_type is AttributeType.STRING


@pytest.mark.unit
def test_add_attribute_accepts_type_keywords(handle: DictionaryHandle) -> None:
    record = handle.add_attribute("Framed-IP-Address", 8, "ipv4addr")
    assert record.value_type is AttributeType.IPADDR


@pytest.mark.unit
def test_vendor_specific_attribute_does_not_collide_with_standard(
    handle: DictionaryHandle,
) -> None:
    standard = handle.add_attribute("User-Name", 1, AttributeType.STRING)
    vendor_attr = handle.add_attribute("Cisco-AVPair", 1, AttributeType.STRING, vendor=9)

    assert handle.find_attribute_by_id(1) is standard
    assert handle.find_attribute_by_id(encode_attribute_id(1, 9)) is vendor_attr
    assert vendor_attr.vendor == 9


@pytest.mark.unit
def test_name_lookups_are_case_insensitive(handle: DictionaryHandle) -> None:
    attribute = handle.add_attribute("User-Name", 1, AttributeType.STRING)
    value = handle.add_value("Service-Type", "Login-User", 1)
    vendor = handle.add_vendor("Cisco", 9)

    assert handle.find_attribute("user-name") is attribute
    assert handle.find_attribute("USER-NAME") is attribute
    assert handle.find_value("login-user") is value
    assert handle.find_vendor("CISCO") is vendor


@pytest.mark.unit
def test_value_by_attribute_is_case_sensitive(handle: DictionaryHandle) -> None:
    value = handle.add_value("Service-Type", "Login-User", 1)

    assert handle.find_value_by_attribute("Service-Type", 1) is value
    assert handle.find_value_by_attribute("service-type", 1) is None
    assert handle.find_value_by_attribute("Service-Type", 2) is None


@pytest.mark.unit
def test_newest_definition_shadows_older(handle: DictionaryHandle) -> None:
    handle.add_attribute("X", 1, AttributeType.STRING)
    newer = handle.add_attribute("X", 2, AttributeType.INTEGER)

    assert handle.find_attribute("X") is newer
    assert handle.find_attribute_by_id(1) is not None
    assert handle.counts().attributes == 2

    handle.add_vendor("Acme", 100)
    newer_vendor = handle.add_vendor("acme", 200)
    assert handle.find_vendor("ACME") is newer_vendor
    assert handle.find_vendor_by_code(100) is not None

    handle.add_value("Service-Type", "Login-User", 1)
    newer_value = handle.add_value("Service-Type", "Other", 1)
    assert handle.find_value_by_attribute("Service-Type", 1) is newer_value


@pytest.mark.unit
def test_values_for_attribute_lists_newest_first(handle: DictionaryHandle) -> None:
    handle.add_value("Service-Type", "Login-User", 1)
    handle.add_value("Service-Type", "Framed-User", 2)
    handle.add_value("Acct-Status-Type", "Start", 1)

    names = [value.name for value in handle.values_for_attribute("Service-Type")]
    assert names == ["Framed-User", "Login-User"]


@pytest.mark.unit
def test_value_owner_is_not_required_to_exist(handle: DictionaryHandle) -> None:
    value = handle.add_value("Never-Defined", "Thing", 7)
    assert handle.find_attribute("Never-Defined") is None
    assert handle.find_value("Thing") is value


@pytest.mark.unit
def test_over_long_names_are_rejected_by_default(handle: DictionaryHandle) -> None:
    too_long = "A" * (NAME_LENGTH + 1)

    with pytest.raises(DictionaryError) as attr_error:
        handle.add_attribute(too_long, 1, AttributeType.STRING)
    with pytest.raises(DictionaryError) as value_error:
        handle.add_value("Service-Type", too_long, 1)
    with pytest.raises(DictionaryError) as vendor_error:
        handle.add_vendor(too_long, 9)

    for error in (attr_error, value_error, vendor_error):
        assert error.value.kind is DictionaryErrorKind.INVALID_NAME_LENGTH
    assert handle.is_empty


@pytest.mark.unit
def test_name_at_limit_is_accepted(handle: DictionaryHandle) -> None:
    exact = "B" * NAME_LENGTH
    assert handle.add_attribute(exact, 1, AttributeType.STRING).name == exact


@pytest.mark.unit
def test_truncation_is_opt_in(handle: DictionaryHandle) -> None:
    too_long = "C" * (NAME_LENGTH + 5)

    attribute = handle.add_attribute(too_long, 1, AttributeType.STRING, truncate_name=True)
    value = handle.add_value(too_long, too_long, 1, truncate_names=True)
    vendor = handle.add_vendor(too_long, 9, truncate_name=True)

    assert attribute.name == "C" * NAME_LENGTH
    assert value.attribute_name == "C" * NAME_LENGTH
    assert value.name == "C" * NAME_LENGTH
    assert vendor.name == "C" * NAME_LENGTH


@pytest.mark.unit
def test_truncation_cuts_on_encoded_bytes(handle: DictionaryHandle) -> None:
    wide = "\u00e9" * NAME_LENGTH

    with pytest.raises(DictionaryError) as error:
        handle.add_vendor(wide, 9)
    assert error.value.kind is DictionaryErrorKind.INVALID_NAME_LENGTH

    vendor = handle.add_vendor(wide, 9, truncate_name=True)
    assert vendor.name == "\u00e9" * (NAME_LENGTH // 2)
    assert len(vendor.name.encode("utf-8")) == NAME_LENGTH


@pytest.mark.unit
def test_empty_name_is_rejected(handle: DictionaryHandle) -> None:
    with pytest.raises(DictionaryError) as error:
        handle.add_vendor("", 9)
    assert error.value.kind is DictionaryErrorKind.INVALID_NAME_LENGTH


@pytest.mark.unit
def test_invalid_type_is_rejected(handle: DictionaryHandle) -> None:
    with pytest.raises(DictionaryError) as error:
        handle.add_attribute("X", 1, "octets")
    assert error.value.kind is DictionaryErrorKind.INVALID_TYPE


@pytest.mark.unit
@pytest.mark.parametrize("bad", [-1, U32_MAX + 1])
def test_numeric_fields_must_fit_u32(handle: DictionaryHandle, bad: int) -> None:
    with pytest.raises(DictionaryError) as attr_error:
        handle.add_attribute("X", bad, AttributeType.STRING)
    with pytest.raises(DictionaryError) as vendor_spec_error:
        handle.add_attribute("X", 1, AttributeType.STRING, vendor=bad)
    with pytest.raises(DictionaryError) as value_error:
        handle.add_value("Service-Type", "Y", bad)
    with pytest.raises(DictionaryError) as vendor_error:
        handle.add_vendor("Z", bad)

    for error in (attr_error, vendor_spec_error, value_error, vendor_error):
        assert error.value.kind is DictionaryErrorKind.INVALID_NUMERIC_FIELD


@pytest.mark.unit
def test_rejections_are_logged(handle: DictionaryHandle, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR, logger="raddict.dictionary.store")
    with pytest.raises(DictionaryError):
        handle.add_attribute("X", 1, "octets")
    assert "add_attribute: invalid attribute type" in caplog.text


@pytest.mark.unit
def test_free_all_empties_every_collection(handle: DictionaryHandle) -> None:
    handle.add_attribute("User-Name", 1, AttributeType.STRING)
    handle.add_value("Service-Type", "Login-User", 1)
    handle.add_vendor("Cisco", 9)
    handle.first_loaded_path = "/etc/radcli/dictionary"

    handle.free_all()

    assert handle.is_empty
    assert handle.find_attribute("User-Name") is None
    assert handle.find_value("Login-User") is None
    assert handle.find_vendor("Cisco") is None
    assert handle.first_loaded_path == "/etc/radcli/dictionary"


@pytest.mark.unit
def test_free_all_on_empty_handle_is_safe(handle: DictionaryHandle) -> None:
    handle.free_all()
    handle.free_all()
    assert handle.is_empty


@pytest.mark.unit
def test_iteration_is_newest_first(handle: DictionaryHandle) -> None:
    handle.add_vendor("First", 1)
    handle.add_vendor("Second", 2)
    assert [vendor.name for vendor in handle.vendors()] == ["Second", "First"]
    assert repr(handle) == "DictionaryHandle(attributes=0, values=0, vendors=2)"
