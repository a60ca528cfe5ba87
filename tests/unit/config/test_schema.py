"""
raddict: unit tests for config schema validation

File: tests/unit/config/test_schema.py

Purpose
- Validate strict config schema behavior and structured errors.
"""

from __future__ import annotations

import pytest

from raddict.config.schema import (
    ConfigValidationError,
    assert_valid_config,
    default_config,
    merge_config,
    validate_config,
)


def test_defaults_validate_successfully() -> None:
    result = validate_config(default_config())

    assert result.is_valid
    assert result.issues == ()
    assert result.config == default_config()


def test_default_config_returns_independent_copies() -> None:
    first = default_config()
    first["logging"]["level"] = "DEBUG"
    assert default_config()["logging"]["level"] == "WARNING"


def test_merge_is_deep_and_non_destructive() -> None:
    base = default_config()
    merged = merge_config(base, {"logging": {"json": True}})

    assert merged["logging"]["json"] is True
    assert merged["logging"]["level"] == "WARNING"
    assert base["logging"]["json"] is False


def test_log_level_is_normalized_to_upper_case() -> None:
    config = merge_config(default_config(), {"logging": {"level": " debug "}})
    assert assert_valid_config(config)["logging"]["level"] == "DEBUG"


def test_invalid_values_report_field_paths() -> None:
    config = merge_config(
        default_config(),
        {
            "logging": {"level": "LOUD", "json": "yes", "log_dir": ""},
            "dictionary": {"path": 5},
            "extra": {},
        },
    )

    result = validate_config(config)

    assert not result.is_valid
    paths = [issue.path for issue in result.issues]
    assert paths == [
        "extra",
        "dictionary.path",
        "logging.level",
        "logging.json",
        "logging.log_dir",
    ]


def test_missing_sections_and_fields_are_reported() -> None:
    result = validate_config({"meta": {}, "logging": {"level": "INFO"}})

    messages = {(issue.path, issue.message) for issue in result.issues}
    assert ("meta.schema_version", "field is required") in messages
    assert ("dictionary", "section is required") in messages
    assert ("logging.json", "field is required") in messages
    assert ("logging.log_to_stderr", "field is required") in messages


def test_unsupported_schema_version_is_rejected() -> None:
    config = merge_config(default_config(), {"meta": {"schema_version": 2}})
    with pytest.raises(ConfigValidationError, match="unsupported schema_version 2"):
        assert_valid_config(config)


def test_non_mapping_root_is_rejected() -> None:
    result = validate_config(["not", "a", "mapping"])
    assert not result.is_valid
    assert result.issues[0].path == "<root>"


def test_nul_bytes_in_paths_are_rejected() -> None:
    config = merge_config(default_config(), {"dictionary": {"path": "a\x00b"}})
    result = validate_config(config)
    assert [issue.message for issue in result.issues] == ["must not contain NUL bytes"]
