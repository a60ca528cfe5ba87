"""Failure taxonomy for dictionary loading and direct mutation."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from enum import StrEnum
else:
    try:
        from enum import StrEnum
    except ImportError:
        from enum import Enum

        class StrEnum(str, Enum):
            """Compatibility fallback for Python < 3.11."""


class DictionaryErrorKind(StrEnum):
    INVALID_LINE_FORMAT = "invalid_line_format"
    INVALID_NAME_LENGTH = "invalid_name_length"
    INVALID_TYPE = "invalid_type"
    INVALID_NUMERIC_FIELD = "invalid_numeric_field"
    UNKNOWN_VENDOR_REFERENCE = "unknown_vendor_reference"
    ALLOCATION_FAILURE = "allocation_failure"
    IO_FAILURE = "io_failure"


class DictionaryError(ValueError):
    """Base failure for dictionary operations; ``kind`` names the failure class."""

    kind: DictionaryErrorKind
    message: str

    def __init__(self, kind: DictionaryErrorKind, message: str) -> None:
        self.kind = kind
        self.message = message
        super().__init__(f"[{kind}] {message}")


class DictionaryLoadError(DictionaryError):
    """Structured load failure pinned to the source and line that caused it."""

    source: str
    line: int | None

    def __init__(
        self,
        kind: DictionaryErrorKind,
        message: str,
        *,
        source: str,
        line: int | None = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.source = source
        self.line = line
        location = source if line is None else f"{source}:{line}"
        ValueError.__init__(self, f"{location} [{kind}] {message}")


__all__ = [
    "DictionaryError",
    "DictionaryErrorKind",
    "DictionaryLoadError",
]
