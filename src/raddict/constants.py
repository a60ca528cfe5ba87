"""Stable constants shared across the dictionary loader."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Final

# Longest attribute, value or vendor name accepted by the loader.
NAME_LENGTH: Final[int] = 32

# Per-field scan width for directive lines; longer fields are cut to this width.
FIELD_SCAN_LENGTH: Final[int] = 63

U32_MAX: Final[int] = 0xFFFFFFFF
U64_MAX: Final[int] = 0xFFFFFFFFFFFFFFFF

# Vendor specifier used for standard (non vendor-specific) attributes.
STANDARD_VENDOR: Final[int] = 0

DEFAULT_DICTIONARY_PATH: Final[PurePosixPath] = PurePosixPath("/etc/radcli/dictionary")

# Label used in diagnostics for buffer-sourced dictionaries.
MEMORY_SOURCE_LABEL: Final[str] = "memory"

CONFIG_SCHEMA_VERSION: Final[int] = 1

__all__ = [
    "CONFIG_SCHEMA_VERSION",
    "DEFAULT_DICTIONARY_PATH",
    "FIELD_SCAN_LENGTH",
    "MEMORY_SOURCE_LABEL",
    "NAME_LENGTH",
    "STANDARD_VENDOR",
    "U32_MAX",
    "U64_MAX",
]
