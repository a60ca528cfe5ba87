"""
raddict: attribute dictionary loader.

Reads the line-oriented attribute/value/vendor dictionary format used by
RADIUS client stacks into an in-memory ``DictionaryHandle`` and answers
lookups by name, by namespaced attribute identifier and by vendor.

Import boundary rules
- No side effects at import time (no config loading, no logging init).
- ``raddict.config``, ``raddict.observability`` and ``raddict.ui`` are opt-in;
  library users only need the names re-exported here.
"""

from raddict.dictionary import (
    DictionaryError,
    DictionaryErrorKind,
    DictionaryHandle,
    DictionaryLoadError,
    LoadReport,
    load_dictionary,
    load_dictionary_from_buffer,
    read_dictionary,
    read_dictionary_from_buffer,
)
from raddict.domain import AttributeDef, AttributeType, ValueDef, VendorDef, encode_attribute_id

__version__ = "0.1.0"

__all__ = [
    "AttributeDef",
    "AttributeType",
    "DictionaryError",
    "DictionaryErrorKind",
    "DictionaryHandle",
    "DictionaryLoadError",
    "LoadReport",
    "ValueDef",
    "VendorDef",
    "__version__",
    "encode_attribute_id",
    "load_dictionary",
    "load_dictionary_from_buffer",
    "read_dictionary",
    "read_dictionary_from_buffer",
]
