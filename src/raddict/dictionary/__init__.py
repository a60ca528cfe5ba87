"""Dictionary loading, lookup and export.

Public entrypoints:
- ``DictionaryHandle`` for storage, direct mutation, lookup and teardown.
- ``load_dictionary`` / ``load_dictionary_from_buffer`` for parsing.
- ``dump_dictionary`` for text export.
"""

from raddict.dictionary.errors import DictionaryError, DictionaryErrorKind, DictionaryLoadError
from raddict.dictionary.export import EXPORT_FORMATS, dump_dictionary, export_dictionary
from raddict.dictionary.parser import (
    LoadReport,
    load_dictionary,
    load_dictionary_from_buffer,
    read_dictionary,
    read_dictionary_from_buffer,
    resolve_include_path,
)
from raddict.dictionary.store import DictionaryCounts, DictionaryHandle

__all__ = [
    "EXPORT_FORMATS",
    "DictionaryCounts",
    "DictionaryError",
    "DictionaryErrorKind",
    "DictionaryHandle",
    "DictionaryLoadError",
    "LoadReport",
    "dump_dictionary",
    "export_dictionary",
    "load_dictionary",
    "load_dictionary_from_buffer",
    "read_dictionary",
    "read_dictionary_from_buffer",
    "resolve_include_path",
]
