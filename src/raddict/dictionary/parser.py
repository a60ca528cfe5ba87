"""
raddict: dictionary file parser

File: src/raddict/dictionary/parser.py

Purpose
- Read the line-oriented dictionary grammar from a file or an in-memory buffer
  into a ``DictionaryHandle``.

Grammar
    ATTRIBUTE <name> <code> <type> [<opt1>[,<opt2>...]]
    VALUE <attr-name> <value-name> <number>
    VENDOR <name> <enterprise-number>
    BEGIN-VENDOR <name>
    END-VENDOR
    $INCLUDE <path>
    # comment to end of line

Behavior
- Lines whose first character is ``#``, a newline or a carriage return are
  skipped; any other ``#`` truncates the line before the directive is matched.
- Directives are matched by literal prefix at column 0. Lines matching no
  directive are ignored.
- ``BEGIN-VENDOR`` sets a single vendor slot for the rest of the current
  source; ``END-VENDOR`` clears it. A second ``BEGIN-VENDOR`` replaces the slot
  rather than nesting.
- ``$INCLUDE`` is honored only for file sources. Relative paths are resolved
  against the directory of the including file and loaded recursively through
  ``load_dictionary``.
- The first malformed line in any source aborts the whole load. Records from
  earlier lines stay in the handle.
"""

from __future__ import annotations

import io
import logging
import os
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, NoReturn, TypeVar

from raddict.constants import (
    FIELD_SCAN_LENGTH,
    MEMORY_SOURCE_LABEL,
    NAME_LENGTH,
    STANDARD_VENDOR,
    U32_MAX,
)
from raddict.dictionary.errors import DictionaryError, DictionaryErrorKind, DictionaryLoadError
from raddict.domain import ids as domain_ids
from raddict.domain.models import (
    NAME_ENCODING,
    NAME_ERRORS,
    AttributeDef,
    ValueDef,
    VendorDef,
    attribute_type_from_keyword,
    name_byte_length,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from raddict.dictionary.store import DictionaryHandle

logger = logging.getLogger(__name__)

PathLike = str | os.PathLike[str]
_TRecord = TypeVar("_TRecord", AttributeDef, ValueDef, VendorDef)

_SKIP_LEADING_CHARS: Final[frozenset[str]] = frozenset({"#", "\n", "\r", "\0"})
_COMMENT_CHAR: Final[str] = "#"
_PATH_SEPARATOR: Final[str] = "/"
_VENDOR_OPTION_PREFIX: Final[str] = "vendor="
_LEADING_DIGITS_RE: Final[re.Pattern[str]] = re.compile(r"[0-9]+")

KEYWORD_ATTRIBUTE: Final[str] = "ATTRIBUTE"
KEYWORD_VALUE: Final[str] = "VALUE"
KEYWORD_INCLUDE: Final[str] = "$INCLUDE"
KEYWORD_END_VENDOR: Final[str] = "END-VENDOR"
KEYWORD_BEGIN_VENDOR: Final[str] = "BEGIN-VENDOR"
KEYWORD_VENDOR: Final[str] = "VENDOR"


@dataclass(slots=True)
class LoadReport:
    """Summary of one load call, including every transitively included file."""

    sources: list[str] = field(default_factory=list)
    lines_read: int = 0
    ignored_lines: int = 0
    attributes_added: int = 0
    values_added: int = 0
    vendors_added: int = 0
    skipped_reload: bool = False


@dataclass(slots=True)
class _ParseState:
    handle: DictionaryHandle
    report: LoadReport
    label: str
    # None for buffer sources, which have no directory context.
    path: str | None
    line_number: int = 0
    vendor_scope: int = STANDARD_VENDOR


def load_dictionary(
    handle: DictionaryHandle,
    path: PathLike,
    *,
    report: LoadReport | None = None,
) -> LoadReport:
    """Load the dictionary file at ``path`` (and its includes) into ``handle``.

    Loading the exact path string first loaded into ``handle`` again is a
    no-op. Raises ``DictionaryLoadError`` on the first failure.
    """

    path_str = os.fspath(path)
    active_report = report if report is not None else LoadReport()

    if handle.first_loaded_path is not None and path_str == handle.first_loaded_path:
        logger.debug("dictionary %s already loaded; skipping", path_str)
        if report is None:
            active_report.skipped_reload = True
        return active_report

    lines = _read_file_lines(path_str)
    if handle.first_loaded_path is None:
        handle.first_loaded_path = path_str

    state = _ParseState(handle=handle, report=active_report, label=path_str, path=path_str)
    _parse_lines(state, lines)
    return active_report


def load_dictionary_from_buffer(
    handle: DictionaryHandle,
    buffer: bytes | str,
    *,
    report: LoadReport | None = None,
) -> LoadReport:
    """Load dictionary text held in memory. ``$INCLUDE`` lines are not honored."""

    active_report = report if report is not None else LoadReport()
    if isinstance(buffer, bytes | bytearray | memoryview):
        text = bytes(buffer).decode(NAME_ENCODING, errors=NAME_ERRORS)
    elif isinstance(buffer, str):
        text = buffer
    else:
        message = f"unsupported buffer type {type(buffer).__name__}"
        logger.error("read_dictionary_from_buffer failed to read input buffer: %s", message)
        raise DictionaryLoadError(
            DictionaryErrorKind.IO_FAILURE, message, source=MEMORY_SOURCE_LABEL
        )

    state = _ParseState(
        handle=handle, report=active_report, label=MEMORY_SOURCE_LABEL, path=None
    )
    _parse_lines(state, io.StringIO(text).readlines())
    return active_report


def read_dictionary(handle: DictionaryHandle, path: PathLike) -> bool:
    """Boolean form of ``load_dictionary``: ``True`` on success, ``False`` on failure."""
    try:
        load_dictionary(handle, path)
    except DictionaryError:
        return False
    return True


def read_dictionary_from_buffer(handle: DictionaryHandle, buffer: bytes | str) -> bool:
    try:
        load_dictionary_from_buffer(handle, buffer)
    except DictionaryError:
        return False
    return True


def resolve_include_path(including_path: str, include: str) -> str:
    """Resolve an ``$INCLUDE`` target against the directory of ``including_path``.

    Absolute targets are returned unchanged, as are relative targets when the
    including path has no directory part.
    """

    if include.startswith(_PATH_SEPARATOR):
        return include
    directory, separator, _ = including_path.rpartition(_PATH_SEPARATOR)
    if not separator:
        return include
    return f"{directory}{_PATH_SEPARATOR}{include}"


def scan_fields(text: str) -> list[str]:
    """Split ``text`` on whitespace, cutting each field to the scan width."""
    return [item[:FIELD_SCAN_LENGTH] for item in text.split()]


def _read_file_lines(path: str) -> list[str]:
    try:
        with open(path, encoding=NAME_ENCODING, errors=NAME_ERRORS, newline="\n") as dict_file:
            return dict_file.readlines()
    except OSError as exc:
        reason = exc.strerror or str(exc)
        logger.error("read_dictionary couldn't open dictionary %s: %s", path, reason)
        raise DictionaryLoadError(
            DictionaryErrorKind.IO_FAILURE,
            f"couldn't open dictionary: {reason}",
            source=path,
        ) from exc


def _parse_lines(state: _ParseState, lines: Sequence[str]) -> None:
    state.report.sources.append(state.label)
    for raw_line in lines:
        state.line_number += 1
        state.report.lines_read += 1

        if not raw_line or raw_line[0] in _SKIP_LEADING_CHARS:
            continue

        line = raw_line.split(_COMMENT_CHAR, 1)[0]
        handler = _classify(line)
        if handler is None:
            state.report.ignored_lines += 1
            continue
        handler(state, line)


def _classify(line: str) -> Callable[[_ParseState, str], None] | None:
    if line.startswith(KEYWORD_ATTRIBUTE):
        return _handle_attribute
    if line.startswith(KEYWORD_VALUE):
        return _handle_value
    if line.startswith(KEYWORD_INCLUDE):
        return _handle_include
    if line.startswith(KEYWORD_END_VENDOR):
        return _handle_end_vendor
    if line.startswith(KEYWORD_BEGIN_VENDOR):
        return _handle_begin_vendor
    if line.startswith(KEYWORD_VENDOR):
        return _handle_vendor
    return None


def _handle_attribute(state: _ParseState, line: str) -> None:
    fields = scan_fields(line)
    if len(fields) < 4:
        _fail(state, DictionaryErrorKind.INVALID_LINE_FORMAT, "invalid attribute")
    _, name, code_text, type_text = fields[:4]
    options = fields[4] if len(fields) > 4 else ""

    _check_name(state, name, "invalid name length")
    code = _parse_number(state, code_text, "invalid value")
    value_type = attribute_type_from_keyword(type_text)
    if value_type is None:
        _fail(state, DictionaryErrorKind.INVALID_TYPE, "invalid type")

    option_vendor: VendorDef | None = None
    if options:
        for token in options.split(","):
            vendor_name = token.removeprefix(_VENDOR_OPTION_PREFIX)
            option_vendor = state.handle.find_vendor(vendor_name)
            if option_vendor is None:
                _fail(
                    state,
                    DictionaryErrorKind.UNKNOWN_VENDOR_REFERENCE,
                    f"unknown Vendor-Id {vendor_name}",
                )

    vendor = option_vendor.code if option_vendor is not None else state.vendor_scope
    record = AttributeDef(
        name=name,
        identifier=domain_ids.encode_attribute_id(code, vendor),
        value_type=value_type,
    )
    _insert(state, state.handle.insert_attribute, record)
    state.report.attributes_added += 1


def _handle_value(state: _ParseState, line: str) -> None:
    fields = scan_fields(line)
    if len(fields) < 4:
        _fail(state, DictionaryErrorKind.INVALID_LINE_FORMAT, "invalid value entry")
    _, attribute_name, name, number_text = fields[:4]

    _check_name(state, attribute_name, "invalid attribute length")
    _check_name(state, name, "invalid name length")
    number = _parse_number(state, number_text, "invalid value")

    record = ValueDef(attribute_name=attribute_name, name=name, value=number)
    _insert(state, state.handle.insert_value, record)
    state.report.values_added += 1


def _handle_vendor(state: _ParseState, line: str) -> None:
    fields = scan_fields(line)
    if len(fields) < 3:
        _fail(state, DictionaryErrorKind.INVALID_LINE_FORMAT, "invalid Vendor-Id")
    _, name, code_text = fields[:3]

    _check_name(state, name, "invalid vendor name length")
    code = _parse_number(state, code_text, "invalid Vendor-Id")

    _insert(state, state.handle.insert_vendor, VendorDef(name=name, code=code))
    state.report.vendors_added += 1


def _handle_begin_vendor(state: _ParseState, line: str) -> None:
    fields = scan_fields(line[len(KEYWORD_BEGIN_VENDOR) :])
    if not fields:
        _fail(state, DictionaryErrorKind.INVALID_LINE_FORMAT, "invalid Vendor-Id")

    vendor = state.handle.find_vendor(fields[0])
    if vendor is None:
        _fail(state, DictionaryErrorKind.UNKNOWN_VENDOR_REFERENCE, f"unknown Vendor {fields[0]}")
    state.vendor_scope = vendor.code


def _handle_end_vendor(state: _ParseState, line: str) -> None:
    state.vendor_scope = STANDARD_VENDOR


def _handle_include(state: _ParseState, line: str) -> None:
    including_path = state.path
    if including_path is None:
        state.report.ignored_lines += 1
        logger.warning(
            "ignoring $INCLUDE on line %d of dictionary %s: buffers have no directory",
            state.line_number,
            state.label,
        )
        return

    fields = scan_fields(line)
    if len(fields) < 2:
        _fail(state, DictionaryErrorKind.INVALID_LINE_FORMAT, "invalid include entry")
    target = resolve_include_path(including_path, fields[1])
    logger.debug("including dictionary %s from %s", target, state.label)
    load_dictionary(state.handle, target, report=state.report)


def _check_name(state: _ParseState, name: str, message: str) -> None:
    if name_byte_length(name) > NAME_LENGTH:
        _fail(state, DictionaryErrorKind.INVALID_NAME_LENGTH, message)


def _parse_number(state: _ParseState, text: str, message: str) -> int:
    digits = _LEADING_DIGITS_RE.match(text)
    if digits is None:
        _fail(state, DictionaryErrorKind.INVALID_NUMERIC_FIELD, message)
    number = int(digits.group())
    if number > U32_MAX:
        _fail(state, DictionaryErrorKind.INVALID_NUMERIC_FIELD, message)
    return number


def _insert(
    state: _ParseState, insert: Callable[[_TRecord], _TRecord], record: _TRecord
) -> None:
    try:
        insert(record)
    except DictionaryError as exc:
        raise DictionaryLoadError(
            exc.kind, exc.message, source=state.label, line=state.line_number
        ) from exc


def _fail(state: _ParseState, kind: DictionaryErrorKind, message: str) -> NoReturn:
    logger.error(
        "%s on line %d of dictionary %s",
        message,
        state.line_number,
        state.label,
        extra={"kind": str(kind)},
    )
    raise DictionaryLoadError(kind, message, source=state.label, line=state.line_number)


__all__ = [
    "KEYWORD_ATTRIBUTE",
    "KEYWORD_BEGIN_VENDOR",
    "KEYWORD_END_VENDOR",
    "KEYWORD_INCLUDE",
    "KEYWORD_VALUE",
    "KEYWORD_VENDOR",
    "LoadReport",
    "load_dictionary",
    "load_dictionary_from_buffer",
    "read_dictionary",
    "read_dictionary_from_buffer",
    "resolve_include_path",
    "scan_fields",
]
