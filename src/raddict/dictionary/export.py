"""Deterministic JSON / YAML views of a loaded dictionary."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Final, Literal

import yaml

if TYPE_CHECKING:
    from raddict.dictionary.store import DictionaryHandle
    from raddict.domain.models import JSONValue

ExportFormat = Literal["json", "yaml"]
EXPORT_FORMATS: Final[tuple[str, ...]] = ("json", "yaml")


def export_dictionary(handle: DictionaryHandle) -> dict[str, JSONValue]:
    """Return every record of ``handle`` in definition order (oldest first)."""

    attributes: list[JSONValue] = []
    for attribute in reversed(list(handle.attributes())):
        record = attribute.to_dict()
        record["vendor"] = attribute.vendor
        record["code"] = attribute.code
        attributes.append(record)

    return {
        "vendors": [vendor.to_dict() for vendor in reversed(list(handle.vendors()))],
        "attributes": attributes,
        "values": [value.to_dict() for value in reversed(list(handle.values()))],
    }


def dump_dictionary(handle: DictionaryHandle, fmt: ExportFormat = "json") -> str:
    """Render ``handle`` as JSON or YAML text ending in a newline.

    Both formats are pure ASCII. Non-ASCII characters, including bytes that
    were not valid UTF-8 in the source, are written as escape sequences.
    """

    payload = export_dictionary(handle)
    if fmt == "json":
        return json.dumps(payload, indent=2, ensure_ascii=True) + "\n"
    if fmt == "yaml":
        rendered = yaml.safe_dump(
            payload,
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=False,
            width=120,
        )
        if not rendered.endswith("\n"):
            rendered = rendered + "\n"
        return rendered
    expected = ", ".join(EXPORT_FORMATS)
    raise ValueError(f"unsupported export format {fmt!r}; expected one of: {expected}")


__all__ = [
    "EXPORT_FORMATS",
    "ExportFormat",
    "dump_dictionary",
    "export_dictionary",
]
