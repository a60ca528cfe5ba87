"""Command-line interface router for raddict."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from raddict.config import (
    ConfigLoadError,
    ConfigValidationError,
    dump_effective_config,
    load_config,
)
from raddict.dictionary import (
    EXPORT_FORMATS,
    DictionaryHandle,
    DictionaryLoadError,
    LoadReport,
    dump_dictionary,
    load_dictionary,
)
from raddict.domain import encode_attribute_id
from raddict.domain.models import AttributeDef, ValueDef, VendorDef
from raddict.observability import log_context, setup_logging
from raddict.ui.render import CLIRenderer, create_renderer

EXIT_SUCCESS: Final[int] = 0
EXIT_NOT_FOUND: Final[int] = 1
EXIT_CONFIG_ERROR: Final[int] = 2


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = EXIT_CONFIG_ERROR

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router."""

    parser = argparse.ArgumentParser(
        prog="raddict",
        description=(
            "raddict: attribute dictionary loader and inspector.\n\n"
            "Common workflows:\n"
            "  raddict check /etc/radcli/dictionary      Validate a dictionary\n"
            "  raddict lookup --attribute User-Name      Resolve a name\n"
            "  raddict dump --format yaml                Export every record\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to raddict TOML config (default: ./raddict.toml if present).",
    )
    common.add_argument(
        "--log-level",
        default=None,
        help="Override the configured log level (DEBUG, INFO, WARNING, ERROR).",
    )
    common.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Show detailed output.",
    )
    common.add_argument(
        "--no-color",
        action="store_true",
        default=False,
        help="Disable colored output (also respects NO_COLOR env var).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        parents=[common],
        help="Load a dictionary and report what it defines.",
    )
    _add_dictionary_argument(check_parser)
    check_parser.add_argument("--json", action="store_true", help="Emit deterministic JSON output")
    check_parser.set_defaults(handler=_cmd_check)

    lookup_parser = subparsers.add_parser(
        "lookup",
        parents=[common],
        help="Resolve one attribute, value or vendor.",
    )
    _add_dictionary_argument(lookup_parser)
    target = lookup_parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--attribute", metavar="NAME", help="Attribute name (case-insensitive)")
    target.add_argument(
        "--attribute-code", metavar="CODE", type=int, help="Attribute code; see --vendor-id"
    )
    target.add_argument("--value", metavar="NAME", help="Value name (case-insensitive)")
    target.add_argument(
        "--value-of",
        nargs=2,
        metavar=("ATTRIBUTE", "NUMBER"),
        help="Value by owning attribute (case-sensitive) and number",
    )
    target.add_argument("--vendor", metavar="NAME", help="Vendor name (case-insensitive)")
    target.add_argument("--vendor-code", metavar="CODE", type=int, help="Vendor enterprise number")
    lookup_parser.add_argument(
        "--vendor-id",
        type=int,
        default=0,
        help="Vendor specifier for --attribute-code (default: 0, standard attributes)",
    )
    lookup_parser.add_argument("--json", action="store_true", help="Emit deterministic JSON output")
    lookup_parser.set_defaults(handler=_cmd_lookup)

    dump_parser = subparsers.add_parser(
        "dump",
        parents=[common],
        help="Export every loaded record as JSON or YAML.",
    )
    _add_dictionary_argument(dump_parser)
    dump_parser.add_argument("--format", choices=EXPORT_FORMATS, default="json")
    dump_parser.add_argument("--output", default=None, help="Write to a file instead of stdout")
    dump_parser.set_defaults(handler=_cmd_dump)

    config_parser = subparsers.add_parser(
        "config",
        parents=[common],
        help="Print the effective configuration.",
    )
    config_parser.add_argument("--json", action="store_true", help="Emit JSON output")
    config_parser.set_defaults(handler=_cmd_config)

    return parser


def _add_dictionary_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "dictionary",
        nargs="?",
        default=None,
        help="Dictionary file (default: [dictionary].path from config)",
    )


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return EXIT_CONFIG_ERROR

    try:
        config = _load_effective_config(namespace)
        setup_logging(config["logging"])
        result = handler(namespace, config)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    return int(result)


def main(argv: Sequence[str] | None = None) -> int:
    """Compatibility wrapper for main-module wiring."""

    return run_cli(argv)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_check(args: argparse.Namespace, config: Mapping[str, Any]) -> int:
    path = _dictionary_path(args, config)
    handle, report = _load(path)
    counts = handle.counts()

    if _flag(args, "json"):
        _emit_json(
            {
                "command": "check",
                "dictionary": path,
                "sources": report.sources,
                "lines_read": report.lines_read,
                "ignored_lines": report.ignored_lines,
                "attributes": counts.attributes,
                "values": counts.values,
                "vendors": counts.vendors,
            }
        )
        return EXIT_SUCCESS

    renderer = _get_renderer(args)
    renderer.heading(f"Dictionary OK: {path}")
    renderer.kv("Attributes", counts.attributes)
    renderer.kv("Values", counts.values)
    renderer.kv("Vendors", counts.vendors)
    renderer.kv("Lines read", report.lines_read)
    renderer.kv("Ignored lines", report.ignored_lines)
    if report.ignored_lines:
        renderer.warning(f"{report.ignored_lines} unrecognized line(s) ignored")
    if renderer.verbose:
        renderer.section("Sources:")
        renderer.items(report.sources)
    return EXIT_SUCCESS


def _cmd_lookup(args: argparse.Namespace, config: Mapping[str, Any]) -> int:
    path = _dictionary_path(args, config)
    handle, _ = _load(path)

    record: AttributeDef | ValueDef | VendorDef | None
    if args.attribute is not None:
        record = handle.find_attribute(args.attribute)
    elif args.attribute_code is not None:
        try:
            identifier = encode_attribute_id(args.attribute_code, args.vendor_id)
        except ValueError as exc:
            raise CLIError(str(exc)) from exc
        record = handle.find_attribute_by_id(identifier)
    elif args.value is not None:
        record = handle.find_value(args.value)
    elif args.value_of is not None:
        attribute_name, number_text = args.value_of
        record = handle.find_value_by_attribute(attribute_name, _parse_int(number_text))
    elif args.vendor is not None:
        record = handle.find_vendor(args.vendor)
    else:
        record = handle.find_vendor_by_code(args.vendor_code)

    if record is None:
        if _flag(args, "json"):
            _emit_json({"command": "lookup", "found": False})
        else:
            print("not found", file=sys.stderr)
        return EXIT_NOT_FOUND

    payload = _record_payload(record)
    if _flag(args, "json"):
        _emit_json({"command": "lookup", "found": True, "record": payload})
        return EXIT_SUCCESS

    renderer = _get_renderer(args)
    renderer.heading(type(record).__name__)
    for key, value in payload.items():
        renderer.kv(key, value)
    return EXIT_SUCCESS


def _cmd_dump(args: argparse.Namespace, config: Mapping[str, Any]) -> int:
    path = _dictionary_path(args, config)
    handle, _ = _load(path)
    rendered = dump_dictionary(handle, args.format)

    output = _optional_str(getattr(args, "output", None))
    if output is None:
        sys.stdout.write(rendered)
        return EXIT_SUCCESS

    try:
        Path(output).write_text(rendered, encoding="utf-8")
    except (OSError, UnicodeError) as exc:
        raise CLIError(f"unable to write {output}: {exc}") from exc
    return EXIT_SUCCESS


def _cmd_config(args: argparse.Namespace, config: Mapping[str, Any]) -> int:
    if _flag(args, "json"):
        print(dump_effective_config(config))
        return EXIT_SUCCESS

    renderer = _get_renderer(args)
    renderer.text(json.dumps(config, indent=2, sort_keys=True, ensure_ascii=True))
    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load(path: str) -> tuple[DictionaryHandle, LoadReport]:
    handle = DictionaryHandle()
    # CLIError is frozen; raise it outside the context manager.
    try:
        with log_context(dictionary=path):
            report = load_dictionary(handle, path)
    except DictionaryLoadError as exc:
        raise CLIError(f"failed to load dictionary: {exc}") from exc
    return handle, report


def _record_payload(record: AttributeDef | ValueDef | VendorDef) -> dict[str, object]:
    payload: dict[str, object] = dict(record.to_dict())
    if isinstance(record, AttributeDef):
        payload["vendor"] = record.vendor
        payload["code"] = record.code
    return payload


def _load_effective_config(args: argparse.Namespace) -> dict[str, Any]:
    config_path = _optional_str(getattr(args, "config_path", None))
    overrides: dict[str, object] = {}
    log_level = _optional_str(getattr(args, "log_level", None))
    if log_level is not None:
        overrides["logging.level"] = log_level

    try:
        return load_config(config_path, cli_overrides=overrides)
    except (ConfigLoadError, ConfigValidationError) as exc:
        raise CLIError(str(exc)) from exc


def _dictionary_path(args: argparse.Namespace, config: Mapping[str, Any]) -> str:
    explicit = _optional_str(getattr(args, "dictionary", None))
    if explicit is not None:
        return explicit
    return str(config["dictionary"]["path"])


def _parse_int(text: str) -> int:
    try:
        return int(text)
    except ValueError as exc:
        raise CLIError(f"expected an integer, got {text!r}") from exc


def _emit_json(payload: Mapping[str, object]) -> None:
    """Emit a JSON payload to stdout as one ASCII line with sorted keys."""

    print(json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=True))


def _get_renderer(args: argparse.Namespace) -> CLIRenderer:
    return create_renderer(no_color=_flag(args, "no_color"), verbose=_flag(args, "verbose"))


def _flag(args: argparse.Namespace, name: str) -> bool:
    return bool(getattr(args, name, False))


def _optional_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


__all__ = ["CLIError", "build_parser", "main", "run_cli"]
