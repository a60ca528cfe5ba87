"""
raddict: runtime config loader.

File: src/raddict/config/loader.py

Purpose
- Build the effective config from built-in defaults, ``raddict.toml``,
  ``RADDICT_*`` environment variables and CLI flags, in rising precedence.

Overridable settings
    RADDICT_DICTIONARY_PATH        dictionary.path
    RADDICT_LOGGING_LEVEL          logging.level
    RADDICT_LOGGING_LOG_TO_STDERR  logging.log_to_stderr
    RADDICT_LOGGING_JSON           logging.json
    RADDICT_LOGGING_LOG_DIR        logging.log_dir

``meta.schema_version`` can only be set in the file. Relative paths are
resolved against the directory holding the config file.
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from raddict.config.schema import (
    PATH_FIELDS,
    assert_valid_config,
    default_config,
    merge_config,
)

DEFAULT_CONFIG_FILE: Final[str] = "raddict.toml"
ENV_PREFIX: Final[str] = "RADDICT_"

_FLAG_WORDS: Final[Mapping[str, bool]] = {
    "1": True,
    "true": True,
    "yes": True,
    "on": True,
    "0": False,
    "false": False,
    "no": False,
    "off": False,
}


class ConfigLoadError(ValueError):
    """Raised when config cannot be read or an override cannot be parsed."""


def _parse_text(raw: str) -> str:
    return raw.strip()


def _parse_flag(raw: str) -> bool:
    try:
        return _FLAG_WORDS[raw.strip().lower()]
    except KeyError:
        raise ValueError("must be one of " + "/".join(_FLAG_WORDS)) from None


@dataclass(frozen=True, slots=True)
class _Setting:
    section: str
    key: str
    env_name: str
    parse: Callable[[str], object]

    @property
    def dotted(self) -> str:
        return f"{self.section}.{self.key}"


_SETTINGS: Final[tuple[_Setting, ...]] = (
    _Setting("dictionary", "path", f"{ENV_PREFIX}DICTIONARY_PATH", _parse_text),
    _Setting("logging", "level", f"{ENV_PREFIX}LOGGING_LEVEL", _parse_text),
    _Setting("logging", "log_to_stderr", f"{ENV_PREFIX}LOGGING_LOG_TO_STDERR", _parse_flag),
    _Setting("logging", "json", f"{ENV_PREFIX}LOGGING_JSON", _parse_flag),
    _Setting("logging", "log_dir", f"{ENV_PREFIX}LOGGING_LOG_DIR", _parse_text),
)
_SETTINGS_BY_KEY: Final[Mapping[str, _Setting]] = {item.dotted: item for item in _SETTINGS}


def load_config(
    config_path: str | Path | None = None,
    *,
    cli_overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Return the validated effective config.

    ``config_path`` defaults to ``./raddict.toml``, which may be absent; an
    explicit path must exist. ``cli_overrides`` maps dotted keys such as
    ``"logging.level"`` to values; ``None`` values are ignored.
    """

    if config_path is None:
        source = Path.cwd() / DEFAULT_CONFIG_FILE
        file_payload = _read_toml(source) if source.exists() else {}
    else:
        source = Path(config_path).expanduser()
        if not source.exists():
            raise ConfigLoadError(f"config file not found: {source.resolve()}")
        file_payload = _read_toml(source)

    config = assert_valid_config(merge_config(default_config(), file_payload))
    config = merge_config(config, _env_overlay(os.environ if environ is None else environ))
    config = merge_config(config, _cli_overlay(cli_overrides or {}))
    config = assert_valid_config(config)
    return assert_valid_config(normalize_paths(config, base_dir=source.resolve().parent))


def normalize_paths(config: Mapping[str, object], *, base_dir: Path) -> dict[str, Any]:
    """Return a copy of ``config`` with path settings made absolute against ``base_dir``."""

    normalized = merge_config({}, config)
    for section, key in PATH_FIELDS:
        table = normalized.get(section)
        if isinstance(table, dict) and isinstance(table.get(key), str):
            table[key] = _absolute_posix(table[key], base_dir)
    return normalized


def dump_effective_config(config: Mapping[str, object]) -> str:
    """One-line JSON form of ``config`` with sorted keys and ASCII escapes."""

    return json.dumps(config, sort_keys=True, separators=(",", ":"), ensure_ascii=True)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as config_file:
            return tomllib.load(config_file)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigLoadError(f"unable to read config file {path}: {exc}") from exc


def _env_overlay(environ: Mapping[str, str]) -> dict[str, dict[str, object]]:
    overlay: dict[str, dict[str, object]] = {}
    for setting in _SETTINGS:
        raw = environ.get(setting.env_name)
        if raw is None:
            continue
        try:
            value = setting.parse(raw)
        except ValueError as exc:
            raise ConfigLoadError(f"{setting.env_name} ({setting.dotted}) {exc}") from exc
        overlay.setdefault(setting.section, {})[setting.key] = value
    return overlay


def _cli_overlay(overrides: Mapping[str, object]) -> dict[str, dict[str, object]]:
    overlay: dict[str, dict[str, object]] = {}
    for dotted, value in overrides.items():
        if value is None:
            continue
        setting = _SETTINGS_BY_KEY.get(dotted)
        if setting is None:
            raise ConfigLoadError(f"unknown setting {dotted!r}")
        overlay.setdefault(setting.section, {})[setting.key] = value
    return overlay


def _absolute_posix(raw: str, base_dir: Path) -> str:
    expanded = os.path.expanduser(os.path.expandvars(raw))
    return Path(os.path.normpath(base_dir / expanded)).as_posix()


__all__ = [
    "ConfigLoadError",
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "dump_effective_config",
    "load_config",
    "normalize_paths",
]
