"""Process entrypoint for the ``raddict`` console script and ``python -m raddict``."""

from __future__ import annotations

import sys
import traceback
from enum import IntEnum
from typing import TYPE_CHECKING

from raddict.config import ConfigLoadError, ConfigValidationError
from raddict.dictionary.errors import DictionaryError
from raddict.ui.cli import run_cli

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

_INPUT_ERRORS: tuple[type[BaseException], ...] = (
    ConfigLoadError,
    ConfigValidationError,
    DictionaryError,
    FileNotFoundError,
    NotADirectoryError,
    PermissionError,
)


class ExitCode(IntEnum):
    """Process exit codes of the ``raddict`` command."""

    SUCCESS = 0
    NOT_FOUND = 1
    CONFIG_ERROR = 2
    INTERNAL_ERROR = 4


def cli_entrypoint(argv: Sequence[str] | None = None) -> int:
    try:
        return run_cli(argv)
    except SystemExit as exc:
        # argparse exits with 0 for --help and 2 on usage errors.
        if exc.code is None or isinstance(exc.code, int):
            return int(exc.code or 0)
        return int(ExitCode.CONFIG_ERROR)
    except Exception as exc:
        exit_code = exit_code_for(exc)
        if exit_code is ExitCode.INTERNAL_ERROR:
            traceback.print_exception(exc, file=sys.stderr)
        else:
            print(f"error: {exc}", file=sys.stderr)
        return int(exit_code)


def exit_code_for(exc: BaseException) -> ExitCode:
    """``CONFIG_ERROR`` when bad input caused ``exc``, else ``INTERNAL_ERROR``."""
    if any(isinstance(item, _INPUT_ERRORS) for item in _causes(exc)):
        return ExitCode.CONFIG_ERROR
    return ExitCode.INTERNAL_ERROR


def _causes(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        if current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None


__all__ = ["ExitCode", "cli_entrypoint", "exit_code_for"]
