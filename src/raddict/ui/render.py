"""Human-readable output for the raddict CLI.

Headings are bold on a terminal unless ``NO_COLOR`` or ``--no-color`` is set.
Bytes that were not valid UTF-8 in a dictionary are shown as ``\\xNN``.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING, TextIO

from raddict.domain.models import NAME_ENCODING, NAME_ERRORS

if TYPE_CHECKING:
    from collections.abc import Sequence

_BOLD = "\033[1m"
_RESET = "\033[0m"


def displayable(text: str) -> str:
    """Replace surrogate-escaped bytes in ``text`` with ``\\xNN`` escapes."""
    return text.encode(NAME_ENCODING, NAME_ERRORS).decode(NAME_ENCODING, "backslashreplace")


class CLIRenderer:
    """Writes labelled lines for the ``check``, ``lookup`` and ``config`` commands."""

    def __init__(
        self, *, bold: bool = False, verbose: bool = False, stream: TextIO | None = None
    ) -> None:
        self.verbose = verbose
        self._bold = bold
        self._stream = stream

    def heading(self, text: str) -> None:
        self._write(f"{_BOLD}{text}{_RESET}" if self._bold else text)

    def kv(self, key: str, value: object) -> None:
        self._write(f"{key}: {value}")

    def text(self, line: str) -> None:
        self._write(line)

    def section(self, title: str) -> None:
        self._write(f"\n{title}")

    def warning(self, text: str) -> None:
        self._write(f"  Warning: {text}")

    def items(self, entries: Sequence[str], *, prefix: str = "- ") -> None:
        for entry in entries:
            self._write(f"  {prefix}{entry}")

    def _write(self, line: str) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(displayable(line) + "\n")


def create_renderer(*, no_color: bool = False, verbose: bool = False) -> CLIRenderer:
    """Renderer for stdout; bold headings only on a terminal with color allowed."""

    bold = (
        not no_color
        and not os.environ.get("NO_COLOR")
        and hasattr(sys.stdout, "isatty")
        and sys.stdout.isatty()
    )
    return CLIRenderer(bold=bold, verbose=verbose)


__all__ = ["CLIRenderer", "create_renderer", "displayable"]
