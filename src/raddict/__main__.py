"""Module entrypoint for ``python -m raddict``."""

from __future__ import annotations

from raddict.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
