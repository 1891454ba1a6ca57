"""Module entrypoint for ``python -m typed_transform``."""

from __future__ import annotations

from typed_transform.cli import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
