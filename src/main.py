"""`python -m main` desde `src/`: la CLI sin instalar el paquete."""

from __future__ import annotations

import sys

from cli.main import run


def _force_utf8_streams() -> None:
    # Consolas cp1252: nombres con acentos y nombres nativos no latinos.
    for stream in (sys.stdout, sys.stderr):
        stream.reconfigure(encoding="utf-8")  # type: ignore[union-attr]


if __name__ == "__main__":
    if sys.platform == "win32":
        _force_utf8_streams()
    run()
