"""Module entrypoint for running albumscript as ``python -m albumscript``."""

from __future__ import annotations

from albumscript.cli import main


if __name__ == "__main__":
    main()
