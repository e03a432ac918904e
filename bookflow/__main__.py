"""Module entrypoint for running Bookflow as ``python -m bookflow``."""

from __future__ import annotations

from bookflow.cli import main


if __name__ == "__main__":
    main()
