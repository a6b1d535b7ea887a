"""``python -m locallibrary`` entry point; starts the catalog server unless a sub-command is given."""
from __future__ import annotations

from .cli import cli

if __name__ == "__main__":
    cli(prog_name="locallibrary")
