"""Run the CLI from a checkout without installing: `python main.py workspaces`."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from cli.main import run  # noqa: E402

if __name__ == "__main__":
    run()
