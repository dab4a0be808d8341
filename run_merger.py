"""
run_merger.py: CLI entry point

Forwards execution to the command-line interface defined in
`src/image_merger/cli.py`, so the tool can be run from a checkout
without installing the package or editing PYTHONPATH.

Usage:
    python run_merger.py a.png b.png c.png [options]

For help on available options, run:
    python run_merger.py --help
"""
import sys
# Source code in src/ subdirectory
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

import image_merger.cli as im_cli

if __name__ == "__main__":
    raise SystemExit(im_cli.main())
