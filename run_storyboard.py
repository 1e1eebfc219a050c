"""
run_storyboard.py: CLI entry point

Forwards to the command-line interface in
`src/storyboard_grid/cli.py` so the tool runs from a checkout without
installing the package.

Usage:
    python run_storyboard.py plan --scenes 12 --aspect 16:9
    python run_storyboard.py split --image sheet.png --scenes 9 --out panels

For help on available options, run:
    python run_storyboard.py --help
"""
import sys
# Source code in src/ subdirectory
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

import storyboard_grid.cli as sg_cli

if __name__ == "__main__":
    sys.exit(sg_cli.main())
