"""CLI entry point: python -m uitypes."""

import sys

from uitypes.cli import main

if __name__ == "__main__":
    sys.exit(main())
