"""Entry point for ``python -m dumpviewer``."""

import sys

from dumpviewer.cli import main

if __name__ == "__main__":
    sys.exit(main())
