"""Main entry point for the bidi-detector CLI when run as a module."""

import sys

from bidi_detector.cli import main

if __name__ == "__main__":
    sys.exit(main())
