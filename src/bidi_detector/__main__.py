"""Allow ``python -m bidi_detector``."""

import sys

from bidi_detector.cli import main

if __name__ == "__main__":
    sys.exit(main())
