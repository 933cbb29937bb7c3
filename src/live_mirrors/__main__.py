"""
Entry point for module execution (``python -m live_mirrors``).

This module delegates execution to the CLI handler in ``live_mirrors.cli.__main__``.
"""

import sys
from live_mirrors.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
