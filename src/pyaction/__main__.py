"""
Entry point for module execution (``python -m pyaction``).

This module delegates execution to the CLI handler in ``pyaction.cli.__main__``.
"""

import sys

from pyaction.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
