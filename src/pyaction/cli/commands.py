"""
CLI Command Handlers Facade.

Re-exports the handlers of `pyaction.cli.handlers` so the entry point and
tests patch a single module.
"""

from pyaction.cli.handlers.generate import handle_generate
from pyaction.cli.handlers.publish import handle_publish

__all__ = [
  "handle_generate",
  "handle_publish",
]
