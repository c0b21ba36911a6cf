from .generate import handle_generate, resolve_script
from .publish import handle_publish

__all__ = [
  "handle_generate",
  "handle_publish",
  "resolve_script",
]
