"""
Documentation Text Helpers.

Derives the one-line synopsis of a module docstring, which becomes the
description of a generated action.
"""

import re

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def synopsis(text: str) -> str:
  """
  Returns the first sentence of the first paragraph of ``text``.

  Whitespace is collapsed to single spaces. A sentence ends at a period
  followed by a space, unless the period follows a lone capital letter
  (an initial, as in ``J. Doe``).

  Args:
      text (str): Raw documentation text.

  Returns:
      str: The synopsis, or an empty string.

  Example:
      >>> synopsis("Greets the world. Then exits.")
      'Greets the world.'
  """
  stripped = text.strip()
  if not stripped:
    return ""

  paragraph = _PARAGRAPH_BREAK.split(stripped, maxsplit=1)[0]
  collapsed = " ".join(paragraph.split())
  return collapsed[: _first_sentence_len(collapsed)]


def _first_sentence_len(text: str) -> int:
  before_prev, prev, last = "", "", ""
  for i, char in enumerate(text):
    if char == " " and last == "." and (not prev.isupper() or before_prev.isupper()):
      return i
    before_prev, prev, last = prev, last, char
  return len(text)
