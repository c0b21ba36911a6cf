"""
Tests for docstring synopsis extraction.
"""

import pytest

from pyaction.utils.docstrings import synopsis


@pytest.mark.parametrize(
  "text, expected",
  [
    ("", ""),
    ("   \n  ", ""),
    ("Greets the world. Then exits.", "Greets the world."),
    ("Greets the\n  world.\n\nSecond paragraph.", "Greets the world."),
    ("No period at all", "No period at all"),
    ("Written by J. Doe for fun. More.", "Written by J. Doe for fun."),
    ("Uses the API. NOT this.", "Uses the API."),
    ("Version 1.2 is out. Yes.", "Version 1.2 is out."),
  ],
)
def test_synopsis(text, expected):
  assert synopsis(text) == expected
