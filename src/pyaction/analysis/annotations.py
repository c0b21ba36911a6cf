"""
Annotation Directive Parser.

Directives are comment lines attached to a declaration (or to a block of
declarations) that adjust the inputs extracted from it::

    # pyaction:required
    # pyaction:skip
    # pyaction:default <text>
    # pyaction:description <text>

One directive per line. The marker is case-sensitive and no space may follow
the colon. Unrecognized lines are ignored. When a directive repeats inside one
comment group, the last occurrence wins.
"""

import re
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Pattern

from pyaction.core.nodes import Comment, Position

DEFAULT_PREFIX = "pyaction"


@dataclass(frozen=True)
class AnnotationSet:
  """
  Directives parsed from one comment group, or merged from several.

  Attributes:
      required (bool): Input must be supplied by the workflow.
      skip (bool): Declaration is excluded from the manifest.
      default_override (Optional[str]): Default text to apply.
      description_override (Optional[str]): Description text to apply.
      default_position (Optional[Position]): Where ``default`` was written.
      description_position (Optional[Position]): Where ``description`` was written.
  """

  required: bool = False
  skip: bool = False
  default_override: Optional[str] = None
  description_override: Optional[str] = None
  default_position: Optional[Position] = None
  description_position: Optional[Position] = None

  def merge(self, inner: "AnnotationSet") -> "AnnotationSet":
    """
    Combines an enclosing (block level) set with a nested (spec level) set.

    Booleans OR-combine. String overrides of ``inner`` replace those of
    ``self`` when they are non-empty.

    Args:
        inner (AnnotationSet): The more specific annotation set.

    Returns:
        AnnotationSet: The merged set.
    """
    merged = replace(self, required=self.required or inner.required, skip=self.skip or inner.skip)
    if inner.default_override:
      merged = replace(merged, default_override=inner.default_override, default_position=inner.default_position)
    if inner.description_override:
      merged = replace(
        merged,
        description_override=inner.description_override,
        description_position=inner.description_position,
      )
    return merged


EMPTY_ANNOTATIONS = AnnotationSet()


class AnnotationParser:
  """
  Parses comment groups into ``AnnotationSet`` values.

  Attributes:
      prefix (str): The directive marker (``pyaction`` by default).
  """

  def __init__(self, prefix: str = DEFAULT_PREFIX):
    self.prefix = prefix
    marker = re.escape(prefix)
    self._required: Pattern[str] = re.compile(rf"^#\s*{marker}:required$")
    self._skip: Pattern[str] = re.compile(rf"^#\s*{marker}:skip$")
    self._default: Pattern[str] = re.compile(rf"^#\s*{marker}:default (.*)$")
    self._description: Pattern[str] = re.compile(rf"^#\s*{marker}:description (.*)$")

  def parse(self, comments: Iterable[Comment]) -> AnnotationSet:
    """
    Parses the directives found in a comment group.

    Args:
        comments: Comment lines in source order.

    Returns:
        AnnotationSet: The directives found, EMPTY_ANNOTATIONS when none.
    """
    result = EMPTY_ANNOTATIONS
    for comment in comments:
      text = comment.text
      if self._required.match(text):
        result = replace(result, required=True)
        continue
      if self._skip.match(text):
        result = replace(result, skip=True)
        continue

      default_match = self._default.match(text)
      if default_match:
        result = replace(result, default_override=default_match.group(1), default_position=comment.position)
        continue

      desc_match = self._description.match(text)
      if desc_match:
        result = replace(result, description_override=desc_match.group(1), description_position=comment.position)
    return result


def parse_annotations(comments: Iterable[Comment], prefix: str = DEFAULT_PREFIX) -> AnnotationSet:
  """
  Parses a comment group with a one-off parser.

  Args:
      comments: Comment lines in source order.
      prefix: The directive marker.

  Returns:
      AnnotationSet: Parsed directives.
  """
  return AnnotationParser(prefix).parse(comments)
