"""
Tests for the Annotation Directive Parser.

Verifies that:
1.  Each directive is recognized, with optional spaces after '#'.
2.  Malformed directives (space after colon, wrong case) are ignored.
3.  Repeated directives: the last occurrence wins.
4.  Block/spec merging OR-combines flags and lets inner overrides win.
5.  The directive prefix is configurable.
"""

from pyaction.analysis.annotations import EMPTY_ANNOTATIONS, AnnotationParser, AnnotationSet, parse_annotations
from pyaction.core.nodes import Comment, Position


def comments(*lines):
  return [Comment(text=line, position=Position("main.py", i + 1, 1)) for i, line in enumerate(lines)]


def test_empty_group_yields_empty_set():
  assert parse_annotations([]) == EMPTY_ANNOTATIONS


def test_required_and_skip():
  result = parse_annotations(comments("# pyaction:required", "#pyaction:skip"))
  assert result.required is True
  assert result.skip is True


def test_default_and_description_capture_text():
  result = parse_annotations(comments("# pyaction:default hello world", "# pyaction:description Path to scan."))
  assert result.default_override == "hello world"
  assert result.description_override == "Path to scan."
  assert result.default_position == Position("main.py", 1, 1)
  assert result.description_position == Position("main.py", 2, 1)


def test_unrecognized_lines_are_ignored():
  result = parse_annotations(
    comments(
      "# Just a regular comment.",
      "# pyaction: required",
      "# PyAction:skip",
      "# pyaction:requiredly",
      "# pyaction:unknown thing",
    )
  )
  assert result == EMPTY_ANNOTATIONS


def test_last_occurrence_wins():
  result = parse_annotations(comments("# pyaction:default one", "# pyaction:default two"))
  assert result.default_override == "two"
  assert result.default_position.line == 2


def test_merge_or_combines_booleans():
  outer = AnnotationSet(required=True)
  inner = AnnotationSet(skip=True)
  merged = outer.merge(inner)
  assert merged.required is True
  assert merged.skip is True


def test_merge_inner_override_wins():
  pos_outer = Position("main.py", 1, 1)
  pos_inner = Position("main.py", 5, 1)
  outer = AnnotationSet(description_override="outer", description_position=pos_outer)
  inner = AnnotationSet(description_override="inner", description_position=pos_inner)

  merged = outer.merge(inner)

  assert merged.description_override == "inner"
  assert merged.description_position == pos_inner


def test_merge_keeps_outer_override_when_inner_empty():
  outer = AnnotationSet(default_override="x", default_position=Position("main.py", 1, 1))
  assert outer.merge(EMPTY_ANNOTATIONS) == outer


def test_custom_prefix():
  parser = AnnotationParser("action")
  assert parser.parse(comments("# action:required")).required is True
  assert parser.parse(comments("# pyaction:required")).required is False
