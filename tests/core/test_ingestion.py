"""
Tests for the LibCST ingestion frontend.

Verifies that:
1.  Paragraphs of simple statements become declaration blocks.
2.  Block and spec comments are attached to the right nodes.
3.  Expressions lower to the closed node union with 1-based positions.
4.  Compound statements are lowered recursively, headers first.
5.  Program names are derived from script paths.
"""

from pathlib import Path

import libcst as cst
import pytest

from pyaction.core.ingestion import parse_source, program_name
from pyaction.core.nodes import Position
from pyaction.core.scanners import dotted_name
from pyaction.enums import LiteralKind, NodeKind


def test_module_docstring_and_name():
  source = parse_source('"""Doc text."""\n', filename="tool.py")
  assert source.doc == "Doc text."
  assert source.name == "tool"
  assert source.filename == "tool.py"


def test_paragraphs_split_on_blank_lines():
  code = """a = 1
b = 2

c = 3
"""
  source = parse_source(code, filename="main.py", module_name="m")
  assert [len(block.specs) for block in source.blocks] == [2, 1]
  assert [spec.names for spec in source.blocks[0].specs] == [("a",), ("b",)]


def test_detached_comment_is_block_comment():
  code = """x = 0

# block comment

# first
a = 1  # trailing
# spec comment
b = 2
"""
  source = parse_source(code, filename="main.py", module_name="m")
  block = source.blocks[1]
  assert [c.text for c in block.comments] == ["# block comment"]
  assert [c.text for c in block.specs[0].comments] == ["# first", "# trailing"]
  assert [c.text for c in block.specs[1].comments] == ["# spec comment"]
  assert block.comments[0].position == Position("main.py", 3, 1)


def test_comment_above_first_statement_belongs_to_it():
  code = """#!/usr/bin/env python

# first
a = 1
b = 2
"""
  block = parse_source(code, filename="main.py", module_name="m").blocks[0]
  assert [c.text for c in block.comments] == ["#!/usr/bin/env python"]
  assert [c.text for c in block.specs[0].comments] == ["# first"]
  assert block.specs[1].comments == ()


def test_comment_group_stops_at_blank_line():
  code = """x = 0

# far

# detached

# attached
a = 1
"""
  source = parse_source(code, filename="main.py", module_name="m")
  block = source.blocks[1]
  assert [c.text for c in block.comments] == ["# detached"]
  assert [c.text for c in block.specs[0].comments] == ["# attached"]


def test_call_lowering():
  code = 'v = flags.string("v", -1, usage=True)\n'
  source = parse_source(code, filename="main.py", module_name="m")
  spec = source.blocks[0].specs[0]
  call = spec.values[0]

  assert call.kind == NodeKind.CALL
  assert call.callee == "flags.string"
  assert call.position == Position("main.py", 1, 5)

  name, default, usage = call.args
  assert name.value.literal_kind == LiteralKind.STRING
  assert name.value.text == '"v"'
  assert default.value.literal_kind == LiteralKind.INTEGER
  assert default.value.text == "-1"
  assert usage.keyword == "usage"
  assert usage.value.kind == NodeKind.IDENTIFIER
  assert usage.value.name == "True"


def test_receiver_calls():
  code = 'v = action.getenv("v", "", "u").strip().lower()\n'
  call = parse_source(code, filename="main.py", module_name="m").blocks[0].specs[0].values[0]
  assert call.callee == ""
  assert len(call.receiver_calls) == 1
  inner = call.receiver_calls[0]
  assert inner.callee == ""
  assert inner.receiver_calls[0].callee == "action.getenv"


def test_opaque_keeps_outermost_calls():
  code = "v = [f(g(1)), h()]\n"
  value = parse_source(code, filename="main.py", module_name="m").blocks[0].specs[0].values[0]
  assert value.kind == NodeKind.OPAQUE
  assert [c.callee for c in value.calls] == ["f", "h"]
  assert value.calls[0].args[0].value.callee == "g"


def test_star_arguments_are_opaque():
  code = "f(*args, **kwargs)\n"
  call = parse_source(code, filename="main.py", module_name="m").blocks[0].specs[0].values[0]
  assert [arg.value.kind for arg in call.args] == [NodeKind.OPAQUE, NodeKind.OPAQUE]


def test_compound_statement_order():
  code = """def main(x=first()):
    inside()

with second() as s:
    third()
"""
  source = parse_source(code, filename="main.py", module_name="m")
  callees = [value.callee for block in source.blocks for spec in block.specs for value in spec.values]
  assert callees == ["first", "inside", "second", "third"]


def test_one_line_suite():
  code = "if x: a = f()  # pyaction:skip\n"
  source = parse_source(code, filename="main.py", module_name="m")
  spec = source.blocks[0].specs[0]
  assert spec.names == ("a",)
  assert [c.text for c in spec.comments] == ["# pyaction:skip"]


def test_syntax_error_propagates():
  with pytest.raises(cst.ParserSyntaxError):
    parse_source("a = (\n", filename="main.py")


def test_program_name(tmp_path):
  project = tmp_path / "greeter"
  project.mkdir()
  assert program_name(project / "main.py") == "greeter"
  assert program_name(project / "__main__.py") == "greeter"
  assert program_name(Path("tools/release.py")) == "release"


def test_dotted_name():
  assert dotted_name(cst.parse_expression("a.b.c")) == "a.b.c"
  assert dotted_name(cst.parse_expression("a().b")) == ""
