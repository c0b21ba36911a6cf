"""
Ingestion logic lowering Python source into the analysis tree.

This module parses a script with LibCST and lowers it into the closed node
union of ``pyaction.core.nodes``. Only the shape the analysis needs survives:
statements, their comments, the calls they contain and literal arguments.

Mapping:

1.  **Declaration block**: a paragraph of consecutive simple statements in one
    suite. A blank line or a compound statement ends the paragraph. A comment
    group separated from the first statement by blank lines is the block
    comment.
2.  **Spec**: one small statement. Assignment targets become its names; the
    assigned value, split at a top-level tuple, becomes its values. The
    comment group directly above the statement and its trailing same-line
    comment form the spec comment.
3.  **Compound statements** (``def``, ``if``, ``with``, ...): calls in their
    headers form a comment-less block; their bodies are lowered recursively,
    in document order.
"""

from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Tuple

import libcst as cst
from libcst.metadata import CodeRange, MetadataWrapper, PositionProvider

from pyaction.core.nodes import (
  Argument,
  Call,
  Comment,
  DeclarationBlock,
  Expression,
  Identifier,
  Literal,
  Opaque,
  Position,
  SourceFile,
  Spec,
)
from pyaction.core.scanners import dotted_name, outermost_calls
from pyaction.enums import LiteralKind

ENTRYPOINT_STEMS = ("main", "__main__")


def program_name(path: Path) -> str:
  """
  Derives an action name from a script path.

  Entry points named ``main.py`` / ``__main__.py`` take their directory's
  name; other scripts take their file stem.

  Args:
      path (Path): Script path.

  Returns:
      str: The program name.
  """
  if path.stem in ENTRYPOINT_STEMS:
    parent = path.resolve().parent.name
    if parent:
      return parent
  return path.stem


def parse_source(code: str, filename: str = "<unknown>", module_name: Optional[str] = None) -> SourceFile:
  """
  Parses Python source text and lowers it.

  Args:
      code: Raw source code string.
      filename: File name recorded in positions.
      module_name: Program name. Derived from ``filename`` when None.

  Returns:
      SourceFile: The lowered tree.

  Raises:
      libcst.ParserSyntaxError: If the source is not valid Python.
  """
  wrapper = MetadataWrapper(cst.parse_module(code))
  positions = wrapper.resolve(PositionProvider)
  lowerer = SourceLowerer(wrapper.module, positions, filename)
  name = module_name or program_name(Path(filename))
  return lowerer.lower(name)


class SourceLowerer:
  """
  Converts a position-annotated LibCST module into a ``SourceFile``.

  Attributes:
      module (cst.Module): The module owned by the metadata wrapper.
      filename (str): File name recorded in positions.
  """

  def __init__(self, module: cst.Module, positions: Mapping[cst.CSTNode, CodeRange], filename: str):
    self.module = module
    self.filename = filename
    self._positions = positions

  def lower(self, name: str) -> SourceFile:
    """
    Lowers the whole module.

    Args:
        name: Program name.

    Returns:
        SourceFile: The lowered tree.
    """
    blocks: List[DeclarationBlock] = []
    # LibCST moves the first statement's leading lines into the module header.
    self._lower_statements(self.module.body, blocks, first_leading=self.module.header)
    return SourceFile(
      name=name,
      doc=self.module.get_docstring() or "",
      blocks=tuple(blocks),
      filename=self.filename,
    )

  # --- Statements ---

  def _lower_statements(
    self,
    body: Sequence[cst.BaseStatement],
    blocks: List[DeclarationBlock],
    first_leading: Optional[Sequence[cst.EmptyLine]] = None,
  ) -> None:
    paragraph: List[Tuple[cst.SimpleStatementLine, Sequence[cst.EmptyLine]]] = []

    for index, stmt in enumerate(body):
      leading = stmt.leading_lines
      if index == 0 and first_leading is not None:
        leading = first_leading

      if not isinstance(stmt, cst.SimpleStatementLine):
        self._flush_paragraph(paragraph, blocks)
        self._lower_compound(stmt, blocks)
        continue

      if paragraph and _has_blank_line(leading):
        self._flush_paragraph(paragraph, blocks)
      paragraph.append((stmt, leading))

    self._flush_paragraph(paragraph, blocks)

  def _flush_paragraph(
    self,
    paragraph: List[Tuple[cst.SimpleStatementLine, Sequence[cst.EmptyLine]]],
    blocks: List[DeclarationBlock],
  ) -> None:
    if not paragraph:
      return

    specs: List[Spec] = []
    block_comments: Tuple[Comment, ...] = ()
    for index, (line, leading) in enumerate(paragraph):
      own_comments = self._comment_group(leading)
      if index == 0:
        block_comments = self._detached_comment_group(leading[: len(leading) - len(own_comments)])
      own_comments += self._trailing_comment(line.trailing_whitespace)
      specs.extend(self._lower_small_statements(line.body, own_comments))

    blocks.append(
      DeclarationBlock(
        specs=tuple(specs),
        position=self._position(paragraph[0][0]),
        comments=block_comments,
      )
    )
    paragraph.clear()

  def _lower_small_statements(
    self, statements: Sequence[cst.BaseSmallStatement], comments: Tuple[Comment, ...]
  ) -> List[Spec]:
    specs = []
    for small in statements:
      spec = self._lower_small_statement(small, comments)
      if spec is not None:
        specs.append(spec)
    return specs

  def _lower_small_statement(self, node: cst.BaseSmallStatement, comments: Tuple[Comment, ...]) -> Optional[Spec]:
    names: List[str] = []
    value: Optional[cst.BaseExpression] = None

    if isinstance(node, cst.Assign):
      for target in node.targets:
        names.extend(self._target_names(target.target))
      value = node.value
    elif isinstance(node, (cst.AnnAssign, cst.AugAssign)):
      names.extend(self._target_names(node.target))
      value = node.value
    elif isinstance(node, (cst.Expr, cst.Return)):
      value = node.value
    else:
      # raise, assert, del, ...: keep whatever calls they contain
      calls = outermost_calls(node)
      if not calls:
        return None
      values: Tuple[Expression, ...] = (Opaque(position=self._position(node), calls=self._lower_calls(calls)),)
      return Spec(names=(), values=values, position=self._position(node), comments=comments)

    return Spec(
      names=tuple(names),
      values=self._split_values(value),
      position=self._position(node),
      comments=comments,
    )

  def _lower_compound(self, node: cst.CSTNode, blocks: List[DeclarationBlock]) -> None:
    """
    Lowers a compound statement: header calls first, then each body.

    Children are scanned generically so every statement kind (``if``/``elif``/
    ``else``, ``try``/``except``, ``match``, decorators, default arguments)
    is covered in document order.
    """
    pending: List[cst.Call] = []

    def flush_header() -> None:
      if pending:
        calls = self._lower_calls(pending)
        spec = Spec(names=(), values=tuple(calls), position=calls[0].position)
        blocks.append(DeclarationBlock(specs=(spec,), position=spec.position))
        pending.clear()

    def scan(current: cst.CSTNode) -> None:
      for child in current.children:
        if isinstance(child, cst.IndentedBlock):
          flush_header()
          self._lower_statements(child.body, blocks)
        elif isinstance(child, cst.SimpleStatementSuite):
          flush_header()
          self._lower_one_line_suite(child, blocks)
        elif isinstance(child, cst.BaseExpression):
          pending.extend(outermost_calls(child))
        else:
          scan(child)

    scan(node)
    flush_header()

  def _lower_one_line_suite(self, suite: cst.SimpleStatementSuite, blocks: List[DeclarationBlock]) -> None:
    # `if x: a = f()  # comment`
    comments = self._trailing_comment(suite.trailing_whitespace)
    specs = self._lower_small_statements(suite.body, comments)
    if specs:
      blocks.append(DeclarationBlock(specs=tuple(specs), position=specs[0].position))

  # --- Expressions ---

  def _split_values(self, value: Optional[cst.BaseExpression]) -> Tuple[Expression, ...]:
    if value is None:
      return ()
    if isinstance(value, cst.Tuple):
      return tuple(self._lower_expression(element.value) for element in value.elements)
    return (self._lower_expression(value),)

  def _lower_expression(self, node: cst.BaseExpression) -> Expression:
    position = self._position(node)

    if isinstance(node, (cst.SimpleString, cst.ConcatenatedString)):
      return Literal(literal_kind=LiteralKind.STRING, text=self.module.code_for_node(node), position=position)
    if isinstance(node, cst.Integer):
      return Literal(literal_kind=LiteralKind.INTEGER, text=node.value, position=position)
    if isinstance(node, cst.Float):
      return Literal(literal_kind=LiteralKind.FLOAT, text=node.value, position=position)
    if isinstance(node, cst.UnaryOperation) and isinstance(node.expression, (cst.Integer, cst.Float)):
      if isinstance(node.operator, (cst.Minus, cst.Plus)):
        sign = "-" if isinstance(node.operator, cst.Minus) else ""
        kind = LiteralKind.INTEGER if isinstance(node.expression, cst.Integer) else LiteralKind.FLOAT
        return Literal(literal_kind=kind, text=f"{sign}{node.expression.value}", position=position)
    if isinstance(node, (cst.Name, cst.Attribute)):
      name = dotted_name(node)
      if name:
        return Identifier(name=name, position=position)
    if isinstance(node, cst.Call):
      return self._lower_call(node)

    return Opaque(position=position, calls=self._lower_calls(outermost_calls(node)))

  def _lower_call(self, node: cst.Call) -> Call:
    callee = dotted_name(node.func)
    receiver_calls: Tuple[Call, ...] = ()
    if not callee:
      receiver_calls = self._lower_calls(outermost_calls(node.func))

    args = []
    for arg in node.args:
      if arg.star:
        # *args / **kwargs: opaque, never a literal
        value: Expression = Opaque(position=self._position(arg.value), calls=self._lower_calls(outermost_calls(arg.value)))
        args.append(Argument(value=value))
        continue
      keyword = arg.keyword.value if arg.keyword is not None else None
      args.append(Argument(value=self._lower_expression(arg.value), keyword=keyword))

    return Call(callee=callee, args=tuple(args), position=self._position(node), receiver_calls=receiver_calls)

  def _lower_calls(self, calls: Sequence[cst.Call]) -> Tuple[Call, ...]:
    return tuple(self._lower_call(call) for call in calls)

  def _target_names(self, target: cst.BaseExpression) -> List[str]:
    if isinstance(target, (cst.Tuple, cst.List)):
      names: List[str] = []
      for element in target.elements:
        names.extend(self._target_names(element.value))
      return names
    return [dotted_name(target) or self.module.code_for_node(target)]

  # --- Trivia ---

  def _comment_group(self, lines: Sequence[cst.EmptyLine]) -> Tuple[Comment, ...]:
    """Returns the comment lines directly above a statement (after the last blank line)."""
    group: List[Comment] = []
    for line in reversed(lines):
      if line.comment is None:
        break
      group.append(self._comment(line.comment))
    return tuple(reversed(group))

  def _detached_comment_group(self, lines: Sequence[cst.EmptyLine]) -> Tuple[Comment, ...]:
    """Returns the comment group that ends at the blank lines above a paragraph."""
    end = len(lines)
    while end and lines[end - 1].comment is None:
      end -= 1
    if end == len(lines):
      return ()
    return self._comment_group(lines[:end])

  def _trailing_comment(self, whitespace: cst.TrailingWhitespace) -> Tuple[Comment, ...]:
    if whitespace.comment is None:
      return ()
    return (self._comment(whitespace.comment),)

  def _comment(self, comment: cst.Comment) -> Comment:
    return Comment(text=comment.value, position=self._position(comment))

  def _position(self, node: cst.CSTNode) -> Position:
    code_range = self._positions[node]
    return Position(file=self.filename, line=code_range.start.line, column=code_range.start.column + 1)


def _has_blank_line(lines: Sequence[cst.EmptyLine]) -> bool:
  return any(line.comment is None for line in lines)
