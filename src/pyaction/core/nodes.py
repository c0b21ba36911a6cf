"""
Lowered Source Tree Nodes.

This module defines the closed set of node types the analysis core consumes.
The ingestion frontend lowers a LibCST module into these structures; the
Tree Walker never sees LibCST nodes.

Hierarchy::

    SourceFile -> DeclarationBlock -> Spec -> Expression
    Expression := Call | Identifier | Literal | Opaque

Every node carries a ``kind`` tag (``NodeKind``) so consumers can dispatch
over the union explicitly. All nodes are immutable.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from pyaction.enums import LiteralKind, NodeKind


@dataclass(frozen=True)
class Position:
  """
  A location in a source file, used for diagnostics.

  Attributes:
      file (str): The file name the node was parsed from.
      line (int): 1-based line number.
      column (int): 1-based column number.
  """

  file: str
  line: int
  column: int

  def __str__(self) -> str:
    return f"{self.file}:{self.line}:{self.column}"


@dataclass(frozen=True)
class Comment:
  """One comment line, with the leading ``#`` kept."""

  text: str
  position: Position


@dataclass(frozen=True)
class Literal:
  """
  A literal expression kept in its source spelling.

  Attributes:
      literal_kind (LiteralKind): Lexical category.
      text (str): Source text (string literals keep their quotes).
  """

  literal_kind: LiteralKind
  text: str
  position: Position
  kind: NodeKind = field(default=NodeKind.LITERAL, init=False)


@dataclass(frozen=True)
class Identifier:
  """A bare or dotted name (e.g. ``True``, ``opts``, ``os.environ``)."""

  name: str
  position: Position
  kind: NodeKind = field(default=NodeKind.IDENTIFIER, init=False)


@dataclass(frozen=True)
class Argument:
  """
  A call argument.

  Attributes:
      value: The lowered argument expression.
      keyword: The keyword name for ``key=value`` arguments, else None.
  """

  value: "Expression"
  keyword: Optional[str] = None


@dataclass(frozen=True)
class Call:
  """
  A call expression.

  Attributes:
      callee (str): Dotted name of the called object (e.g. ``flags.string``).
          Empty when the callee is not a name chain (e.g. ``f()()``).
      args (Tuple[Argument, ...]): Arguments in source order.
      receiver_calls (Tuple[Call, ...]): Calls inside a callee that is not a
          plain name chain, e.g. the ``getenv`` call in ``getenv(...).strip()``.
  """

  callee: str
  args: Tuple[Argument, ...]
  position: Position
  receiver_calls: Tuple["Call", ...] = ()
  kind: NodeKind = field(default=NodeKind.CALL, init=False)


@dataclass(frozen=True)
class Opaque:
  """
  Any expression without meaning to the analysis.

  Only the outermost calls found inside it are kept, so traversal can still
  reach declarations wrapped in lists, comprehensions, operators and so on.
  """

  position: Position
  calls: Tuple[Call, ...] = ()
  kind: NodeKind = field(default=NodeKind.OPAQUE, init=False)


Expression = Union[Call, Identifier, Literal, Opaque]


@dataclass(frozen=True)
class Spec:
  """
  One binding statement: zero or more names bound to one or more values.

  ``a, b = flags.string(...), flags.string(...)`` is a single spec with two
  names and two values. Bare expression statements have no names.
  """

  names: Tuple[str, ...]
  values: Tuple[Expression, ...]
  position: Position
  comments: Tuple[Comment, ...] = ()
  kind: NodeKind = field(default=NodeKind.SPEC, init=False)


@dataclass(frozen=True)
class DeclarationBlock:
  """A group of specs sharing one leading comment."""

  specs: Tuple[Spec, ...]
  position: Position
  comments: Tuple[Comment, ...] = ()
  kind: NodeKind = field(default=NodeKind.BLOCK, init=False)


@dataclass(frozen=True)
class SourceFile:
  """
  Root of a lowered source file.

  Attributes:
      name (str): Name of the program (becomes the manifest name).
      doc (str): Module documentation text (becomes the manifest description).
      blocks: Declaration blocks in document order.
      filename (str): File the source was read from.
  """

  name: str
  doc: str
  blocks: Tuple[DeclarationBlock, ...]
  filename: str = "<unknown>"
  kind: NodeKind = field(default=NodeKind.SOURCE_FILE, init=False)
