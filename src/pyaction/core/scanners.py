"""
LibCST Scanners used by the ingestion frontend.

- ``dotted_name`` flattens ``Name``/``Attribute`` chains into strings so call
  targets can be matched against the pattern table.
- ``OutermostCallScanner`` finds the calls an arbitrary expression contains,
  without descending into those calls (their arguments are lowered
  separately, preserving nesting).
"""

from typing import List

import libcst as cst


def dotted_name(node: cst.BaseExpression) -> str:
  """
  Recursively resolves a CST Name or Attribute chain to a dot-separated string.

  Args:
    node: Typically a `cst.Name` (e.g., `x`) or `cst.Attribute` (e.g., `x.y`).

  Returns:
    str: The dotted representation (e.g., "pyaction.flags.string").
    Returns an empty string if any link of the chain is not a Name/Attribute.

  Example:
    >>> dotted_name(cst.Attribute(value=cst.Name("flags"), attr=cst.Name("string")))
    'flags.string'
  """
  if isinstance(node, cst.Name):
    return node.value
  if isinstance(node, cst.Attribute):
    base = dotted_name(node.value)
    if not base:
      return ""
    return f"{base}.{node.attr.value}"
  return ""


class OutermostCallScanner(cst.CSTVisitor):
  """
  Collects the outermost ``Call`` nodes below a node, in source order.

  Attributes:
    calls (List[cst.Call]): Calls found so far.
  """

  def __init__(self) -> None:
    self.calls: List[cst.Call] = []

  def visit_Call(self, node: cst.Call) -> bool:
    """Records the call and stops descending into it."""
    self.calls.append(node)
    return False


def outermost_calls(node: cst.CSTNode) -> List[cst.Call]:
  """
  Returns the outermost calls contained in ``node`` (``node`` itself included).

  Args:
    node: Any CST node.

  Returns:
    List[cst.Call]: Calls in source order.
  """
  scanner = OutermostCallScanner()
  node.visit(scanner)
  return scanner.calls
