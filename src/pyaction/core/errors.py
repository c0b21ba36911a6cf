"""
Fatal Analysis Errors.

Every error aborts the current analysis run. Each carries the ``Position``
of the offending construct so the caller can report ``file:line:col``.
"""

from typing import Optional

from pyaction.core.nodes import Position
from pyaction.enums import ErrorKind


class AnalysisError(Exception):
  """
  Base class for errors raised while analyzing a source tree.

  Attributes:
      message (str): Human readable description.
      position (Optional[Position]): Where the error was detected.
      kind (ErrorKind): Machine readable error code.
  """

  kind: ErrorKind = ErrorKind.SYNTAX

  def __init__(self, message: str, position: Optional[Position] = None):
    super().__init__(message)
    self.message = message
    self.position = position

  def __str__(self) -> str:
    if self.position is None:
      return self.message
    return f"{self.position}: {self.message}"


class DeclarationSyntaxError(AnalysisError):
  """
  An argument of a recognized call is neither a literal nor a boolean
  identifier, or its literal does not parse in the expected domain.
  """

  kind = ErrorKind.SYNTAX


class ForbiddenPatternError(AnalysisError):
  """
  A direct environment read that bypasses ``action.getenv``.

  Inside an action, inputs are exposed as ``INPUT_<NAME>`` variables, so a
  plain ``os.getenv("name")`` silently reads nothing.
  """

  kind = ErrorKind.FORBIDDEN_PATTERN


class AnnotationConflictError(AnalysisError):
  """An annotation overrides a field the call already supplies inline."""

  kind = ErrorKind.ANNOTATION_CONFLICT


class DuplicateDeclarationError(AnalysisError):
  """An input or output name is declared more than once."""

  kind = ErrorKind.DUPLICATE_DECLARATION
