"""
Enumerations for pyaction.

This module defines the closed sets of tags used across the codebase:
node kinds of the lowered source tree, literal domains, input kinds and
analysis error codes.
"""

from enum import Enum


class NodeKind(str, Enum):
  """
  Tags of the lowered source tree union.

  The Tree Walker dispatches on these values explicitly instead of
  inspecting node classes at runtime.
  """

  SOURCE_FILE = "source_file"
  BLOCK = "block"
  SPEC = "spec"
  CALL = "call"
  IDENTIFIER = "identifier"
  LITERAL = "literal"
  OPAQUE = "opaque"  # Any other expression; only its nested calls are kept


class LiteralKind(str, Enum):
  """
  Lexical category of a literal expression.
  """

  STRING = "string"
  INTEGER = "integer"
  FLOAT = "float"


class InputKind(str, Enum):
  """
  Where an action input is sourced from at invocation time.
  """

  FLAG = "flag"  # Command line argument
  ENVIRONMENT = "env"  # Environment variable


class ValueDomain(str, Enum):
  """
  Expected domain of a declaration's default literal.
  """

  STRING = "string"
  INTEGER = "integer"
  BOOLEAN = "boolean"


class ErrorKind(str, Enum):
  """
  Machine readable codes of fatal analysis errors.
  """

  SYNTAX = "syntax"
  FORBIDDEN_PATTERN = "forbidden_pattern"
  ANNOTATION_CONFLICT = "annotation_conflict"
  DUPLICATE_DECLARATION = "duplicate_declaration"
