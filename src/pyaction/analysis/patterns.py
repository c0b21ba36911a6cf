"""
Call-Pattern Recognizer.

This module classifies call expressions as input/output declarations. The set
of recognized calls is a registration table: each entry maps a dotted callee
name to its parameter layout and a typed handler producing a ``Declaration``.
Adding a declaration shape is a single ``register_pattern`` entry.

Recognized shapes:

- ``flags.string|integer|boolean(name, default, usage)``: flag inputs.
- ``flags.string_var|integer_var|boolean_var(dest, name, default, usage)``:
  flag inputs bound to a destination object.
- ``action.getenv(name, default, usage)``: environment inputs.
- ``action.output(name, value, usage)``: outputs.
- ``os.getenv(...)`` / ``os.environ.get(...)``: always rejected. Inside an
  action, inputs are exposed as ``INPUT_<NAME>`` variables, so the plain
  accessor would silently read nothing at runtime.

A leading ``pyaction.`` in the callee is ignored.
"""

import ast
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple, Union

from pyaction.core.errors import AnalysisError, DeclarationSyntaxError, ForbiddenPatternError
from pyaction.core.manifest import DefaultValue, InputRecord, OutputRecord
from pyaction.core.nodes import Call, Expression, Position
from pyaction.enums import InputKind, LiteralKind, NodeKind, ValueDomain

PACKAGE_PREFIX = "pyaction."

BOOLEAN_IDENTIFIERS: Dict[str, bool] = {"True": True, "False": False}

DIRECT_PARAMS: Tuple[str, ...] = ("name", "default", "usage")
POINTER_PARAMS: Tuple[str, ...] = ("dest", "name", "default", "usage")
OUTPUT_PARAMS: Tuple[str, ...] = ("name", "value", "usage")


@dataclass(frozen=True)
class Declaration:
  """
  A record extracted from a recognized call.

  Attributes:
      record: The extracted input or output.
      position: Position of the declaring call.
  """

  record: Union[InputRecord, OutputRecord]
  position: Position

  @property
  def is_output(self) -> bool:
    return isinstance(self.record, OutputRecord)


@dataclass(frozen=True)
class BoundCall:
  """Arguments of a call bound to the parameter names of its pattern."""

  call: Call
  arguments: Dict[str, Expression]

  def __getitem__(self, param: str) -> Expression:
    return self.arguments[param]


PatternHandler = Callable[[BoundCall], Declaration]


@dataclass(frozen=True)
class PatternSpec:
  """
  A registered call signature.

  Attributes:
      callee (str): Canonical dotted name.
      params (Tuple[str, ...]): Parameter names, in positional order.
      handler (PatternHandler): Builds the declaration from bound arguments.
      variadic (bool): Accept any arguments without binding them.
  """

  callee: str
  params: Tuple[str, ...]
  handler: PatternHandler
  variadic: bool = False


@dataclass(frozen=True)
class Recognition:
  """
  Outcome of classifying one call.

  Exactly one of the states holds: not recognized (both fields None),
  recognized (``declaration`` set) or failed (``error`` set).
  """

  declaration: Optional[Declaration] = None
  error: Optional[AnalysisError] = None

  @property
  def recognized(self) -> bool:
    return self.declaration is not None


NOT_RECOGNIZED = Recognition()

# Global Registry
_PATTERNS: Dict[str, PatternSpec] = {}


def register_pattern(
  callee: str, params: Tuple[str, ...], variadic: bool = False
) -> Callable[[PatternHandler], PatternHandler]:
  """
  Decorator registering a handler for a call signature.

  Args:
      callee: Canonical dotted callee name (without the ``pyaction.`` prefix).
      params: Parameter names bound positionally, then by keyword.
      variadic: If True, arguments are passed through unbound.
  """

  def decorator(func: PatternHandler) -> PatternHandler:
    _PATTERNS[callee] = PatternSpec(callee=callee, params=params, handler=func, variadic=variadic)
    return func

  return decorator


def get_pattern(callee: str) -> Optional[PatternSpec]:
  """Retrieves the pattern registered for a (possibly prefixed) callee."""
  return _PATTERNS.get(canonical_callee(callee))


def registered_patterns() -> List[str]:
  """Returns the canonical names of all registered patterns, sorted."""
  return sorted(_PATTERNS)


def canonical_callee(callee: str) -> str:
  """
  Strips the package prefix from a dotted callee.

  Args:
      callee: e.g. ``pyaction.flags.string``.

  Returns:
      str: e.g. ``flags.string``.
  """
  if callee.startswith(PACKAGE_PREFIX):
    return callee[len(PACKAGE_PREFIX) :]
  return callee


def recognize(call: Call) -> Recognition:
  """
  Classifies a call expression.

  Args:
      call: The lowered call.

  Returns:
      Recognition: NOT_RECOGNIZED, a declaration, or the fatal error.
  """
  spec = get_pattern(call.callee)
  if spec is None:
    return NOT_RECOGNIZED

  try:
    if spec.variadic:
      bound = BoundCall(call=call, arguments={})
    else:
      bound = bind_arguments(call, spec.params)
    return Recognition(declaration=spec.handler(bound))
  except AnalysisError as e:
    return Recognition(error=e)


def bind_arguments(call: Call, params: Tuple[str, ...]) -> BoundCall:
  """
  Binds call arguments to parameter names.

  Positional arguments bind left to right, keyword arguments by name.

  Args:
      call: The call to bind.
      params: Parameter names in positional order.

  Returns:
      BoundCall: The bound arguments.

  Raises:
      DeclarationSyntaxError: On surplus, unknown, duplicate or missing arguments.
  """
  bound: Dict[str, Expression] = {}
  positional = [arg for arg in call.args if arg.keyword is None]

  if len(positional) > len(params):
    raise DeclarationSyntaxError(
      f"{call.callee}() takes {len(params)} arguments but {len(positional)} were given",
      call.position,
    )

  for param, arg in zip(params, positional):
    bound[param] = arg.value

  for arg in call.args:
    if arg.keyword is None:
      continue
    if arg.keyword not in params:
      raise DeclarationSyntaxError(f"{call.callee}() got an unexpected keyword '{arg.keyword}'", arg.value.position)
    if arg.keyword in bound:
      raise DeclarationSyntaxError(f"{call.callee}() got multiple values for '{arg.keyword}'", arg.value.position)
    bound[arg.keyword] = arg.value

  for param in params:
    if param not in bound:
      raise DeclarationSyntaxError(f"{call.callee}() is missing argument '{param}'", call.position)

  return BoundCall(call=call, arguments=bound)


def string_value(expr: Expression) -> str:
  """
  Extracts the unquoted value of a string literal.

  Raises:
      DeclarationSyntaxError: If ``expr`` is not a string literal.
  """
  if expr.kind == NodeKind.LITERAL and expr.literal_kind == LiteralKind.STRING:
    try:
      value = ast.literal_eval(expr.text)
    except (ValueError, SyntaxError):
      value = None
    if isinstance(value, str):
      return value
  raise _rejection(expr, "a string literal")


def integer_value(expr: Expression) -> int:
  """
  Extracts a decimal integer literal.

  Raises:
      DeclarationSyntaxError: If ``expr`` is not a decimal integer literal.
  """
  if expr.kind == NodeKind.LITERAL and expr.literal_kind == LiteralKind.INTEGER:
    try:
      return int(expr.text)
    except ValueError:
      raise DeclarationSyntaxError(f"invalid integer literal: {expr.text}", expr.position)
  raise _rejection(expr, "an integer literal")


def boolean_value(expr: Expression) -> bool:
  """
  Extracts a boolean identifier (``True`` / ``False``).

  Raises:
      DeclarationSyntaxError: If ``expr`` is not a boolean identifier.
  """
  if expr.kind == NodeKind.IDENTIFIER and expr.name in BOOLEAN_IDENTIFIERS:
    return BOOLEAN_IDENTIFIERS[expr.name]
  raise _rejection(expr, "True or False")


def default_value(expr: Expression, domain: ValueDomain) -> Optional[DefaultValue]:
  """
  Extracts a default literal in the given domain.

  An empty string literal means "no default" and yields None.
  """
  if domain == ValueDomain.INTEGER:
    return integer_value(expr)
  if domain == ValueDomain.BOOLEAN:
    return boolean_value(expr)
  return string_value(expr) or None


def _rejection(expr: Expression, expected: str) -> DeclarationSyntaxError:
  """Builds the syntax error describing why ``expr`` cannot be extracted."""
  if expr.kind == NodeKind.IDENTIFIER and expr.name not in BOOLEAN_IDENTIFIERS:
    return DeclarationSyntaxError(f"unsupported identifier: {expr.name}", expr.position)
  if expr.kind == NodeKind.LITERAL:
    return DeclarationSyntaxError(f"expected {expected}, got {expr.text}", expr.position)
  if expr.kind == NodeKind.IDENTIFIER:
    return DeclarationSyntaxError(f"expected {expected}, got {expr.name}", expr.position)
  return DeclarationSyntaxError(f"unsupported expression, expected {expected}", expr.position)


def _input(args: BoundCall, kind: InputKind, domain: ValueDomain) -> Declaration:
  record = InputRecord(
    name=string_value(args["name"]),
    kind=kind,
    default=default_value(args["default"], domain),
    description=string_value(args["usage"]),
  )
  return Declaration(record=record, position=args.call.position)


def _flag_handler(domain: ValueDomain) -> PatternHandler:
  def handler(args: BoundCall) -> Declaration:
    return _input(args, InputKind.FLAG, domain)

  return handler


# Flag shapes: (callee suffix, value domain)
_FLAG_SHAPES: Tuple[Tuple[str, ValueDomain], ...] = (
  ("string", ValueDomain.STRING),
  ("integer", ValueDomain.INTEGER),
  ("boolean", ValueDomain.BOOLEAN),
)

for _suffix, _domain in _FLAG_SHAPES:
  register_pattern(f"flags.{_suffix}", DIRECT_PARAMS)(_flag_handler(_domain))
  register_pattern(f"flags.{_suffix}_var", POINTER_PARAMS)(_flag_handler(_domain))


@register_pattern("action.getenv", DIRECT_PARAMS)
def _environment_input(args: BoundCall) -> Declaration:
  return _input(args, InputKind.ENVIRONMENT, ValueDomain.STRING)


@register_pattern("action.output", OUTPUT_PARAMS)
def _output(args: BoundCall) -> Declaration:
  record = OutputRecord(name=string_value(args["name"]), description=string_value(args["usage"]))
  return Declaration(record=record, position=args.call.position)


def _forbidden_env_read(args: BoundCall) -> Declaration:
  call = args.call
  key = "..."
  if call.args and call.args[0].value.kind == NodeKind.LITERAL:
    key = call.args[0].value.text
  raise ForbiddenPatternError(
    f"found `{call.callee}({key})`, use `action.getenv({key}, default, usage)` instead",
    call.position,
  )


for _callee in ("os.getenv", "os.environ.get"):
  register_pattern(_callee, (), variadic=True)(_forbidden_env_read)
