"""
Command Line Flags for Action Scripts.

A thin layer over `argparse` shaped like the declarations ``pyaction``
recognizes. Each call registers one flag and returns a ``Value`` holder (or,
for the ``*_var`` variants, writes into an attribute of a destination object)
that ``parse`` fills in::

    from pyaction import flags

    path = flags.string("path", ".", "Directory to scan.")
    depth = flags.integer("depth", 1, "Recursion depth.")
    verbose = flags.boolean("verbose", False, "Print every file.")

    flags.parse()
    print(path.value, depth.value, verbose.value)

Flags accept ``-name value``, ``-name=value`` and the double dash forms.
A boolean flag given without a value is set to True.
"""

import argparse
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")

_TRUE_WORDS = ("1", "t", "true", "yes", "on")
_FALSE_WORDS = ("0", "f", "false", "no", "off")


def parse_bool(text: str) -> bool:
  """
  Parses a boolean flag value.

  Raises:
      argparse.ArgumentTypeError: If ``text`` is not a recognized boolean word.
  """
  lowered = text.strip().lower()
  if lowered in _TRUE_WORDS:
    return True
  if lowered in _FALSE_WORDS:
    return False
  raise argparse.ArgumentTypeError(f"invalid boolean value: '{text}'")


class Value(Generic[T]):
  """
  Holds the current value of one flag.

  Attributes:
      name (str): The flag name.
      value (T): The default until ``parse`` runs, the parsed value afterwards.
  """

  def __init__(self, name: str, default: T):
    self.name = name
    self.value = default

  def __repr__(self) -> str:
    return f"Value({self.name}={self.value!r})"


class FlagSet:
  """
  A named set of flags backed by an ``argparse.ArgumentParser``.
  """

  def __init__(self, prog: Optional[str] = None):
    self.parser = argparse.ArgumentParser(prog=prog, allow_abbrev=False)
    self._sinks: List[Callable[[argparse.Namespace], None]] = []

  def _register(
    self, name: str, default: Any, usage: str, convert: Callable[[str], Any], sink: Callable[[Any], None], **kwargs: Any
  ) -> None:
    dest = _dest(name)
    self.parser.add_argument(
      f"-{name}",
      f"--{name}",
      dest=dest,
      default=default,
      type=convert,
      help=usage,
      **kwargs,
    )
    self._sinks.append(lambda namespace: sink(getattr(namespace, dest)))

  def string(self, name: str, default: str, usage: str) -> Value[str]:
    holder = Value(name, default)
    self._register(name, default, usage, str, lambda v: setattr(holder, "value", v))
    return holder

  def integer(self, name: str, default: int, usage: str) -> Value[int]:
    holder = Value(name, default)
    self._register(name, default, usage, int, lambda v: setattr(holder, "value", v))
    return holder

  def boolean(self, name: str, default: bool, usage: str) -> Value[bool]:
    holder = Value(name, default)
    self._register(name, default, usage, parse_bool, lambda v: setattr(holder, "value", v), nargs="?", const=True)
    return holder

  def string_var(self, dest: Any, name: str, default: str, usage: str) -> None:
    self._bind(dest, name, default)
    self._register(name, default, usage, str, lambda v: setattr(dest, _dest(name), v))

  def integer_var(self, dest: Any, name: str, default: int, usage: str) -> None:
    self._bind(dest, name, default)
    self._register(name, default, usage, int, lambda v: setattr(dest, _dest(name), v))

  def boolean_var(self, dest: Any, name: str, default: bool, usage: str) -> None:
    self._bind(dest, name, default)
    self._register(name, default, usage, parse_bool, lambda v: setattr(dest, _dest(name), v), nargs="?", const=True)

  @staticmethod
  def _bind(dest: Any, name: str, default: Any) -> None:
    setattr(dest, _dest(name), default)

  def parse(self, argv: Optional[Sequence[str]] = None) -> List[str]:
    """
    Parses ``argv`` (``sys.argv[1:]`` when None) and updates every holder.

    Args:
        argv: Command line arguments.

    Returns:
        List[str]: Positional arguments left over after the flags.

    Raises:
        SystemExit: On invalid flags, as ``argparse`` does.
    """
    namespace, rest = self.parser.parse_known_args(argv)
    unknown = [arg for arg in rest if arg.startswith("-")]
    if unknown:
      self.parser.error(f"unrecognized arguments: {' '.join(unknown)}")
    for sink in self._sinks:
      sink(namespace)
    return rest


def _dest(name: str) -> str:
  return name.replace("-", "_")


# Module level flag set used by the convenience functions below.
command_line = FlagSet()


def string(name: str, default: str, usage: str) -> Value[str]:
  """Registers a string flag on the module level flag set."""
  return command_line.string(name, default, usage)


def integer(name: str, default: int, usage: str) -> Value[int]:
  """Registers an integer flag on the module level flag set."""
  return command_line.integer(name, default, usage)


def boolean(name: str, default: bool, usage: str) -> Value[bool]:
  """Registers a boolean flag on the module level flag set."""
  return command_line.boolean(name, default, usage)


def string_var(dest: Any, name: str, default: str, usage: str) -> None:
  """Registers a string flag stored on ``dest`` under the flag name."""
  command_line.string_var(dest, name, default, usage)


def integer_var(dest: Any, name: str, default: int, usage: str) -> None:
  command_line.integer_var(dest, name, default, usage)


def boolean_var(dest: Any, name: str, default: bool, usage: str) -> None:
  command_line.boolean_var(dest, name, default, usage)


def parse(argv: Optional[Sequence[str]] = None) -> List[str]:
  """Parses the module level flag set. See ``FlagSet.parse``."""
  return command_line.parse(argv)
