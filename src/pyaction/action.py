"""
GitHub Actions Runtime Helpers.

Functions an action script uses to read its environment inputs, publish its
outputs and inspect the workflow it runs in. Outside of a workflow ("command
line mode") the same script keeps working: ``getenv`` reads plain variables
and ``output`` does nothing.

Inside a workflow GitHub passes an input ``token`` as ``INPUT_TOKEN``, which
is why scripts read inputs through ``getenv`` rather than ``os.getenv``.
"""

import os
import uuid
from typing import Mapping, Optional

# GitHub event names
EVENT_PUSH = "push"
EVENT_PULL_REQUEST = "pull_request"


def _environ(environ: Optional[Mapping[str, str]]) -> Mapping[str, str]:
  return os.environ if environ is None else environ


def is_ci(environ: Optional[Mapping[str, str]] = None) -> bool:
  """
  Returns True when running inside a GitHub workflow.

  Code that should only run as an action is guarded with ``if action.is_ci():``.
  """
  return _environ(environ).get("CI") == "true"


def input_variable(name: str) -> str:
  """
  Returns the variable GitHub uses to pass input ``name``.

  Example:
      >>> input_variable("github-token")
      'INPUT_GITHUB-TOKEN'
  """
  return "INPUT_" + name.upper()


def getenv(name: str, default: str, usage: str, environ: Optional[Mapping[str, str]] = None) -> str:
  """
  Reads an environment input.

  Args:
      name: Input name. In CI mode ``INPUT_<NAME>`` is read instead.
      default: Returned when the variable is unset or empty.
      usage: Description of the input, read by the action generator.
      environ: Environment to read (defaults to ``os.environ``).

  Returns:
      str: The input value.
  """
  env = _environ(environ)
  key = input_variable(name) if is_ci(env) else name
  return env.get(key) or default


def output(name: str, value: str, usage: str, environ: Optional[Mapping[str, str]] = None) -> None:
  """
  Publishes an action output.

  In CI mode the value is appended to the file named by ``GITHUB_OUTPUT``;
  multi-line values use the delimiter syntax. Outside CI this is a no-op.

  Args:
      name: Output name.
      value: Output value.
      usage: Description of the output, read by the action generator.
      environ: Environment to read (defaults to ``os.environ``).
  """
  env = _environ(environ)
  if not is_ci(env):
    return

  target = env.get("GITHUB_OUTPUT")
  if not target:
    # Runners without output files still honour the legacy command.
    print(f"::set-output name={name}::{value}")
    return

  with open(target, "a", encoding="utf-8") as f:
    if "\n" in value:
      delimiter = f"ghadelimiter_{uuid.uuid4()}"
      f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
    else:
      f.write(f"{name}={value}\n")


def repository(environ: Optional[Mapping[str, str]] = None) -> str:
  """Returns ``owner/project`` of the repository running the workflow."""
  return _environ(environ).get("GITHUB_REPOSITORY", "")


def owner(environ: Optional[Mapping[str, str]] = None) -> str:
  parts = repository(environ).split("/")
  return parts[0] if len(parts) >= 2 else ""


def project(environ: Optional[Mapping[str, str]] = None) -> str:
  parts = repository(environ).split("/")
  return parts[1] if len(parts) >= 2 else ""


def event_name(environ: Optional[Mapping[str, str]] = None) -> str:
  return _environ(environ).get("GITHUB_EVENT_NAME", "")


def is_push(environ: Optional[Mapping[str, str]] = None) -> bool:
  return event_name(environ) == EVENT_PUSH


def is_pr(environ: Optional[Mapping[str, str]] = None) -> bool:
  return event_name(environ) == EVENT_PULL_REQUEST


def branch(environ: Optional[Mapping[str, str]] = None) -> str:
  """
  Returns the pushed branch for push events, or an empty string.

  ``GITHUB_REF`` has the form ``refs/heads/<branch>``; branch names may
  contain slashes.
  """
  if not is_push(environ):
    return ""
  parts = _environ(environ).get("GITHUB_REF", "").split("/", 2)
  return parts[2] if len(parts) == 3 else ""


def pr_number(environ: Optional[Mapping[str, str]] = None) -> int:
  """
  Returns the pull request number for pull request events, or -1.

  ``GITHUB_REF`` has the form ``refs/pull/<number>/merge``.
  """
  if not is_pr(environ):
    return -1
  parts = _environ(environ).get("GITHUB_REF", "").split("/")
  if len(parts) < 3 or not parts[2].isdigit():
    return -1
  return int(parts[2])
