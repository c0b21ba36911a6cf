"""
Publish Handler (CI mode).

Inside a GitHub workflow the generated files are staged with git. On push
events they are committed and pushed back to the pushed branch; on pull
request events the staged diff is logged for review.
"""

import subprocess
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from rich.markup import escape

from pyaction import action
from pyaction.config import RuntimeConfig
from pyaction.utils.console import log_error, log_info, log_success

COMMITTER_NAME = "pyaction"
COMMIT_MESSAGE = "Update action files"


class GitError(Exception):
  """A git command exited with a non-zero status."""


def run_git(args: Sequence[str], cwd: Optional[Path] = None) -> str:
  """
  Runs one git command and returns its standard output.

  Args:
      args: Arguments following ``git``.
      cwd: Working directory.

  Returns:
      str: Captured standard output.

  Raises:
      GitError: If the command fails or git is not installed.
  """
  try:
    proc = subprocess.run(["git", *args], capture_output=True, text=True, cwd=cwd)
  except FileNotFoundError as e:
    raise GitError(f"git is not available: {e}") from e
  if proc.returncode != 0:
    raise GitError(f"git {' '.join(args)}: {proc.stderr.strip()}")
  return proc.stdout


def staged_diff(paths: Sequence[str], cwd: Optional[Path] = None) -> str:
  """
  Builds a markdown summary of the staged changes of ``paths``.

  The diff header lines (``diff --git``, ``index``, ``---``, ``+++``) are
  dropped. Files without changes are left out.

  Returns:
      str: The summary, empty when nothing changed.
  """
  sections: List[str] = []
  for path in paths:
    diff = run_git(["diff", "--staged", "--no-color", path], cwd=cwd)
    body = _strip_diff_header(diff)
    if body:
      sections.append(f"Path: {path}\n\n```diff\n{body}\n```\n")
  return "\n".join(sections)


def _strip_diff_header(diff: str) -> str:
  lines = diff.splitlines()
  for i, line in enumerate(lines):
    if line.startswith("@@"):
      return "\n".join(lines[i:])
  return ""


def handle_publish(
  paths: Sequence[str],
  config: RuntimeConfig,
  cwd: Optional[Path] = None,
  environ: Optional[Mapping[str, str]] = None,
) -> int:
  """
  Stages the generated files and publishes them according to the event.

  Args:
      paths: Generated files, relative to ``cwd``.
      config: Resolved configuration (provides the committer email).
      cwd: Repository directory.
      environ: Workflow environment (defaults to ``os.environ``).

  Returns:
      int: Exit code.
  """
  try:
    run_git(["config", "user.name", COMMITTER_NAME], cwd=cwd)
    run_git(["config", "user.email", config.email], cwd=cwd)
    run_git(["add", *paths], cwd=cwd)

    diff = staged_diff(paths, cwd=cwd)
    if not diff:
      log_info("No changes were made.")
      return 0

    if action.is_push(environ):
      branch = action.branch(environ)
      run_git(["commit", "-m", COMMIT_MESSAGE], cwd=cwd)
      run_git(["push", "origin", f"HEAD:{branch}"], cwd=cwd)
      log_success(f"Pushed action files to [path]{escape(branch)}[/path].")
      return 0

    if action.is_pr(environ):
      log_info(f"Action files changed in pull request #{action.pr_number(environ)}:\n{escape(diff)}")
      return 0

    log_error(f"Unexpected workflow event: '{escape(action.event_name(environ))}'.")
    return 1

  except GitError as e:
    log_error(escape(str(e)))
    return 1
