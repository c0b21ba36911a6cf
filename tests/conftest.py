"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Snapshot testing fixture for generated file stability.
- Console capture and CI environment isolation.
"""

import sys
from pathlib import Path
from typing import Callable, Optional

import pytest
from rich.console import Console

# Add src to path so we can import 'pyaction' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from pyaction.utils.console import reset_console, set_console  # noqa: E402

# Variables read by RuntimeConfig.load and pyaction.action
_WORKFLOW_VARIABLES = (
  "CI",
  "EMAIL",
  "GITHUB_OUTPUT",
  "GITHUB_REPOSITORY",
  "GITHUB_EVENT_NAME",
  "GITHUB_REF",
)


class SnapshotAssert:
  """
  Simple snapshot comparison logic to verify generated output stability.
  """

  def __init__(self, request: pytest.FixtureRequest):
    self.request = request
    self.test_name = request.node.name
    self.module_path = Path(request.node.fspath).parent
    self.snapshot_dir = self.module_path / "__snapshots__"
    self.update_mode = request.config.getoption("--update-snapshots", default=False)

  def assert_match(self, content: str, extension: str = "txt", normalizer: Optional[Callable[[str], str]] = None):
    """
    Compares content against the stored file, creating it when missing.

    Args:
        content: The actual output string.
        extension: File extension (default 'txt').
        normalizer: Optional function applied to both sides before comparison.
    """
    self.snapshot_dir.mkdir(parents=True, exist_ok=True)
    snapshot_file = self.snapshot_dir / f"{self.test_name}.{extension}"

    content = content.replace("\r\n", "\n")

    if self.update_mode or not snapshot_file.exists():
      snapshot_file.write_text(normalizer(content) if normalizer else content, encoding="utf-8")
      if self.update_mode:
        return

    expected = snapshot_file.read_text(encoding="utf-8").replace("\r\n", "\n")

    lhs, rhs = content, expected
    if normalizer:
      lhs, rhs = normalizer(lhs), normalizer(rhs)

    assert lhs == rhs, f"Snapshot mismatch for {snapshot_file.name}. Run pytest with --update-snapshots to accept changes."


@pytest.fixture
def snapshot(request):
  """Fixture to assert text matches a stored snapshot."""
  return SnapshotAssert(request)


@pytest.fixture
def captured_console():
  """
  Routes console output and logging into an in-memory console.

  Yields:
      Console: The recording console. Use ``export_text()`` to read it.
  """
  recorder = Console(record=True, width=200, force_terminal=False)
  set_console(recorder)
  yield recorder
  reset_console()


@pytest.fixture(autouse=True)
def isolate_workflow_environment(monkeypatch):
  """
  Ensures tests never see the GitHub workflow variables of the machine
  running them (the suite itself may run inside GitHub Actions).
  """
  for name in _WORKFLOW_VARIABLES:
    monkeypatch.delenv(name, raising=False)


def pytest_addoption(parser):
  """Add CLI flag to update snapshots."""
  parser.addoption("--update-snapshots", action="store_true", default=False, help="Update snapshots")
