"""
Tests for the CLI entry point and the generate handler.

Verifies that:
1.  Arguments are forwarded to the handler.
2.  action.yml and Dockerfile are written for a valid script.
3.  `--dry-run` prints instead of writing.
4.  Analysis, parse and lookup failures exit with 1 and write nothing.
.  A script with no declarations still generates files, with a warning.
"""

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from pyaction import __version__
from pyaction.cli.__main__ import main
from pyaction.cli.handlers.generate import resolve_script

SCRIPT = '''"""Counts files in a directory."""
from pyaction import action, flags

path = flags.string("path", ".", "Directory to scan.")
# pyaction:required
token = action.getenv("token", "", "API token.")

action.output("count", "0", "Number of files.")
'''


@pytest.fixture
def project(tmp_path, monkeypatch):
  """A project directory holding counter/main.py, used as the cwd."""
  script_dir = tmp_path / "counter"
  script_dir.mkdir()
  (script_dir / "main.py").write_text(SCRIPT, encoding="utf-8")
  monkeypatch.chdir(tmp_path)
  return tmp_path


@patch("pyaction.cli.commands.handle_generate")
def test_arguments_forwarded(mock_handle):
  mock_handle.return_value = 0
  code = main(["--path", "tools", "--name", "n", "--desc", "d", "--icon", "i", "--color", "c", "--dry-run"])

  assert code == 0
  mock_handle.assert_called_once_with(
    path=Path("tools"),
    name="n",
    description="d",
    icon="i",
    color="c",
    out_dir=None,
    dry_run=True,
  )


def test_version(capsys):
  with pytest.raises(SystemExit) as excinfo:
    main(["--version"])
  assert excinfo.value.code == 0
  assert __version__ in capsys.readouterr().out


def test_resolve_script(project):
  assert resolve_script(project / "counter") == project / "counter" / "main.py"
  assert resolve_script(project / "counter" / "main.py") == project / "counter" / "main.py"
  assert resolve_script(project / "missing") is None


def test_generate_writes_files(project, captured_console):
  code = main(["--path", "counter", "--icon", "hash"])

  assert code == 0
  data = yaml.safe_load((project / "action.yml").read_text(encoding="utf-8"))
  assert data["name"] == "counter"
  assert data["description"] == "Counts files in a directory."
  assert list(data["inputs"]) == ["path", "token"]
  assert data["inputs"]["token"]["required"] is True
  assert data["runs"]["args"] == ["-path=${{ inputs.path }}"]
  assert data["branding"] == {"icon": "hash"}

  dockerfile = (project / "Dockerfile").read_text(encoding="utf-8")
  assert "/home/src/counter/main.py" in dockerfile
  assert "Not running in CI" in captured_console.export_text()


def test_out_dir(project):
  assert main(["--path", "counter", "--out-dir", "counter"]) == 0
  assert (project / "counter" / "action.yml").exists()
  assert '"/home/src/main.py"' in (project / "counter" / "Dockerfile").read_text(encoding="utf-8")


def test_dry_run_writes_nothing(project, captured_console):
  assert main(["--path", "counter", "--dry-run"]) == 0
  assert not (project / "action.yml").exists()
  output = captured_console.export_text()
  assert "# action.yml" in output
  assert "name: counter" in output


def test_script_without_declarations_warns(project, captured_console):
  (project / "counter" / "main.py").write_text('"""Does nothing."""\nprint("hi")\n', encoding="utf-8")

  assert main(["--path", "counter"]) == 0
  assert (project / "action.yml").exists()
  assert "No inputs or outputs declared" in captured_console.export_text()


def test_analysis_error_writes_nothing(project, captured_console):
  (project / "counter" / "main.py").write_text('import os\nx = os.getenv("X")\n', encoding="utf-8")

  assert main(["--path", "counter"]) == 1
  assert not (project / "action.yml").exists()
  assert "action.getenv" in captured_console.export_text()


def test_parse_error(project, captured_console):
  (project / "counter" / "main.py").write_text("def broken(:\n", encoding="utf-8")
  assert main(["--path", "counter"]) == 1
  assert "Failed to parse" in captured_console.export_text()


def test_missing_script(project, captured_console):
  assert main(["--path", "nowhere"]) == 1
  assert "Action script not found" in captured_console.export_text()


@patch("pyaction.cli.handlers.generate.handle_publish")
def test_ci_mode_publishes(mock_publish, project, monkeypatch):
  monkeypatch.setenv("CI", "true")
  mock_publish.return_value = 0

  assert main(["--path", "counter"]) == 0

  mock_publish.assert_called_once()
  paths, config = mock_publish.call_args[0]
  assert paths == ["action.yml", "Dockerfile"]
  assert config.ci is True
