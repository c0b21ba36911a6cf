"""
Tests for Config Persistence (TOML).

Verifies that:
1. RuntimeConfig.load() picks up [tool.pyaction] from pyproject.toml.
2. CLI arguments override TOML settings.
3. File traversal finds toml in parent directories.
4. The CI toggle and email come from the environment passed in.
5. Invalid directive prefixes are rejected.
"""

import pytest
from pathlib import Path
from pydantic import ValidationError

from pyaction.config import DEFAULT_EMAIL, RuntimeConfig


@pytest.fixture
def toml_file(tmp_path):
  """Creates a dummy pyproject.toml in the temp dir."""
  fpath = tmp_path / "pyproject.toml"
  content = """
[tool.pyaction]
path = "scripts/counter"
name = "file-counter"
icon = "hash"
directive_prefix = "gha"
email = "bot@example.com"
"""
  fpath.write_text(content, encoding="utf-8")
  return fpath


def test_defaults_without_toml(tmp_path):
  config = RuntimeConfig.load(search_path=tmp_path, environ={})
  assert config.path == Path(".")
  assert config.directive_prefix == "pyaction"
  assert config.ci is False
  assert config.email == DEFAULT_EMAIL


def test_load_defaults_from_toml(tmp_path, toml_file):
  """
  Scenario: User runs CLI without args inside a configured project.
  Expect: Config matches TOML values, paths relative to the TOML file.
  """
  config = RuntimeConfig.load(search_path=tmp_path, environ={})

  assert config.name == "file-counter"
  assert config.icon == "hash"
  assert config.directive_prefix == "gha"
  assert config.email == "bot@example.com"
  assert config.path == tmp_path.resolve() / "scripts/counter"


def test_cli_overrides_toml(tmp_path, toml_file):
  config = RuntimeConfig.load(name="renamed", path=Path("main.py"), search_path=tmp_path, environ={})

  assert config.name == "renamed"  # CLI wins
  assert config.path == Path("main.py")
  assert config.icon == "hash"  # TOML fallback


def test_toml_found_in_parent(tmp_path, toml_file):
  nested = tmp_path / "a" / "b"
  nested.mkdir(parents=True)
  config = RuntimeConfig.load(search_path=nested, environ={})
  assert config.name == "file-counter"


def test_environment_controls_ci_and_email(tmp_path, toml_file):
  config = RuntimeConfig.load(search_path=tmp_path, environ={"CI": "true", "EMAIL": "me@example.com"})
  assert config.ci is True
  assert config.email == "me@example.com"

  assert RuntimeConfig.load(search_path=tmp_path, environ={"CI": "1"}).ci is False


@pytest.mark.parametrize("prefix", ["", "two words", "with:colon"])
def test_invalid_directive_prefix(prefix):
  with pytest.raises(ValidationError):
    RuntimeConfig(directive_prefix=prefix)
