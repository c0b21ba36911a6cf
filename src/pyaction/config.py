"""
Runtime Configuration Store.

Settings come from three layers, later layers winning:

1.  Field defaults.
2.  ``[tool.pyaction]`` in the nearest ``pyproject.toml``.
3.  Explicit arguments (usually CLI flags).

The CI toggle is read from the hosting environment exactly once, in
``RuntimeConfig.load``, and travels inside the config object afterwards.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

DEFAULT_EMAIL = "pyaction@users.noreply.github.com"


class RuntimeConfig(BaseModel):
  """
  Global configuration container for analysis and generation.
  """

  path: Path = Field(Path("."), description="Action script, or the directory holding main.py.")
  name: Optional[str] = Field(None, description="Overrides the action name (default: script name).")
  description: Optional[str] = Field(None, description="Overrides the action description (default: docstring synopsis).")
  icon: Optional[str] = Field(None, description="Branding icon.")
  color: Optional[str] = Field(None, description="Branding color.")
  directive_prefix: str = Field("pyaction", description="Marker used by annotation comments.")
  out_dir: Path = Field(Path("."), description="Directory receiving action.yml and Dockerfile.")
  ci: bool = Field(False, description="True when running inside a GitHub workflow.")
  email: str = Field(DEFAULT_EMAIL, description="Committer email used in CI mode.")

  @field_validator("directive_prefix")
  @classmethod
  def validate_prefix(cls, v: str) -> str:
    """
    Ensures the directive marker can be matched unambiguously.

    Args:
        v (str): The configured prefix.

    Returns:
        str: The prefix, unchanged.

    Raises:
        ValueError: If the prefix is empty, contains whitespace or a colon.
    """
    if not v or any(ch.isspace() for ch in v) or ":" in v:
      raise ValueError(f"Invalid directive prefix: '{v}'. Expected a single word without ':'.")
    return v

  @classmethod
  def load(
    cls,
    path: Optional[Path] = None,
    name: Optional[str] = None,
    description: Optional[str] = None,
    icon: Optional[str] = None,
    color: Optional[str] = None,
    out_dir: Optional[Path] = None,
    search_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Args:
        path (Optional[Path]): Override for the script path.
        name (Optional[str]): Override for the action name.
        description (Optional[str]): Override for the action description.
        icon (Optional[str]): Override for the branding icon.
        color (Optional[str]): Override for the branding color.
        out_dir (Optional[Path]): Override for the output directory.
        search_path (Optional[Path]): Directory to start searching for TOML config.
        environ (Optional[Mapping]): Environment to read ``CI``/``EMAIL`` from
            (defaults to ``os.environ``).

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    env = os.environ if environ is None else environ
    start_dir = search_path or Path.cwd()
    toml_config, toml_dir = _load_toml_settings(start_dir)

    def pick(cli_value: Any, key: str) -> Any:
      return cli_value if cli_value else toml_config.get(key)

    settings: Dict[str, Any] = {
      "name": pick(name, "name"),
      "description": pick(description, "description"),
      "icon": pick(icon, "icon"),
      "color": pick(color, "color"),
      "ci": env.get("CI") == "true",
    }

    if "directive_prefix" in toml_config:
      settings["directive_prefix"] = toml_config["directive_prefix"]

    final_email = env.get("EMAIL") or toml_config.get("email")
    if final_email:
      settings["email"] = final_email

    # Paths from TOML are relative to the TOML file
    for key, cli_value in (("path", path), ("out_dir", out_dir)):
      if cli_value:
        settings[key] = Path(cli_value)
      elif key in toml_config:
        raw = Path(toml_config[key])
        settings[key] = toml_dir / raw if toml_dir else raw

    return cls(**settings)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches ``start_path`` and its parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The ``[tool.pyaction]`` table and the
      directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      with open(toml_path, "rb") as f:
        data = tomllib.load(f)
      return data.get("tool", {}).get("pyaction", {}), parent

  return {}, None
