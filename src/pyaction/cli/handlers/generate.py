"""
Generate Command Handler.

Orchestrates one run of the tool:

1. Configuration loading (``pyproject.toml`` + CLI overrides).
2. Script resolution and ingestion (LibCST).
3. Analysis into a ``Manifest`` and caller overrides.
4. Rendering and writing ``action.yml`` and ``Dockerfile``.
5. Publishing through git when running in CI.
"""

import os
from pathlib import Path
from typing import Optional

import libcst as cst
from rich.markup import escape

from pyaction.analysis.walker import analyze
from pyaction.cli.handlers.publish import handle_publish
from pyaction.config import RuntimeConfig
from pyaction.core.ingestion import parse_source
from pyaction.render import ACTION_FILE, DOCKER_FILE, render_action_yaml, render_dockerfile
from pyaction.utils.console import console, log_error, log_info, log_success, log_warning

ENTRYPOINT_FILES = ("main.py", "__main__.py")


def resolve_script(path: Path) -> Optional[Path]:
  """
  Finds the action script.

  Args:
      path: A script file, or a directory holding ``main.py``/``__main__.py``.

  Returns:
      Optional[Path]: The script, or None when it does not exist.
  """
  if path.is_file():
    return path
  if path.is_dir():
    for filename in ENTRYPOINT_FILES:
      candidate = path / filename
      if candidate.is_file():
        return candidate
  return None


def handle_generate(
  path: Optional[Path] = None,
  name: Optional[str] = None,
  description: Optional[str] = None,
  icon: Optional[str] = None,
  color: Optional[str] = None,
  out_dir: Optional[Path] = None,
  dry_run: bool = False,
) -> int:
  """
  Handles the generation of action files.

  Args:
      path: Script or directory override.
      name: Action name override.
      description: Action description override.
      icon: Branding icon.
      color: Branding color.
      out_dir: Output directory override.
      dry_run: Print the files instead of writing them.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  try:
    config = RuntimeConfig.load(
      path=path,
      name=name,
      description=description,
      icon=icon,
      color=color,
      out_dir=out_dir,
    )
  except ValueError as e:
    # pydantic.ValidationError and tomllib.TOMLDecodeError are both ValueErrors
    log_error(f"Invalid configuration: {escape(str(e))}")
    return 1

  script = resolve_script(config.path)
  if script is None:
    log_error(f"Action script not found: [path]{escape(str(config.path))}[/path]")
    return 1

  try:
    code = script.read_text(encoding="utf-8")
  except (OSError, UnicodeDecodeError) as e:
    log_error(f"Failed to read {escape(str(script))}: {escape(str(e))}")
    return 1

  try:
    source = parse_source(code, filename=str(script))
  except cst.ParserSyntaxError as e:
    log_error(f"Failed to parse {escape(str(script))}: {escape(str(e))}")
    return 1

  result = analyze(source, config)
  if not result.success:
    log_error(escape(str(result.error)))
    return 1

  manifest = result.manifest.with_overrides(
    name=config.name,
    description=config.description,
    icon=config.icon,
    color=config.color,
  )
  log_info(
    f"Found {len(manifest.inputs)} inputs and {len(manifest.outputs)} outputs in [path]{escape(str(script))}[/path]."
  )
  if not manifest.inputs and not manifest.outputs:
    log_warning("No inputs or outputs declared. Use pyaction.flags and pyaction.action to declare them.")

  # The Docker build context is the output directory.
  script_in_context = Path(os.path.relpath(script.resolve(), config.out_dir.resolve()))
  files = {
    ACTION_FILE: render_action_yaml(manifest),
    DOCKER_FILE: render_dockerfile(script_in_context),
  }

  if dry_run:
    for filename, text in files.items():
      console.print(f"[path]# {filename}[/path]")
      console.print(text, markup=False, highlight=False)
    return 0

  try:
    config.out_dir.mkdir(parents=True, exist_ok=True)
    for filename, text in files.items():
      (config.out_dir / filename).write_text(text, encoding="utf-8")
  except OSError as e:
    log_error(f"Failed to write action files: {escape(str(e))}")
    return 1
  log_success(f"Wrote {ACTION_FILE} and {DOCKER_FILE} to [path]{escape(str(config.out_dir))}[/path].")

  if not config.ci:
    log_info("Not running in CI, skipping commit stage.")
    return 0

  return handle_publish(list(files), config, cwd=config.out_dir)
