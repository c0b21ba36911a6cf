"""
Main Entry Point for the pyaction CLI.

Parses arguments and dispatches to the generate handler in
`pyaction.cli.commands`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from pyaction import __version__
from pyaction.cli import commands


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(
    prog="pyaction",
    description="pyaction: Generate GitHub Action files from a Python script",
  )
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument(
    "--path",
    type=Path,
    default=None,
    help="Action script, or the directory holding main.py (default: from toml, else '.')",
  )
  parser.add_argument("--name", default=None, help="Override action name (default: the script name)")
  parser.add_argument("--desc", default=None, help="Override action description (default: docstring synopsis)")
  parser.add_argument("--icon", default=None, help="Set branding icon")
  parser.add_argument("--color", default=None, help="Set branding color")
  parser.add_argument("--out-dir", type=Path, default=None, help="Directory receiving the action files")
  parser.add_argument("--dry-run", action="store_true", help="Print the files without writing them")

  args = parser.parse_args(argv)

  return commands.handle_generate(
    path=args.path,
    name=args.name,
    description=args.desc,
    icon=args.icon,
    color=args.color,
    out_dir=args.out_dir,
    dry_run=args.dry_run,
  )


if __name__ == "__main__":
  sys.exit(main())
