"""
Tests for the runtime flag helpers used by action scripts.
"""

import argparse
from types import SimpleNamespace

import pytest

from pyaction import flags
from pyaction.flags import FlagSet, parse_bool


def test_defaults_before_parse():
  fs = FlagSet()
  path = fs.string("path", ".", "Directory.")
  assert path.value == "."


def test_single_and_double_dash_forms():
  fs = FlagSet()
  path = fs.string("path", ".", "Directory.")
  depth = fs.integer("depth", 1, "Depth.")
  fs.parse(["-path=src", "--depth", "3"])
  assert path.value == "src"
  assert depth.value == 3


def test_boolean_forms():
  fs = FlagSet()
  verbose = fs.boolean("verbose", False, "Talk.")
  quiet = fs.boolean("quiet", True, "Hush.")
  fs.parse(["-verbose", "-quiet=false"])
  assert verbose.value is True
  assert quiet.value is False


def test_var_variants_write_to_destination():
  opts = SimpleNamespace()
  fs = FlagSet()
  fs.string_var(opts, "out-dir", "build", "Output.")
  fs.integer_var(opts, "jobs", 2, "Jobs.")
  fs.boolean_var(opts, "dry-run", False, "Dry run.")
  assert opts.out_dir == "build"

  fs.parse(["-out-dir", "dist", "-jobs=4", "-dry-run"])
  assert (opts.out_dir, opts.jobs, opts.dry_run) == ("dist", 4, True)


def test_positional_leftovers_returned():
  fs = FlagSet()
  fs.string("mode", "a", "Mode.")
  assert fs.parse(["-mode", "b", "file.txt"]) == ["file.txt"]


def test_unknown_flag_exits():
  fs = FlagSet()
  with pytest.raises(SystemExit):
    fs.parse(["-nope"])


def test_parse_bool():
  assert parse_bool("Yes") is True
  assert parse_bool("0") is False
  with pytest.raises(argparse.ArgumentTypeError):
    parse_bool("maybe")


def test_module_level_functions(monkeypatch):
  monkeypatch.setattr(flags, "command_line", FlagSet())
  who = flags.string("who", "world", "Who to greet.")
  flags.parse(["-who=you"])
  assert who.value == "you"
