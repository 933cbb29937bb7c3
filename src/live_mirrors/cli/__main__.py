"""
Main Entry Point for the live-mirrors CLI.

This module handles argument parsing and dispatches to specific command
handlers defined in `live_mirrors.cli.commands`.
"""

import argparse
from typing import List, Optional

from rich.markup import escape

from live_mirrors import __version__
from live_mirrors.cli import commands
from live_mirrors.config import MirrorConfig
from live_mirrors.registry import reset_registry
from live_mirrors.utils.console import log_error, set_log_level


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the appropriate handler function.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="live-mirrors: Reflection over live classes and modules")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("--log-level", default=None, help="Logging threshold (default: from toml, else WARNING)")
  parser.add_argument(
    "--no-static",
    action="store_true",
    default=None,
    help="Disable the static-analysis fallback when attributing files",
  )

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: INSPECT ---
  cmd_inspect = subparsers.add_parser("inspect", help="Summarize a class or module")
  cmd_inspect.add_argument("target", help="Dotted path, e.g. 'collections.OrderedDict'")

  # --- Command: TREE ---
  cmd_tree = subparsers.add_parser("tree", help="Show nested classes as a tree")
  cmd_tree.add_argument("target", help="Dotted path of a class or module")
  cmd_tree.add_argument("--depth", type=int, default=None, help="Levels to expand (default: from toml, else 2)")

  args = parser.parse_args(argv)

  try:
    config = MirrorConfig.load(
      static_fallback=False if args.no_static else None,
      log_level=args.log_level,
    )
  except ValueError as e:
    log_error(f"Invalid configuration: {escape(str(e))}")
    return 1
  set_log_level(config.log_level_number)
  reset_registry(config)

  if args.command == "inspect":
    return commands.handle_inspect(args.target)

  if args.command == "tree":
    depth = args.depth if args.depth is not None else config.max_depth
    return commands.handle_tree(args.target, depth)

  return 1


if __name__ == "__main__":
  raise SystemExit(main())
