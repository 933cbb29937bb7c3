"""CLI handlers for the inspect and tree commands."""

import importlib
from typing import Any

from rich.markup import escape

from live_mirrors.cli.render import MirrorReport
from live_mirrors.exceptions import ConstantNotFoundError
from live_mirrors.mirrors import namespace
from live_mirrors.registry import reflect
from live_mirrors.utils.console import log_error


def _names_prefix(missing: str, module_name: str) -> bool:
  """True if the missing module is ``module_name`` itself or one of its parents."""
  if not missing:
    return True
  return module_name == missing or module_name.startswith(missing + ".")


def resolve_target(dotted_path: str) -> Any:
  """
  Imports the longest importable prefix of a dotted path and walks the rest.

  Walking the remaining segments may trigger lazy imports, which is what a
  user asking for the object expects.

  Args:
      dotted_path (str): E.g. ``"collections.OrderedDict"`` or ``"json"``.

  Returns:
      Any: The resolved object.

  Raises:
      ConstantNotFoundError: If no prefix imports, a module fails while importing,
        or a remaining segment is undefined.
  """
  parts = dotted_path.split(".")
  for index in range(len(parts), 0, -1):
    module_name = ".".join(parts[:index])
    try:
      module = importlib.import_module(module_name)
    except Exception as e:
      if isinstance(e, ModuleNotFoundError) and _names_prefix(e.name, module_name):
        continue
      raise ConstantNotFoundError(dotted_path, message=f"Cannot import '{module_name}': {e}") from e

    rest = parts[index:]
    if not rest:
      return module

    field = reflect(module).constant(".".join(rest))
    if field is None:
      raise ConstantNotFoundError(".".join(rest), module_name)
    return namespace.const_get(field.owner().subject, field.name())

  raise ConstantNotFoundError(dotted_path, message=f"Cannot import any prefix of '{dotted_path}'")


def _reflect_namespace(dotted_path: str):
  target = resolve_target(dotted_path)
  if not namespace.is_namespace(target):
    raise ConstantNotFoundError(dotted_path, message=f"'{dotted_path}' is not a class or module")
  return reflect(target)


def handle_inspect(dotted_path: str) -> int:
  """Handles 'inspect' command."""
  try:
    mirror = _reflect_namespace(dotted_path)
  except ConstantNotFoundError as e:
    log_error(escape(str(e)))
    return 1
  MirrorReport(mirror).render_table()
  return 0


def handle_tree(dotted_path: str, depth: int) -> int:
  """Handles 'tree' command."""
  try:
    mirror = _reflect_namespace(dotted_path)
  except ConstantNotFoundError as e:
    log_error(escape(str(e)))
    return 1
  MirrorReport(mirror).render_tree(depth)
  return 0
