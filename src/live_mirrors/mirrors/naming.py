"""
Display names and the name-based classification heuristics.

Python offers no flag saying "this class was never bound to a name" and has no
per-object singleton classes, so these answers are inferred from a display name
built from trusted reads only:

*   ``Dog`` / ``Outer.Inner``: a class reachable from its defining module by
    walking ``__qualname__`` through raw namespaces (compared by identity).
    Static (C-level) types always carry their compiled-in qualified name.
*   ``Alias``: a class bound in its defining module under a key other than its
    ``__qualname__``, e.g. ``Alias = type("Original", (), {})``.
*   ``pkg.module``: a module registered in ``sys.modules`` under its ``__name__``.
*   ``<metaclass NAME>``: a class deriving from ``type``; the per-class level
    that plays the singleton role. ``NAME`` is one of the above or an address.
*   ``<class 0x7f3a...>`` / ``<module 0x7f3a...>``: anything unreachable.

The classifiers are explicitly fallible. A class renamed after creation, or a
module stored in ``sys.modules`` under an alias, is classified by what its
names say, not by its provenance.
"""

import re
import sys
from typing import Any, Optional

from live_mirrors.mirrors.namespace import defining_module, is_class, is_module, is_namespace, own_namespace
from live_mirrors.rebind import is_instance, is_subtype, rebind

_HEAPTYPE_FLAG = 1 << 9

_ADDRESS = r"0x[0-9a-f]+"
_ADDRESS_PATTERN = re.compile(rf"^{_ADDRESS}$")
_SINGLETON_PATTERN = re.compile(r"^<metaclass (?P<target>.+)>$")
_ANONYMOUS_PATTERN = re.compile(rf"^<(class|module|metaclass) {_ADDRESS}>$")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def address_of(entity: Any) -> str:
  """The address-like token of an entity, e.g. ``0x7f3a2c1d9e80``."""
  return hex(id(entity))


def conventional_name(entity: Any) -> Optional[str]:
  """
  The name a class or module is reachable under, if any.

  Args:
      entity: A class or module.

  Returns:
      Optional[str]: ``__qualname__`` for reachable classes, else the key a
      class is bound under in its defining module; ``__name__`` for registered
      modules; None otherwise.
  """
  if is_module(entity):
    name = own_namespace(entity).get("__name__")
    if is_instance(name, str) and sys.modules.get(name) is entity:
      return name
    return None

  qualname = rebind(type, entity, "__qualname__")()
  if not rebind(type, entity, "__flags__")() & _HEAPTYPE_FLAG:
    return qualname

  container = defining_module(entity)
  if container is None:
    return None

  if _resolves_to(container, qualname, entity):
    return qualname
  return _bound_alias(container, entity)


def _resolves_to(container: Any, qualname: str, entity: Any) -> bool:
  for segment in qualname.split("."):
    if not is_namespace(container):
      return False
    namespace = own_namespace(container)
    if segment not in namespace:
      return False
    container = namespace[segment]
  return container is entity


def _bound_alias(module: Any, entity: Any) -> Optional[str]:
  """The first key of the module's raw namespace bound to ``entity`` itself."""
  for key, value in list(own_namespace(module).items()):
    if value is entity and is_instance(key, str):
      return key
  return None


def display_name(entity: Any) -> str:
  """
  Builds the display name used by class mirrors and the heuristics below.

  Args:
      entity: A class or module.

  Returns:
      str: The display name; contains an address token when the entity has no
      conventional name.
  """
  name = conventional_name(entity)
  if is_class(entity) and is_subtype(entity, type):
    return f"<metaclass {name or address_of(entity)}>"
  if name is not None:
    return name
  kind = "class" if is_class(entity) else "module"
  return f"<{kind} {address_of(entity)}>"


def is_singleton_name(name: str) -> bool:
  """
  Heuristic: does the display name denote the singleton (metaclass) level?

  True for ``<metaclass X>`` when ``X`` is not an address token.
  """
  match = _SINGLETON_PATTERN.match(name)
  if not match:
    return False
  return not _ADDRESS_PATTERN.match(match.group("target"))


def is_anonymous_name(name: str) -> bool:
  """Heuristic: does the display name denote an unnamed class, module or metaclass?"""
  return bool(_ANONYMOUS_PATTERN.match(name))


def demodulize(name: str) -> str:
  """
  Last ``.``-separated component of a conventional display name.

  Bracketed display names are returned unchanged.
  """
  if name.startswith("<"):
    return name
  return name.split(".")[-1]


def underscore(name: str) -> str:
  """Converts ``CamelCase`` to ``camel_case`` (used for file name matching)."""
  return _CAMEL_BOUNDARY.sub("_", name).lower()
