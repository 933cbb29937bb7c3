"""
Trusted namespace access for classes and modules.

All reads here go through :func:`live_mirrors.rebind.rebind` against ``type`` or
``types.ModuleType`` and then touch the raw namespace mapping directly. No
attribute lookup is dispatched through the subject, so metaclass
``__getattribute__`` overrides, module ``__getattr__`` hooks and lazy loaders
stay untouched unless a caller explicitly asks for a lazy resolution.

Lazily registered bindings come in two flavours:

1.  **PEP 562 modules**: a name advertised in the module's ``__all__`` that is
    missing from its namespace while the module defines ``__getattr__``.
2.  **LazyLoader modules**: a namespace entry that is a module created by
    ``importlib.util.LazyLoader`` and not executed yet.
"""

import importlib.util
import sys
import types
from typing import Any, Iterator, List, Mapping, Optional, Tuple

from live_mirrors.exceptions import ConstantNotFoundError, UnsupportedOperationError
from live_mirrors.rebind import is_instance, is_subtype, rebind, true_type

# LazyLoader swaps the module class for this private subclass until the first
# attribute access executes the module, then restores ModuleType.
_LAZY_MODULE_TYPE = getattr(importlib.util, "_LazyModule", None)

_MISSING = object()


def is_class(entity: Any) -> bool:
  """True if ``entity`` is really a class (its true type derives from ``type``)."""
  return is_instance(entity, type)


def is_module(entity: Any) -> bool:
  """True if ``entity`` is really a module."""
  return is_instance(entity, types.ModuleType)


def is_namespace(entity: Any) -> bool:
  """True for anything a class mirror can wrap (class or module)."""
  return is_class(entity) or is_module(entity)


def own_namespace(entity: Any) -> Mapping[str, Any]:
  """
  Returns the raw namespace mapping of a class or module.

  Args:
      entity: A class or module.

  Returns:
      Mapping[str, Any]: The ``mappingproxy`` of a class or the ``dict`` of a module.

  Raises:
      UnsupportedOperationError: If ``entity`` is neither a class nor a module.
  """
  if is_class(entity):
    return rebind(type, entity, "__dict__")()
  if is_module(entity):
    return rebind(types.ModuleType, entity, "__dict__")()
  raise UnsupportedOperationError(f"'{true_type(entity).__name__}' object has no namespace")


def mro(cls: type) -> Tuple[type, ...]:
  """The trusted method resolution order of a class."""
  return rebind(type, cls, "__mro__")()


def bases(cls: type) -> Tuple[type, ...]:
  """The trusted direct bases of a class."""
  return rebind(type, cls, "__bases__")()


def lookup_chain(entity: Any) -> Tuple[Any, ...]:
  """Namespaces searched for a name: the MRO of a class, the module alone otherwise."""
  if is_class(entity):
    return mro(entity)
  return (entity,)


def is_pending_value(value: Any) -> bool:
  """
  Checks whether a namespace value is an unexecuted ``LazyLoader`` module.

  Only the true type is inspected; reading any attribute would execute the module.
  """
  if _LAZY_MODULE_TYPE is None:
    return False
  return is_subtype(true_type(value), _LAZY_MODULE_TYPE)


def materialize(value: Any) -> Any:
  """
  Executes an unexecuted ``LazyLoader`` module so its namespace is populated.

  Runs the loader's own ``__getattribute__``, the same step the runtime takes
  on the first attribute access. Any other value is returned untouched.

  Args:
      value: A namespace value, possibly a pending lazy module.

  Returns:
      Any: ``value`` itself, executed if it was pending.
  """
  if is_pending_value(value):
    rebind(_LAZY_MODULE_TYPE, value, "__getattribute__")("__name__")
  return value


def advertised_names(entity: Any) -> List[str]:
  """
  Names a module lists in ``__all__``, read from the raw namespace.

  Returns an empty list for classes and for modules without a usable ``__all__``.
  """
  if not is_module(entity):
    return []
  exported = own_namespace(entity).get("__all__", ())
  if not (is_instance(exported, list) or is_instance(exported, tuple)):
    return []
  return [name for name in exported if is_instance(name, str)]


def pending_names(entity: Any) -> List[str]:
  """
  Names registered for lazy loading through a PEP 562 ``__getattr__`` hook.

  Args:
      entity: A class or module.

  Returns:
      List[str]: Advertised names not yet present in the namespace.
  """
  if not is_module(entity):
    return []
  namespace = own_namespace(entity)
  if "__getattr__" not in namespace:
    return []
  return [name for name in advertised_names(entity) if name not in namespace]


def is_pending(entity: Any, name: str) -> bool:
  """
  True if ``name`` is registered on ``entity`` but not materialized yet.

  Args:
      entity: A class or module.
      name (str): Binding name.
  """
  namespace = own_namespace(entity)
  if name in namespace:
    return is_pending_value(namespace[name])
  return name in pending_names(entity)


def raw_get(entity: Any, name: str, default: Any = _MISSING) -> Any:
  """
  Reads a binding from the lookup chain without descriptor or hook dispatch.

  Args:
      entity: A class or module.
      name (str): Binding name.
      default: Value returned when nothing binds ``name``.

  Returns:
      Any: The raw value stored in the first namespace that binds ``name``.

  Raises:
      ConstantNotFoundError: If ``name`` is unbound and no default was given.
  """
  for namespace_owner in lookup_chain(entity):
    namespace = own_namespace(namespace_owner)
    if name in namespace:
      return namespace[name]
  if default is not _MISSING:
    return default
  raise ConstantNotFoundError(name)


def defining_namespace(entity: Any, name: str) -> Optional[Any]:
  """The first class (or the module itself) in the lookup chain that binds ``name``."""
  for namespace_owner in lookup_chain(entity):
    if name in own_namespace(namespace_owner):
      return namespace_owner
  return None


def is_defined(entity: Any, name: str) -> bool:
  """
  Checks whether ``name`` is bound on ``entity`` or registered for lazy loading.

  Never triggers a lazy load.
  """
  return defining_namespace(entity, name) is not None or name in pending_names(entity)


def const_get(entity: Any, name: str) -> Any:
  """
  Resolves a constant the way the runtime would, allowing lazy loads.

  Searches the own namespace (then the MRO for classes). For modules, falls
  back to the trusted ``ModuleType.__getattribute__``, which consults the
  module's PEP 562 ``__getattr__`` hook and may therefore import code.

  Args:
      entity: A class or module.
      name (str): Constant name.

  Returns:
      Any: The resolved value.

  Raises:
      ConstantNotFoundError: If ``name`` cannot be resolved.
      UnsupportedOperationError: If ``entity`` is not a class or module.
  """
  value = raw_get(entity, name, _MISSING)
  if value is not _MISSING:
    return value

  if is_module(entity) and "__getattr__" in own_namespace(entity):
    try:
      return rebind(types.ModuleType, entity, "__getattribute__")(name)
    except AttributeError as e:
      raise ConstantNotFoundError(name) from e

  raise ConstantNotFoundError(name)


def instance_dict(obj: Any) -> Optional[Mapping[str, Any]]:
  """
  The attribute dictionary of an arbitrary object, read without running its code.

  Only the interpreter's own ``__dict__`` slot descriptor is trusted. A class
  that replaces ``__dict__`` with a property or any other object hides the
  instance dictionary, and None is returned.

  Args:
      obj: Any value.

  Returns:
      Optional[Mapping[str, Any]]: The instance dictionary, or None.
  """
  kind = true_type(obj)
  for entry in mro(kind):
    slot = own_namespace(entry).get("__dict__", _MISSING)
    if slot is _MISSING:
      continue
    if true_type(slot) is not types.GetSetDescriptorType:
      return None
    try:
      return slot.__get__(obj, kind)
    except (AttributeError, TypeError):
      return None
  return None


def iter_own(entity: Any) -> Iterator[Tuple[str, Any]]:
  """Iterates a snapshot of the own namespace as ``(name, value)`` pairs."""
  yield from list(own_namespace(entity).items())


def defining_module(entity: Any) -> Optional[types.ModuleType]:
  """
  The module an entity was defined in, looked up in ``sys.modules``.

  Args:
      entity: A class or module.

  Returns:
      Optional[ModuleType]: The module, the entity itself for modules, or None.
  """
  if is_module(entity):
    return entity
  module_name = rebind(type, entity, "__module__")()
  if not is_instance(module_name, str):
    return None
  module = sys.modules.get(module_name)
  if module is None or not is_module(module):
    return None
  return module


def live_classes() -> List[type]:
  """
  Every live class reachable from ``object`` through the trusted ``__subclasses__``.

  Returns:
      List[type]: Classes in discovery order, each listed once.
  """
  seen = set()
  found: List[type] = []
  pending: List[type] = [object]
  while pending:
    for child in rebind(type, pending.pop(), "__subclasses__")():
      if id(child) in seen:
        continue
      seen.add(id(child))
      found.append(child)
      pending.append(child)
  return found
