"""
Mirror Registry: the identity-preserving factory.

Converts any runtime entity into its mirror and caches the result by identity,
so ``reflect(entity) is reflect(entity)`` holds for as long as the entity is
alive. Lookup-or-create runs under a single re-entrant lock; the lock is
re-entrant because building a method mirror reflects on its owner first.

Entities that accept weak references are tracked with a finalizer and evicted
when collected, so a recycled ``id()`` never maps to a stale mirror. Entities
that do not (ints, strings, tuples) are kept alive by their mirror.
"""

import threading
import weakref
from typing import Any, Callable, Dict, Optional

from live_mirrors.config import MirrorConfig
from live_mirrors.inference.resolver import PackageResolver
from live_mirrors.mirrors import namespace
from live_mirrors.mirrors.class_mirror import ClassMirror
from live_mirrors.mirrors.method_mirror import MethodMirror, is_method_like, locate_method
from live_mirrors.mirrors.object_mirror import ObjectMirror
from live_mirrors.rebind import rebind as _rebind


class MirrorRegistry:
  """
  Process-wide mirror factory.

  Attributes:
      config (MirrorConfig): Settings shared by the mirrors this registry creates.
      resolver (PackageResolver): File attribution used by ``ClassMirror.file()``.
  """

  def __init__(self, config: Optional[MirrorConfig] = None):
    """
    Initializes an empty registry.

    Args:
        config (MirrorConfig, optional): Settings; defaults are used when omitted.
    """
    self.config = config or MirrorConfig()
    self.resolver = PackageResolver(static_fallback=self.config.static_fallback)
    self._cache: Dict[int, ObjectMirror] = {}
    self._lock = threading.RLock()

  def reflect(self, entity: Any) -> ObjectMirror:
    """
    Returns the mirror for ``entity``, creating it on first request.

    Classes and modules get a :class:`ClassMirror`, routines a
    :class:`MethodMirror` (interned in their owner's class mirror when the
    owner can be located), and everything else an :class:`ObjectMirror`.

    Args:
        entity: Any runtime value.

    Returns:
        ObjectMirror: The cached mirror.
    """
    key = id(entity)
    with self._lock:
      mirror = self._cache.get(key)
      if mirror is not None:
        return mirror

      mirror = self._create(entity)
      self._cache[key] = mirror
      self._track(entity, key, mirror)
      return mirror

  def rebind(self, trusted_owner: type, target: Any, operation_name: str) -> Callable[..., Any]:
    """Delegates to :func:`live_mirrors.rebind.rebind`."""
    return _rebind(trusted_owner, target, operation_name)

  def lookup_id(self, subject_id: int) -> Optional[ObjectMirror]:
    """
    The cached mirror for a subject identity, if any.

    Args:
        subject_id (int): The ``subject_id`` of a previously reflected entity.
    """
    with self._lock:
      return self._cache.get(subject_id)

  def reset(self) -> None:
    """Forgets every cached mirror."""
    with self._lock:
      self._cache.clear()

  def __len__(self) -> int:
    with self._lock:
      return len(self._cache)

  def _create(self, entity: Any) -> ObjectMirror:
    if namespace.is_namespace(entity):
      return ClassMirror(entity, self)

    if is_method_like(entity):
      located = locate_method(entity)
      if located is not None:
        owner, key = located
        return self.reflect(owner).method_mirror(key, namespace.own_namespace(owner)[key])
      return MethodMirror(entity, self)

    return ObjectMirror(entity, self)

  def _track(self, entity: Any, key: int, mirror: ObjectMirror) -> None:
    try:
      finalizer = weakref.finalize(entity, self._evict, key, weakref.ref(mirror))
    except TypeError:
      return
    finalizer.atexit = False

  def _evict(self, key: int, mirror_ref: "weakref.ref[ObjectMirror]") -> None:
    with self._lock:
      if self._cache.get(key) is mirror_ref():
        del self._cache[key]


_default_registry: Optional[MirrorRegistry] = None
_default_lock = threading.Lock()


def get_registry() -> MirrorRegistry:
  """
  Returns the process-wide registry, creating it on first use.

  Returns:
      MirrorRegistry: The shared registry.
  """
  global _default_registry
  with _default_lock:
    if _default_registry is None:
      _default_registry = MirrorRegistry()
    return _default_registry


def reset_registry(config: Optional[MirrorConfig] = None) -> MirrorRegistry:
  """
  Replaces the process-wide registry with a fresh one.

  Args:
      config (MirrorConfig, optional): Settings for the new registry.

  Returns:
      MirrorRegistry: The new registry.
  """
  global _default_registry
  with _default_lock:
    _default_registry = MirrorRegistry(config)
    return _default_registry


def reflect(entity: Any) -> ObjectMirror:
  """Reflects ``entity`` through the process-wide registry."""
  return get_registry().reflect(entity)


def rebind(trusted_owner: type, target: Any, operation_name: str) -> Callable[..., Any]:
  """Rebinds through the process-wide registry."""
  return get_registry().rebind(trusted_owner, target, operation_name)
