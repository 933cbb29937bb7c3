"""
Class Mirror: structural reflection over a class or module.

We are careful never to dispatch through the subject here, since people really
like to override odd things on their classes. Every read goes through
:func:`live_mirrors.rebind.rebind` against ``type``, ``types.ModuleType`` or
``object`` (via the helpers in :mod:`live_mirrors.mirrors.namespace`), so a
metaclass redefining ``__repr__``, ``__getattribute__`` or ``__subclasses__``
does not change the answers.

Method and field mirrors are interned per class mirror: asking twice for the
same name returns the same mirror instance.

Mapping of the structural vocabulary onto Python:

*   **ancestors**: the trusted ``__mro__`` (``[module]`` for a module).
*   **superclass**: the first direct base.
*   **mixins**: MRO entries that are not on the first-base chain.
*   **singleton class**: the subject's real metaclass (or module type).
*   **constants**: own bindings whose name starts with an uppercase letter,
    plus names a module registers for lazy loading.
*   **class methods**: ``classmethod``/``staticmethod`` entries of a class, or
    the functions a module defines.
"""

import logging
import sys
import threading
import types
from typing import Any, Dict, Iterable, List, Optional, Tuple

from live_mirrors.enums import FieldKind, Visibility
from live_mirrors.exceptions import ConstantNotFoundError, MethodNotFoundError, UnsupportedOperationError
from live_mirrors.mirrors import namespace
from live_mirrors.mirrors.field_mirror import FieldMirror
from live_mirrors.mirrors.method_mirror import (
  MethodMirror,
  is_class_level,
  is_defined_in_module,
  is_instance_level,
  is_method_like,
)
from live_mirrors.mirrors.naming import demodulize, display_name, is_anonymous_name, is_singleton_name
from live_mirrors.mirrors.object_mirror import ObjectMirror
from live_mirrors.rebind import is_instance, rebind, true_type

logger = logging.getLogger(__name__)

_IGNORED_SLOTS = {"__dict__", "__weakref__"}

# Compiler-generated bindings for deferred annotations.
_SYNTHETIC_NAMES = {"__annotate__", "__annotate_func__", "__annotations_cache__"}


def _is_dunder(name: str) -> bool:
  return name.startswith("__") and name.endswith("__")


def is_constant_name(name: str) -> bool:
  """Constants start with an uppercase letter (``MAX_AGE``, ``Inner``)."""
  return name[:1].isalpha() and name[:1].isupper()


def _is_plain_data(value: Any) -> bool:
  """Values that are neither descriptors nor namespaces."""
  kind = true_type(value)
  if namespace.is_module(value):
    return False
  return not any("__get__" in namespace.own_namespace(entry) for entry in namespace.mro(kind))


class ClassMirror(ObjectMirror):
  """
  Mirror of a class or module.

  The subject is held weakly; the mirror does not keep it alive.

  Attributes:
      _field_mirrors (Dict[str, FieldMirror]): Interned field mirrors by name.
      _method_mirrors (Dict[str, MethodMirror]): Interned method mirrors by name.
  """

  def __init__(self, subject: Any, registry: Any):
    """
    Initializes the mirror. Use :func:`live_mirrors.reflect` instead of calling this.

    Args:
        subject: The class or module.
        registry (MirrorRegistry): Factory used to wrap query results.

    Raises:
        UnsupportedOperationError: If ``subject`` is neither a class nor a module.
    """
    if not namespace.is_namespace(subject):
      raise UnsupportedOperationError(f"Cannot build a class mirror for a '{true_type(subject).__name__}' object")
    super().__init__(subject, registry)
    self._field_mirrors: Dict[str, FieldMirror] = {}
    self._method_mirrors: Dict[str, MethodMirror] = {}
    self._intern_lock = threading.Lock()

  # --- Provenance ---

  def file(self) -> Optional[str]:
    """
    The primary defining file of this class or module.

    Necessarily best-effort, but right in simple cases.

    Returns:
        Optional[str]: Path on disk, if determinable.
    """
    return self._registry.resolver.resolve(self)

  def package(self) -> Optional["ClassMirror"]:
    """
    Mirror of the top-level package the subject was defined in.

    Returns:
        Optional[ClassMirror]: The package module's mirror, or None if it is not loaded.
    """
    module = namespace.defining_module(self.subject)
    if module is None:
      return None
    module_name = namespace.own_namespace(module).get("__name__")
    if not is_instance(module_name, str):
      return None
    root = sys.modules.get(module_name.split(".")[0])
    if root is None or not namespace.is_module(root):
      return None
    return self._registry.reflect(root)

  def source_files(self) -> List[str]:
    """
    The source files the subject's own instance methods are defined in.

    For a module, its functions stand in for instance methods. Methods
    without a location (C implementations, code compiled from strings) are
    skipped.

    Returns:
        List[str]: Distinct file paths, in method order.
    """
    methods = self.instance_methods() if self.is_class() else self.class_methods()
    files: List[str] = []
    for method in methods:
      location = method.source_location()
      if location is not None and location.file not in files:
        files.append(location.file)
    return files

  # --- Kind ---

  def is_class(self) -> bool:
    """True if the subject is a class, as opposed to a module."""
    return namespace.is_class(self.subject)

  def name(self) -> str:
    """
    The subject's display name.

    ``__qualname__`` for reachable classes, ``__name__`` for registered
    modules, ``<metaclass ...>`` for metaclasses, and an address-bearing
    ``<class 0x...>``/``<module 0x...>`` for anything without a usable name.
    """
    return display_name(self.subject)

  def demodulized_name(self) -> str:
    """Last ``.``-separated component of :meth:`name`."""
    return demodulize(self.name())

  def is_singleton_class(self) -> bool:
    """
    Heuristic: is the subject the singleton (metaclass) level of some class?

    Derived from :meth:`name`, so exotic naming can yield a false negative.
    """
    return is_singleton_name(self.name())

  def is_anonymous(self) -> bool:
    """Heuristic: was the subject never bound to a reachable name?"""
    return is_anonymous_name(self.name())

  def singleton_class(self) -> "ClassMirror":
    """Mirror of the subject's real metaclass (or module type)."""
    return self._registry.reflect(true_type(self.subject))

  # --- Fields ---

  def fields(self) -> List[FieldMirror]:
    """All constants, class variables and class instance variables."""
    return self.constants() + self.class_variables() + self.class_instance_variables()

  def constants(self) -> List[FieldMirror]:
    """
    The constants defined directly on the subject.

    Includes nested classes and modules and, for modules, names registered
    for lazy loading.

    Returns:
        List[FieldMirror]: Interned constant mirrors.
    """
    names = [name for name, _ in namespace.iter_own(self.subject) if is_constant_name(name)]
    names += [name for name in namespace.pending_names(self.subject) if is_constant_name(name)]
    return [self.field_mirror(name, FieldKind.CONSTANT) for name in names]

  def class_variables(self) -> List[FieldMirror]:
    """
    Plain data bound directly on the subject that is not a constant.

    Routines, descriptors, modules and dunders are excluded.
    """
    names = [
      name
      for name, value in namespace.iter_own(self.subject)
      if not _is_dunder(name) and not is_constant_name(name) and _is_plain_data(value)
    ]
    return [self.field_mirror(name, FieldKind.CLASS_VARIABLE) for name in names]

  def class_instance_variables(self) -> List[FieldMirror]:
    """
    Instance variables declared at class level.

    Own ``__slots__`` entries plus own annotations that have no bound value.
    """
    own = namespace.own_namespace(self.subject)
    names: List[str] = []
    for name in self._own_slots():
      if name not in _IGNORED_SLOTS and name not in names:
        names.append(name)
    for name in self._own_annotations():
      if name not in own and name not in names:
        names.append(name)
    return [self.field_mirror(name, FieldKind.CLASS_INSTANCE_VARIABLE) for name in names]

  def variables(self) -> List[FieldMirror]:
    """For a class, the object-level variables are its class instance variables."""
    return self.class_instance_variables()

  def constant(self, path: str) -> Optional[FieldMirror]:
    """
    Searches for a named constant, optionally through a ``.``-separated path.

    Each segment but the last is resolved as the runtime would, which *may*
    trigger a lazy import. The last segment must be defined (or registered for
    lazy loading) and is returned as a field mirror without being loaded.

    Args:
        path (str): E.g. ``"MAX_AGE"`` or ``"Outer.Inner.LIMIT"``.

    Returns:
        Optional[FieldMirror]: The constant, or None if any segment is undefined.
    """
    segments = str(path).split(".")
    container = self.subject
    try:
      for segment in segments[:-1]:
        container = namespace.materialize(namespace.const_get(container, segment))
      last = segments[-1]
      if not namespace.is_defined(container, last):
        raise ConstantNotFoundError(last, display_name(container))
    except (ConstantNotFoundError, UnsupportedOperationError) as e:
      logger.debug("No constant '%s' on %s: %s", path, self.name(), e)
      return None

    holder = namespace.defining_namespace(container, last) or container
    owner = self if holder is self.subject else self._registry.reflect(holder)
    return owner.field_mirror(last, owner._field_kind(last))

  # --- Ancestry ---

  def ancestors(self) -> List["ClassMirror"]:
    """The full lookup chain, starting with the subject itself."""
    return self._mirrors(namespace.lookup_chain(self.subject))

  def superclass(self) -> Optional["ClassMirror"]:
    """
    The direct superclass (the first base).

    Returns:
        Optional[ClassMirror]: The superclass, or None for ``object``.

    Raises:
        UnsupportedOperationError: If the subject is a module.
    """
    parents = namespace.bases(self.subject)
    if not parents:
      return None
    return self._registry.reflect(parents[0])

  def mixins(self) -> List["ClassMirror"]:
    """Ancestors mixed in beside the superclass chain."""
    if not self.is_class():
      return []
    chain = self._superclass_chain()
    return self._mirrors(entry for entry in namespace.mro(self.subject) if not any(entry is link for link in chain))

  def subclasses(self) -> List["ClassMirror"]:
    """
    Live classes whose superclass (first base) is the subject.

    Scans every live class, so the cost grows with the whole program rather
    than the subject. The answer is a snapshot; classes may be created or
    collected right after.
    """
    if not self.is_class():
      return []
    subject = self.subject
    children = []
    for cls in namespace.live_classes():
      parents = namespace.bases(cls)
      if parents and parents[0] is subject:
        children.append(cls)
    return self._mirrors(children)

  # --- Nesting ---

  def nesting(self) -> List["ClassMirror"]:
    """
    The lexical nesting chain, innermost first.

    Resolves every prefix of :meth:`name` from the defining module (classes)
    or from ``sys.modules`` (modules). Falls back to ``[self]`` when any
    segment does not resolve, e.g. for anonymous subjects.
    """
    segments = self.name().split(".")
    chain: List[Any] = []
    try:
      if self.is_class():
        container = namespace.defining_module(self.subject)
        if container is None:
          raise ConstantNotFoundError(segments[0])
      else:
        container = sys.modules.get(segments[0])
        if container is None or not namespace.is_module(container):
          raise ConstantNotFoundError(segments[0])
        chain.append(container)
        segments = segments[1:]

      for segment in segments:
        container = namespace.const_get(namespace.materialize(container), segment)
        chain.append(container)
    except (ConstantNotFoundError, UnsupportedOperationError):
      return [self]

    return self._mirrors(reversed(chain))

  def nested_classes(self) -> List["ClassMirror"]:
    """
    Classes and modules bound as constants of the subject, sorted by name.

    Bindings registered for lazy loading are skipped without being resolved.
    """
    nested = []
    own = namespace.own_namespace(self.subject)
    for name in list(own):
      if not is_constant_name(name):
        continue
      value = own[name]
      if namespace.is_pending_value(value):
        continue
      if namespace.is_namespace(value):
        nested.append(value)
    return sorted(self._mirrors(nested), key=lambda mirror: mirror.name())

  def nested_class_count(self) -> int:
    return len(self.nested_classes())

  # --- Methods ---

  def instance_methods(self) -> List[MethodMirror]:
    """
    Methods defined directly on the subject and called through its instances.

    Public and protected methods come first, then private ones, each sorted
    by name. Modules have no instance methods.
    """
    if not self.is_class():
      return []
    return self._sorted_methods((name, value) for name, value in self._own_entries() if is_instance_level(value))

  def class_methods(self) -> List[MethodMirror]:
    """
    Methods defined directly on the subject and called on the subject itself.

    For a class: its ``classmethod``/``staticmethod`` entries. For a module:
    the functions it defines. Ordered like :meth:`instance_methods`.
    """
    subject = self.subject
    if self.is_class():
      entries = ((name, value) for name, value in self._own_entries() if is_class_level(value))
    else:
      entries = ((name, value) for name, value in self._own_entries() if is_defined_in_module(value, subject))
    return self._sorted_methods(entries)

  def instance_method(self, name: str) -> MethodMirror:
    """
    The instance method of this class or any ancestor bound to ``name``.

    Modules have no instance methods, so this always raises for a module;
    its functions are found through :meth:`class_method`.

    Args:
        name (str): Method name; ``__private`` names are mangled automatically.

    Returns:
        MethodMirror: The interned method mirror of the defining class.

    Raises:
        MethodNotFoundError: If no ancestor binds an instance method under ``name``,
          or the subject is a module.
    """
    if not self.is_class():
      raise MethodNotFoundError(name, self.name())

    for key in self._candidate_keys(name):
      holder = namespace.defining_namespace(self.subject, key)
      if holder is None:
        continue
      raw = namespace.own_namespace(holder)[key]
      if is_instance_level(raw):
        return self._registry.reflect(holder).method_mirror(key, raw)
      break
    raise MethodNotFoundError(name, self.name())

  def class_method(self, name: str) -> MethodMirror:
    """
    The class-level method bound to ``name`` on the subject or its ancestors.

    Searches the subject's lookup chain for class-level methods first, then
    the metaclass (or module type) chain, like attribute lookup on the class
    object would.

    Args:
        name (str): Method name.

    Returns:
        MethodMirror: The interned method mirror of the defining namespace.

    Raises:
        MethodNotFoundError: If nothing defines ``name``.
    """
    subject = self.subject
    for key in self._candidate_keys(name):
      holder = namespace.defining_namespace(subject, key)
      if holder is None:
        continue
      raw = namespace.own_namespace(holder)[key]
      if is_class_level(raw) or (not self.is_class() and is_method_like(raw)):
        return self._registry.reflect(holder).method_mirror(key, raw)
      break

    for meta in namespace.mro(true_type(subject)):
      own = namespace.own_namespace(meta)
      if name in own and is_method_like(own[name]):
        return self._registry.reflect(meta).method_mirror(name, own[name])
    raise MethodNotFoundError(name, self.name())

  # --- Interning ---

  def intern_field_mirror(self, mirror: FieldMirror) -> FieldMirror:
    """Stores ``mirror`` unless one is already interned under its name; returns the interned one."""
    with self._intern_lock:
      return self._field_mirrors.setdefault(mirror.name(), mirror)

  def intern_method_mirror(self, mirror: MethodMirror) -> MethodMirror:
    """Stores ``mirror`` unless one is already interned under its name; returns the interned one."""
    with self._intern_lock:
      return self._method_mirrors.setdefault(mirror.name(), mirror)

  def field_mirror(self, name: str, kind: FieldKind) -> FieldMirror:
    """The interned field mirror for ``name``, created with ``kind`` on first request."""
    existing = self._field_mirrors.get(name)
    if existing is not None:
      return existing
    return self.intern_field_mirror(FieldMirror(self, name, kind))

  def method_mirror(self, name: str, raw: Any) -> MethodMirror:
    """The interned method mirror for ``name``, wrapping ``raw`` on first request."""
    existing = self._method_mirrors.get(name)
    if existing is not None:
      return existing
    return self.intern_method_mirror(MethodMirror(raw, self._registry, name=name, owner=self))

  # --- Internals ---

  def _own_entries(self) -> List[Tuple[str, Any]]:
    return [(name, value) for name, value in namespace.iter_own(self.subject) if name not in _SYNTHETIC_NAMES]

  def _mirrors(self, entities: Iterable[Any]) -> List["ClassMirror"]:
    return [self._registry.reflect(entity) for entity in entities]

  def _superclass_chain(self) -> List[type]:
    chain = [self.subject]
    parents = namespace.bases(self.subject)
    while parents:
      chain.append(parents[0])
      parents = namespace.bases(parents[0])
    return chain

  def _sorted_methods(self, entries: Iterable[Tuple[str, Any]]) -> List[MethodMirror]:
    mirrors = [self.method_mirror(name, raw) for name, raw in entries]
    public = sorted((m for m in mirrors if m.visibility() is not Visibility.PRIVATE), key=lambda m: m.name())
    private = sorted((m for m in mirrors if m.visibility() is Visibility.PRIVATE), key=lambda m: m.name())
    return public + private

  def _candidate_keys(self, name: str) -> List[str]:
    keys = [name]
    if self.is_class() and name.startswith("__") and not name.endswith("__"):
      owner_name = rebind(type, self.subject, "__name__")().lstrip("_")
      keys.append(f"_{owner_name}{name}")
    return keys

  def _field_kind(self, name: str) -> FieldKind:
    if is_constant_name(name):
      return FieldKind.CONSTANT
    if name in self._own_slots() or (name in self._own_annotations() and name not in namespace.own_namespace(self.subject)):
      return FieldKind.CLASS_INSTANCE_VARIABLE
    return FieldKind.CLASS_VARIABLE

  def _own_slots(self) -> List[str]:
    if not self.is_class():
      return []
    slots = namespace.own_namespace(self.subject).get("__slots__", ())
    if is_instance(slots, str):
      return [slots]
    try:
      return [slot for slot in slots if is_instance(slot, str)]
    except TypeError:
      return []

  def _own_annotations(self) -> Dict[str, Any]:
    own = namespace.own_namespace(self.subject)
    annotations = own.get("__annotations__")
    if is_instance(annotations, dict):
      return annotations
    if "__annotate__" not in own and "__annotate_func__" not in own:
      return {}

    # Deferred annotations: evaluate through the trusted getter.
    owner = type if self.is_class() else types.ModuleType
    try:
      evaluated = rebind(owner, self.subject, "__annotations__")()
    except NameError as e:
      logger.debug("Unresolvable annotations on %s: %s", self.name(), e)
      return {}
    return evaluated if is_instance(evaluated, dict) else {}

  def __repr__(self) -> str:
    return f"<ClassMirror {self.name()}>"
