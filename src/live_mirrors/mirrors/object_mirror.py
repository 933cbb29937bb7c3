"""
Object Mirror: the base of every mirror.

Wraps an arbitrary value and answers the questions that apply to any object:
its identity, its trusted representation, its real class and its instance
attributes. Class, field-bearing and method mirrors build on this.
"""

import threading
import weakref
from typing import TYPE_CHECKING, Any, Callable, Dict, List

from live_mirrors.enums import FieldKind
from live_mirrors.exceptions import MirrorError
from live_mirrors.mirrors import namespace
from live_mirrors.mirrors.field_mirror import FieldMirror
from live_mirrors.rebind import rebind, true_type

if TYPE_CHECKING:
  from live_mirrors.mirrors.class_mirror import ClassMirror
  from live_mirrors.registry import MirrorRegistry


def _hold(subject: Any, weak: bool) -> Callable[[], Any]:
  """Returns a dereferencing callable, weak where the subject allows it."""
  if weak:
    try:
      return weakref.ref(subject)
    except TypeError:
      pass
  return lambda: subject


class ObjectMirror:
  """
  Generic mirror for any runtime value.

  Attributes:
      _registry (MirrorRegistry): The registry that created this mirror.
      _subject_id (int): ``id()`` of the subject at creation time.
  """

  def __init__(self, subject: Any, registry: "MirrorRegistry", weak: bool = True):
    """
    Initializes the mirror. Use :func:`live_mirrors.reflect` instead of calling this.

    Args:
        subject: The value to reflect on.
        registry (MirrorRegistry): Factory used to wrap query results.
        weak (bool): Hold the subject through a weak reference when it supports one.
    """
    self._registry = registry
    self._subject_id = id(subject)
    self._subject_ref = _hold(subject, weak)
    self._is_weak = isinstance(self._subject_ref, weakref.ref)
    self._variable_mirrors: Dict[str, FieldMirror] = {}
    self._variable_lock = threading.Lock()

  @property
  def subject(self) -> Any:
    """
    The reflected value.

    Raises:
        MirrorError: If the subject was weakly held and has been collected.
    """
    subject = self._subject_ref()
    if subject is None and self._is_weak:
      raise MirrorError(f"Subject {self._subject_id:#x} has been garbage collected")
    return subject

  @property
  def subject_id(self) -> int:
    """The identity of the subject; stable for the subject's lifetime."""
    return self._subject_id

  @property
  def registry(self) -> "MirrorRegistry":
    return self._registry

  def name(self) -> str:
    """The subject's default ``object.__repr__``, ignoring any override."""
    return rebind(object, self.subject, "__repr__")()

  def target_class(self) -> "ClassMirror":
    """Mirror of the subject's real class."""
    return self._registry.reflect(true_type(self.subject))

  def variables(self) -> List[FieldMirror]:
    """
    Instance attributes stored in the subject's ``__dict__``.

    A class-level ``__dict__`` override is never called; it hides the
    attributes instead.

    Returns:
        List[FieldMirror]: One mirror per attribute, interned by name.
    """
    attributes = namespace.instance_dict(self.subject)
    if attributes is None:
      return []

    mirrors = []
    for name in list(attributes):
      with self._variable_lock:
        mirror = self._variable_mirrors.setdefault(name, FieldMirror(self, name, FieldKind.INSTANCE_VARIABLE))
      mirrors.append(mirror)
    return mirrors

  def __repr__(self) -> str:
    return f"<{type(self).__name__} subject_id={self._subject_id:#x}>"
