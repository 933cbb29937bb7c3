"""
Field Mirror: a view of one named binding.

A field is a constant, a class variable, an instance-variable declaration made
at class level, or an attribute of an arbitrary object. Field mirrors are
interned by their owner, so there is one per name per owning mirror.
"""

from typing import TYPE_CHECKING, Any, Optional

from live_mirrors.enums import FieldKind
from live_mirrors.exceptions import MirrorError
from live_mirrors.mirrors import namespace

if TYPE_CHECKING:
  from live_mirrors.mirrors.object_mirror import ObjectMirror


class FieldMirror:
  """
  Describes a single field.

  Attributes:
      _owner (ObjectMirror): Back-reference to the mirror the field belongs to.
      _name (str): Binding name.
      _kind (FieldKind): Field category.
  """

  def __init__(self, owner: "ObjectMirror", name: str, kind: FieldKind):
    self._owner = owner
    self._name = name
    self._kind = kind

  def name(self) -> str:
    return self._name

  def owner(self) -> "ObjectMirror":
    return self._owner

  def kind(self) -> FieldKind:
    return self._kind

  def is_constant(self) -> bool:
    return self._kind is FieldKind.CONSTANT

  def is_pending(self) -> bool:
    """True if the binding is registered for lazy loading and not loaded yet."""
    subject = self._owner.subject
    if self._kind is FieldKind.INSTANCE_VARIABLE or not namespace.is_namespace(subject):
      return False
    holder = namespace.defining_namespace(subject, self._name) or subject
    return namespace.is_pending(holder, self._name)

  def value(self) -> Optional[Any]:
    """
    The raw bound value.

    Never triggers a lazy load and never invokes descriptors. Declarations
    without a value and pending lazy bindings report None.

    Returns:
        Optional[Any]: The value, or None.
    """
    subject = self._owner.subject
    if self._kind is FieldKind.INSTANCE_VARIABLE:
      attributes = namespace.instance_dict(subject)
      return None if attributes is None else attributes.get(self._name)
    if self._kind is FieldKind.CLASS_INSTANCE_VARIABLE:
      return None

    try:
      raw = namespace.raw_get(subject, self._name, None)
    except MirrorError:
      return None
    if raw is None or namespace.is_pending_value(raw):
      return None
    return raw

  def __repr__(self) -> str:
    return f"<FieldMirror {self._kind.value} {self._name}>"
