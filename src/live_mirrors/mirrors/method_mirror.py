"""
Method Mirror: a view of one method bound to a class, metaclass or module.

Also hosts the classification helpers that decide which namespace entries
count as instance-level or class-level methods, and the owner inference the
registry uses when it is handed a bare function.
"""

import inspect
import sys
import types
from typing import TYPE_CHECKING, Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from live_mirrors.enums import MethodKind, Visibility
from live_mirrors.exceptions import MirrorError
from live_mirrors.mirrors import namespace
from live_mirrors.mirrors.object_mirror import ObjectMirror
from live_mirrors.rebind import is_instance, is_subtype, rebind, true_type

if TYPE_CHECKING:
  from live_mirrors.mirrors.class_mirror import ClassMirror
  from live_mirrors.registry import MirrorRegistry

# Routines that receive the instance when called through it.
INSTANCE_LEVEL_TYPES = (
  types.FunctionType,
  types.MethodDescriptorType,
  types.WrapperDescriptorType,
)

# Routines that live in a class namespace but are called on the class itself.
CLASS_LEVEL_TYPES = (
  classmethod,
  staticmethod,
  types.ClassMethodDescriptorType,
  types.BuiltinFunctionType,
)

_BOUND_TYPES = (types.MethodType, types.MethodWrapperType)

_DESCRIPTOR_TYPES = (
  types.MethodDescriptorType,
  types.WrapperDescriptorType,
  types.ClassMethodDescriptorType,
)


def _is_any(entity: Any, kinds: Tuple[type, ...]) -> bool:
  kind = true_type(entity)
  return any(is_subtype(kind, candidate) for candidate in kinds)


def is_instance_level(entity: Any) -> bool:
  """True for plain functions and C method/slot descriptors."""
  return _is_any(entity, INSTANCE_LEVEL_TYPES)


def is_class_level(entity: Any) -> bool:
  """True for ``classmethod``/``staticmethod`` objects and their C counterparts."""
  return _is_any(entity, CLASS_LEVEL_TYPES)


def is_method_like(entity: Any) -> bool:
  """True for anything the registry should wrap in a :class:`MethodMirror`."""
  return _is_any(entity, INSTANCE_LEVEL_TYPES + CLASS_LEVEL_TYPES + _BOUND_TYPES)


def unwrap_method(entity: Any) -> Any:
  """
  Strips ``classmethod``, ``staticmethod`` and bound-method wrappers.

  Args:
      entity: A namespace entry or bound method.

  Returns:
      Any: The underlying function, or ``entity`` itself.
  """
  for wrapper in (classmethod, staticmethod, types.MethodType):
    if is_instance(entity, wrapper):
      return rebind(wrapper, entity, "__func__")()
  return entity


def is_defined_in_module(entity: Any, module: types.ModuleType) -> bool:
  """
  Checks whether a module-level routine was defined by ``module`` (not imported).

  Args:
      entity: A value from the module namespace.
      module (ModuleType): The module being reflected.
  """
  if is_instance(entity, types.FunctionType):
    module_name = namespace.own_namespace(module).get("__name__")
    return rebind(types.FunctionType, entity, "__module__")() == module_name
  if is_instance(entity, types.BuiltinFunctionType):
    return rebind(types.BuiltinFunctionType, entity, "__self__")() is module
  return False


def visibility_of(name: str, owner_name: Optional[str] = None) -> Visibility:
  """
  Derives visibility from naming conventions.

  Name-mangled entries (``_Owner__name``) and non-dunder ``__name`` are private,
  a single leading underscore is protected, everything else is public.

  Args:
      name (str): The namespace key.
      owner_name (str, optional): ``__name__`` of the owning class, for mangling.

  Returns:
      Visibility: The derived visibility.
  """
  if name.startswith("__") and name.endswith("__"):
    return Visibility.PUBLIC
  if name.startswith("__"):
    return Visibility.PRIVATE
  if owner_name and name.startswith(f"_{owner_name.lstrip('_')}__"):
    return Visibility.PRIVATE
  if name.startswith("_"):
    return Visibility.PROTECTED
  return Visibility.PUBLIC


def locate_method(entity: Any) -> Optional[Tuple[Any, str]]:
  """
  Infers the namespace that binds a routine and the key it is bound under.

  Functions are located through ``__module__``/``__qualname__``, C descriptors
  through ``__objclass__`` and builtin functions through ``__self__``. The
  candidate namespace is then scanned for an entry wrapping the same function.

  Args:
      entity: A routine or bound method.

  Returns:
      Optional[Tuple[Any, str]]: ``(owner, key)`` or None if the owner cannot be found.
  """
  func = unwrap_method(entity)
  container = None

  if is_instance(func, types.FunctionType):
    module = sys.modules.get(rebind(types.FunctionType, func, "__module__")())
    container = module
    qualname = rebind(types.FunctionType, func, "__qualname__")()
    for segment in qualname.split(".")[:-1]:
      if container is None or not namespace.is_namespace(container):
        return None
      container = namespace.own_namespace(container).get(segment)
  elif _is_any(func, _DESCRIPTOR_TYPES):
    container = rebind(true_type(func), func, "__objclass__")()
  elif is_instance(func, types.BuiltinFunctionType):
    container = rebind(types.BuiltinFunctionType, func, "__self__")()

  if container is None or not namespace.is_namespace(container):
    return None

  for key, value in namespace.iter_own(container):
    if value is entity or value is func or unwrap_method(value) is func:
      return container, key
  return None


class SourceLocation(BaseModel):
  """
  Where a method's code lives on disk.
  """

  model_config = ConfigDict(frozen=True)

  file: str
  line: int


class MethodMirror(ObjectMirror):
  """
  Mirror of a single method.

  The subject is the raw namespace entry (function, ``classmethod`` object, C
  descriptor). It is held strongly: a method mirror outlives a redefinition
  of the method it describes.
  """

  def __init__(
    self,
    subject: Any,
    registry: "MirrorRegistry",
    name: Optional[str] = None,
    owner: Optional["ClassMirror"] = None,
  ):
    """
    Args:
        subject: The raw routine.
        registry (MirrorRegistry): Owning registry.
        name (str, optional): Namespace key; derived from ``__name__`` when omitted.
        owner (ClassMirror, optional): Mirror of the class or module binding the method.
    """
    super().__init__(subject, registry, weak=False)
    self._owner = owner
    self._name = name or self._routine_name()

  def _routine_name(self) -> str:
    func = unwrap_method(self.subject)
    try:
      return rebind(true_type(func), func, "__name__")()
    except MirrorError:
      return "<unknown>"

  def name(self) -> str:
    return self._name

  def owner(self) -> Optional["ClassMirror"]:
    return self._owner

  def unwrapped(self) -> Any:
    """The underlying function with wrappers stripped."""
    return unwrap_method(self.subject)

  def kind(self) -> MethodKind:
    """How the method is bound on its owner."""
    subject = self.subject
    if is_instance(subject, classmethod) or is_instance(subject, types.ClassMethodDescriptorType):
      return MethodKind.CLASS
    if is_instance(subject, staticmethod):
      return MethodKind.STATIC
    if is_instance(subject, types.MethodType):
      receiver = rebind(types.MethodType, subject, "__self__")()
      return MethodKind.CLASS if namespace.is_class(receiver) else MethodKind.INSTANCE
    if is_instance(subject, types.FunctionType):
      if self._owner is not None and not self._owner.is_class():
        return MethodKind.STATIC
      return MethodKind.INSTANCE
    return MethodKind.BUILTIN

  def visibility(self) -> Visibility:
    owner_name = None
    if self._owner is not None and self._owner.is_class():
      owner_name = rebind(type, self._owner.subject, "__name__")()
    return visibility_of(self._name, owner_name)

  def source_location(self) -> Optional[SourceLocation]:
    """
    Resolves the file and first line of the method's code.

    Follows ``__wrapped__`` chains left by decorators. Natively implemented
    methods and code compiled from strings have no location.

    Returns:
        Optional[SourceLocation]: The location, or None when unknown.
    """
    func = self.unwrapped()
    try:
      func = inspect.unwrap(func)
    except ValueError:
      pass

    if not is_instance(func, types.FunctionType):
      return None

    code = rebind(types.FunctionType, func, "__code__")()
    filename = code.co_filename
    if not filename or (filename.startswith("<") and filename.endswith(">")):
      return None
    return SourceLocation(file=filename, line=code.co_firstlineno)

  def file(self) -> Optional[str]:
    location = self.source_location()
    return location.file if location else None

  def line(self) -> Optional[int]:
    location = self.source_location()
    return location.line if location else None

  def signature(self) -> Optional[inspect.Signature]:
    """Best-effort signature; None for callables ``inspect`` cannot describe."""
    try:
      return inspect.signature(self.unwrapped())
    except (ValueError, TypeError):
      return None

  def docstring(self) -> Optional[str]:
    return inspect.getdoc(self.unwrapped())

  def __repr__(self) -> str:
    owner = self._owner.name() if self._owner is not None else "?"
    return f"<MethodMirror {owner}.{self._name}>"
