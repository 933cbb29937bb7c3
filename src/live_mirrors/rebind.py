"""
Rebinding of trusted implementations onto untrusted subjects.

Inspected classes and modules are arbitrary user code. A metaclass may redefine
``__repr__``, ``__getattribute__`` or ``__subclasses__``; a module may swap its
``__class__`` for a subclass of ``types.ModuleType`` that does the same. Any
structural query that dispatches through the subject would therefore run the
subject's code.

:func:`rebind` sidesteps that by fetching the operation from the *own*
namespace of a trusted builtin (``type``, ``types.ModuleType`` or ``object``)
and binding it to the subject through the descriptor protocol, so the subject's
method table is never consulted.

Usage
-----

.. code-block:: python

    from live_mirrors.rebind import rebind

    mro = rebind(type, SomeClass, "__mro__")()
    children = rebind(type, SomeClass, "__subclasses__")()
"""

from typing import Any, Callable

from live_mirrors.exceptions import OperationLookupError, UnsupportedOperationError

# Descriptors read straight off builtin types. Nothing user-defined can
# intercept attribute access on ``type`` or ``object`` themselves.
_OWN_DICT = type.__dict__["__dict__"]
_MRO = type.__dict__["__mro__"]
_CLASS_OF = object.__dict__["__class__"]


def true_type(obj: Any) -> type:
  """
  Returns the interpreter-level type of an object.

  Unlike ``obj.__class__`` this cannot be spoofed by a property or a custom
  ``__getattribute__``.

  Args:
      obj: Any object.

  Returns:
      type: The object's real type.
  """
  return _CLASS_OF.__get__(obj)


def is_subtype(kind: type, base: type) -> bool:
  """
  Checks whether ``base`` appears in the trusted MRO of ``kind``.

  Comparison is by identity so a hostile ``__eq__`` is never invoked.

  Args:
      kind (type): The candidate subclass.
      base (type): The expected ancestor.

  Returns:
      bool: True if ``kind`` is ``base`` or inherits from it.
  """
  return any(entry is base for entry in _MRO.__get__(kind))


def is_instance(obj: Any, base: type) -> bool:
  """Trusted ``isinstance`` over the real type of ``obj``."""
  return is_subtype(true_type(obj), base)


def _is_data_descriptor(attr: Any) -> bool:
  kind = true_type(attr)
  return any("__set__" in _OWN_DICT.__get__(entry) for entry in _MRO.__get__(kind))


def rebind(trusted_owner: type, target: Any, operation_name: str) -> Callable[..., Any]:
  """
  Binds the trusted implementation of an operation to an arbitrary target.

  The operation is looked up in the own namespace of ``trusted_owner`` only;
  overrides installed by ``target``, its class or its metaclass are ignored.

  Method-like operations (``mro``, ``__subclasses__``, ``__getattribute__``,
  ``__repr__``, ...) are returned bound to ``target``. Data descriptors
  (``__mro__``, ``__bases__``, ``__dict__``, ``__qualname__``, ...) are returned
  as a zero-argument callable that reads the value from ``target`` on each call.

  Args:
      trusted_owner (type): A builtin known to implement ``operation_name`` correctly.
      target: The entity the operation should run against.
      operation_name (str): The attribute name on ``trusted_owner``.

  Returns:
      Callable: The bound operation.

  Raises:
      OperationLookupError: If ``trusted_owner`` does not define ``operation_name``.
      UnsupportedOperationError: If ``target`` is not an instance of ``trusted_owner``.
  """
  if not is_instance(trusted_owner, type):
    raise UnsupportedOperationError(f"Trusted owner must be a type, got {true_type(trusted_owner).__name__}")

  namespace = _OWN_DICT.__get__(trusted_owner)
  if operation_name not in namespace:
    raise OperationLookupError(
      operation_name,
      trusted_owner.__name__,
      f"'{trusted_owner.__name__}' does not define '{operation_name}'",
    )

  if not is_instance(target, trusted_owner):
    raise UnsupportedOperationError(
      f"'{operation_name}' of '{trusted_owner.__name__}' does not apply to a '{true_type(target).__name__}' object"
    )

  attr = namespace[operation_name]
  getter = getattr(true_type(attr), "__get__", None)
  if getter is None:
    # Plain value stored on the owner; nothing to bind.
    return lambda: attr

  if _is_data_descriptor(attr):
    return lambda: getter(attr, target, trusted_owner)

  return getter(attr, target, trusted_owner)
