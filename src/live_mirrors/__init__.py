"""
live-mirrors Package.

A reflection layer that wraps live classes, modules, methods and objects in
stable "mirror" objects, so tools such as debuggers, documentation generators
and object browsers can inspect program structure without running any of the
inspected program's overridden introspection hooks.

Usage
-----

.. code-block:: python

    import live_mirrors

    mirror = live_mirrors.reflect(SomeClass)
    mirror.superclass().name()
    [m.name() for m in mirror.instance_methods()]
    mirror.constant("Outer.LIMIT")

Repeated reflection on the same entity returns the same mirror:

.. code-block:: python

    assert live_mirrors.reflect(SomeClass) is live_mirrors.reflect(SomeClass)
"""

from live_mirrors.config import MirrorConfig
from live_mirrors.enums import FieldKind, MethodKind, Visibility
from live_mirrors.exceptions import (
  ConstantNotFoundError,
  MethodNotFoundError,
  MirrorError,
  NameNotFoundError,
  OperationLookupError,
  UnsupportedOperationError,
)
from live_mirrors.mirrors import ClassMirror, FieldMirror, MethodMirror, ObjectMirror, SourceLocation
from live_mirrors.registry import MirrorRegistry, get_registry, rebind, reflect, reset_registry

__version__ = "0.1.0"

__all__ = [
  "ClassMirror",
  "ConstantNotFoundError",
  "FieldKind",
  "FieldMirror",
  "MethodKind",
  "MethodMirror",
  "MethodNotFoundError",
  "MirrorConfig",
  "MirrorError",
  "MirrorRegistry",
  "NameNotFoundError",
  "ObjectMirror",
  "OperationLookupError",
  "SourceLocation",
  "UnsupportedOperationError",
  "Visibility",
  "__version__",
  "get_registry",
  "rebind",
  "reflect",
  "reset_registry",
]
