"""
Mirror types.

Mirrors are created by :class:`live_mirrors.registry.MirrorRegistry`; obtain
them through :func:`live_mirrors.reflect` rather than instantiating directly.
"""

from live_mirrors.mirrors.class_mirror import ClassMirror
from live_mirrors.mirrors.field_mirror import FieldMirror
from live_mirrors.mirrors.method_mirror import MethodMirror, SourceLocation
from live_mirrors.mirrors.object_mirror import ObjectMirror

__all__ = [
  "ClassMirror",
  "FieldMirror",
  "MethodMirror",
  "ObjectMirror",
  "SourceLocation",
]
