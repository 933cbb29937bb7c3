"""
Enumerations for live-mirrors.

This module defines the tags attached to field and method mirrors.
"""

from enum import Enum


class FieldKind(str, Enum):
  """
  Categorization of a field mirror.

  The first three kinds describe class-level bindings; ``INSTANCE_VARIABLE``
  describes attributes dumped from an arbitrary object.
  """

  CONSTANT = "constant"
  CLASS_VARIABLE = "class_variable"
  CLASS_INSTANCE_VARIABLE = "class_instance_variable"  # __slots__ / bare annotations
  INSTANCE_VARIABLE = "instance_variable"


class Visibility(str, Enum):
  """
  Visibility of a method, derived from Python naming conventions.
  """

  PUBLIC = "public"  # plain names and dunders
  PROTECTED = "protected"  # _name
  PRIVATE = "private"  # __name (mangled)


class MethodKind(str, Enum):
  """
  How a method is bound on its owner.
  """

  INSTANCE = "instance"
  CLASS = "class"
  STATIC = "static"
  BUILTIN = "builtin"  # implemented in C, no Python code object
