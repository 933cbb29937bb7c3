"""
Error taxonomy for live-mirrors.

Every failure raised by a mirror query derives from :class:`MirrorError`, and
additionally from the builtin exception that best describes it, so callers can
catch either ``LookupError``/``TypeError`` or the mirror-specific class.

Heuristic queries (singleton/anonymous classification, nesting, file
attribution) never raise; they degrade to ``False``, a fallback value or
``None`` instead.
"""


class MirrorError(Exception):
  """Base class for all errors raised by live-mirrors."""


class NameNotFoundError(MirrorError, LookupError):
  """
  A named field, method or constant does not exist on the subject or its ancestors.

  Attributes:
      name (str): The name that failed to resolve.
      owner (str): Display name of the namespace the lookup started from.
  """

  def __init__(self, name: str, owner: str = "", message: str = ""):
    self.name = name
    self.owner = owner
    super().__init__(message or f"'{name}' is not defined on {owner or 'the subject'}")


class ConstantNotFoundError(NameNotFoundError):
  """A constant (or a segment of a constant path) is undefined."""


class MethodNotFoundError(NameNotFoundError):
  """No class in the ancestor chain defines the requested method."""


class OperationLookupError(NameNotFoundError):
  """The trusted owner passed to ``rebind`` does not define the operation."""


class UnsupportedOperationError(MirrorError, TypeError):
  """
  The query does not apply to the subject.

  Raised for example when asking a module for its superclass, or when binding
  a ``type`` operation to something that is not a class.
  """
