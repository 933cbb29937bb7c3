"""
Classes that lie to ordinary introspection.

Every override records its name in ``TOUCHED`` so tests can assert the
mirrors never called it.
"""

TOUCHED = []

_LIES = {
  "__name__": "Impostor",
  "__qualname__": "Impostor",
  "__module__": "nowhere",
  "__bases__": (),
  "__mro__": (object,),
  "__dict__": {},
}


class HostileMeta(type):
  def __getattribute__(cls, name):
    TOUCHED.append(name)
    if name in _LIES:
      return _LIES[name]
    return type.__getattribute__(cls, name)

  def __repr__(cls):
    TOUCHED.append("__repr__")
    return "<class 'dict'>"

  def __dir__(cls):
    TOUCHED.append("__dir__")
    return []

  def __subclasses__(cls):
    TOUCHED.append("__subclasses__")
    return []

  def __eq__(cls, other):
    TOUCHED.append("__eq__")
    return True

  __hash__ = type.__hash__


class Hostile(metaclass=HostileMeta):
  SECRET = 42

  def greet(self):
    return "hello"


class Spawn(Hostile):
  pass


class Impostor:
  """Instances claim to be dictionaries."""

  @property
  def __class__(self):
    return dict

  def __repr__(self):
    return "{}"


class Hoarder:
  """Instances present a fabricated attribute dictionary."""

  def __init__(self):
    self.real = 1

  @property
  def __dict__(self):
    TOUCHED.append("__dict__")
    return {"fake": 0}
