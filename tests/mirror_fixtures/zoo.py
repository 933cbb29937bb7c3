"""
A small class hierarchy.

``Dog`` derives from ``Animal`` and mixes in ``Named``; it carries one of each
kind of binding a class mirror reports on.
"""

import functools


def traced(func):
  @functools.wraps(func)
  def wrapper(*args, **kwargs):
    return func(*args, **kwargs)

  return wrapper


class Named:
  def label(self):
    return type(self).__name__


class Animal:
  legs = 4

  def speak(self):
    return "..."


class Dog(Animal, Named):
  """Man's best friend."""

  MAX_AGE = 30
  sound = "woof"
  nickname: str

  class Collar:
    SIZE = "M"

  def __init__(self, name="Rex"):
    self.name = name
    self.tricks = []

  def bark(self, times=1):
    """Makes noise."""
    return " ".join([self.sound] * times)

  def _sniff(self):
    return True

  def __chase(self):
    return "cat"

  @traced
  def fetch(self):
    return "ball"

  @classmethod
  def create(cls):
    return cls()

  @staticmethod
  def breeds():
    return ["beagle", "collie"]


class Puppy(Dog):
  pass


class Outer:
  class Middle:
    class Inner:
      LIMIT = 10


class Slotted:
  __slots__ = ("x", "y")
  z: int = 0
