"""
Tests for mirrors of plain objects and their instance variables.
"""

import live_mirrors
from live_mirrors.enums import FieldKind
from mirror_fixtures import zoo


def test_instance_variables():
  dog = zoo.Dog("Fido")
  mirror = live_mirrors.reflect(dog)
  variables = mirror.variables()

  assert [v.name() for v in variables] == ["name", "tricks"]
  assert all(v.kind() is FieldKind.INSTANCE_VARIABLE for v in variables)
  assert variables[0].value() == "Fido"
  assert variables[1].value() is dog.tricks
  assert not variables[0].is_pending()


def test_instance_variables_are_interned():
  dog = zoo.Dog()
  mirror = live_mirrors.reflect(dog)
  assert mirror.variables()[0] is mirror.variables()[0]


def test_instance_variables_track_new_attributes():
  dog = zoo.Dog()
  mirror = live_mirrors.reflect(dog)
  dog.owner = "Ann"

  assert [v.name() for v in mirror.variables()] == ["name", "tricks", "owner"]


def test_objects_without_dict_have_no_variables():
  assert live_mirrors.reflect(7).variables() == []


def test_target_class():
  dog = zoo.Dog()
  assert live_mirrors.reflect(dog).target_class() is live_mirrors.reflect(zoo.Dog)
  assert live_mirrors.reflect(zoo.Dog).target_class() is live_mirrors.reflect(type)


def test_name_is_default_repr():
  dog = zoo.Dog()
  assert live_mirrors.reflect(dog).name() == object.__repr__(dog)


def test_repr():
  mirror = live_mirrors.reflect(zoo.Dog)
  assert repr(mirror) == "<ClassMirror Dog>"
  assert repr(mirror.constant("MAX_AGE")) == "<FieldMirror constant MAX_AGE>"
  assert repr(mirror.instance_method("bark")) == "<MethodMirror Dog.bark>"
