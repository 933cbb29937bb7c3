"""
Tests for field queries and constant lookup on class mirrors.

Verifies:
1. Constants, class variables and class instance variables are told apart.
2. Field mirrors are interned per owner.
3. Constant paths resolve through nested namespaces and report misses as None.
4. Lazily registered bindings are reported without being loaded.
"""

import importlib.util
import logging
import sys
import types

import live_mirrors
from live_mirrors.enums import FieldKind
from live_mirrors.mirrors import namespace
from mirror_fixtures import zoo


def names(mirrors):
  return [m.name() for m in mirrors]


def test_constants():
  constants = live_mirrors.reflect(zoo.Dog).constants()

  assert names(constants) == ["MAX_AGE", "Collar"]
  assert all(field.kind() is FieldKind.CONSTANT for field in constants)
  assert all(field.is_constant() for field in constants)


def test_class_variables():
  assert names(live_mirrors.reflect(zoo.Dog).class_variables()) == ["sound"]
  assert names(live_mirrors.reflect(zoo.Animal).class_variables()) == ["legs"]
  assert live_mirrors.reflect(zoo).class_variables() == []


def test_class_instance_variables():
  """
  Scenario: Bare annotations and `__slots__` declare per-instance state.
  Expectation: They are class instance variables; bound annotations are not.
  """
  dog = live_mirrors.reflect(zoo.Dog)
  slotted = live_mirrors.reflect(zoo.Slotted)

  assert names(dog.class_instance_variables()) == ["nickname"]
  assert names(slotted.class_instance_variables()) == ["x", "y"]
  assert names(slotted.class_variables()) == ["z"]
  assert dog.variables() == dog.class_instance_variables()


def test_fields_concatenates_categories():
  dog = live_mirrors.reflect(zoo.Dog)
  assert names(dog.fields()) == ["MAX_AGE", "Collar", "sound", "nickname"]


def test_field_mirrors_are_interned():
  dog = live_mirrors.reflect(zoo.Dog)
  assert dog.constants()[0] is dog.constants()[0]
  assert dog.constant("MAX_AGE") is dog.constants()[0]
  assert dog.class_variables()[0] is dog.class_variables()[0]


def test_field_values():
  dog = live_mirrors.reflect(zoo.Dog)
  assert dog.constant("MAX_AGE").value() == 30
  assert dog.class_variables()[0].value() == "woof"
  assert dog.class_instance_variables()[0].value() is None


def test_constant_path_through_nested_classes():
  field = live_mirrors.reflect(zoo.Outer).constant("Middle.Inner.LIMIT")

  assert field.name() == "LIMIT"
  assert field.value() == 10
  assert field.owner() is live_mirrors.reflect(zoo.Outer.Middle.Inner)


def test_constant_from_module():
  field = live_mirrors.reflect(zoo).constant("Dog.Collar.SIZE")
  assert field.value() == "M"
  assert field.owner() is live_mirrors.reflect(zoo.Dog.Collar)


def test_inherited_constant_belongs_to_definer():
  field = live_mirrors.reflect(zoo.Puppy).constant("MAX_AGE")
  assert field.owner() is live_mirrors.reflect(zoo.Dog)
  assert field is live_mirrors.reflect(zoo.Dog).constant("MAX_AGE")


def test_constant_misses_return_none(caplog):
  """
  Scenario: Any path segment is undefined, or a segment is not a namespace.
  Expectation: None for the whole path, with the miss logged at DEBUG.
  """
  dog = live_mirrors.reflect(zoo.Dog)
  caplog.set_level(logging.DEBUG, logger="live_mirrors.mirrors.class_mirror")

  assert dog.constant("NOPE") is None
  assert dog.constant("Collar.NOPE") is None
  assert dog.constant("Nope.SIZE") is None
  assert dog.constant("MAX_AGE.real") is None
  assert "Collar.NOPE" in caplog.text


def test_pending_constants_are_listed_not_loaded(lazy_pkg):
  mirror = live_mirrors.reflect(lazy_pkg)

  constant_names = names(mirror.constants())
  assert "Eager" in constant_names
  assert "Heavy" in constant_names
  assert lazy_pkg.LOADS == []


def test_nested_classes_skip_pending_bindings(lazy_pkg):
  mirror = live_mirrors.reflect(lazy_pkg)

  assert names(mirror.nested_classes()) == ["Eager"]
  assert lazy_pkg.LOADS == []


def test_pending_constant_lookup_does_not_load(lazy_pkg):
  field = live_mirrors.reflect(lazy_pkg).constant("Heavy")

  assert field is not None
  assert field.is_pending()
  assert field.value() is None
  assert lazy_pkg.LOADS == []


def test_constant_path_loads_intermediate_segments(lazy_pkg):
  """
  Scenario: A path walks through a lazily registered name.
  Expectation: The intermediate segment is loaded like the runtime would.
  """
  mirror = live_mirrors.reflect(lazy_pkg)
  field = mirror.constant("Heavy.WEIGHT")

  assert field.value() == 1000
  assert lazy_pkg.LOADS == ["Heavy"]
  assert not mirror.constant("Heavy").is_pending()


def lazy_sleepy():
  spec = importlib.util.find_spec("mirror_fixtures.sleepy")
  loader = importlib.util.LazyLoader(spec.loader)
  spec.loader = loader
  sleepy = importlib.util.module_from_spec(spec)
  loader.exec_module(sleepy)
  return sleepy


def test_lazy_loader_modules_stay_unexecuted():
  sleepy = lazy_sleepy()

  holder = types.ModuleType("holder")
  holder.Sleepy = sleepy
  mirror = live_mirrors.reflect(holder)

  assert mirror.nested_classes() == []
  field = mirror.constant("Sleepy")
  assert field.is_pending()
  assert field.value() is None
  assert namespace.is_pending_value(sleepy)


def test_constant_path_loads_lazy_loader_segment(monkeypatch):
  """
  Scenario: `Sleepy.Pillow` where `Sleepy` is an unexecuted LazyLoader module.
  Expectation: The middle segment is executed and the constant is found.
  """
  sleepy = lazy_sleepy()
  monkeypatch.setitem(sys.modules, "mirror_fixtures.sleepy", sleepy)
  holder = types.ModuleType("holder")
  holder.Sleepy = sleepy

  field = live_mirrors.reflect(holder).constant("Sleepy.Pillow")

  assert field is not None
  assert field.value() is sleepy.Pillow
  assert not namespace.is_pending_value(sleepy)


def test_constant_path_leaves_last_lazy_loader_segment_alone():
  sleepy = lazy_sleepy()
  holder = types.ModuleType("holder")
  holder.Sleepy = sleepy

  assert live_mirrors.reflect(holder).constant("Sleepy").is_pending()
  assert namespace.is_pending_value(sleepy)
