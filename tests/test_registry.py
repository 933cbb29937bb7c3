"""
Tests for the identity-preserving mirror registry.

Verifies:
1. Reflecting the same entity twice yields the same mirror.
2. Entities are dispatched to the right mirror type.
3. Subject identity round-trips through `lookup_id`.
4. Collected subjects are evicted.
5. Concurrent reflection never creates duplicates.
"""

import gc
from concurrent.futures import ThreadPoolExecutor

import pytest

import live_mirrors
from live_mirrors import ClassMirror, MethodMirror, ObjectMirror
from live_mirrors.config import MirrorConfig
from live_mirrors.exceptions import MirrorError
from live_mirrors.registry import MirrorRegistry, get_registry, reset_registry
from mirror_fixtures import zoo


def test_reflect_is_identity_preserving():
  assert live_mirrors.reflect(zoo.Dog) is live_mirrors.reflect(zoo.Dog)
  assert live_mirrors.reflect(zoo) is live_mirrors.reflect(zoo)


def test_reflect_dispatches_by_kind():
  assert isinstance(live_mirrors.reflect(zoo.Dog), ClassMirror)
  assert isinstance(live_mirrors.reflect(zoo), ClassMirror)
  assert isinstance(live_mirrors.reflect(zoo.Dog.bark), MethodMirror)

  instance_mirror = live_mirrors.reflect(zoo.Dog())
  assert type(instance_mirror) is ObjectMirror
  assert type(live_mirrors.reflect(42)) is ObjectMirror


def test_function_mirror_is_interned_with_owner():
  """
  Scenario: Reflect on a function that a class binds.
  Expectation: The registry hands back the owner's interned method mirror.
  """
  direct = live_mirrors.reflect(zoo.Dog.bark)
  via_class = live_mirrors.reflect(zoo.Dog).instance_method("bark")

  assert direct is via_class
  assert direct.owner() is live_mirrors.reflect(zoo.Dog)


def test_bound_classmethod_resolves_to_interned_mirror():
  first = live_mirrors.reflect(zoo.Dog.create)
  second = live_mirrors.reflect(zoo.Dog.create)

  assert first is second
  assert first.name() == "create"
  assert first.owner() is live_mirrors.reflect(zoo.Dog)


def test_unlocatable_function_gets_standalone_mirror():
  def local_helper():
    return None

  mirror = live_mirrors.reflect(local_helper)
  assert isinstance(mirror, MethodMirror)
  assert mirror.owner() is None
  assert mirror.name() == "local_helper"


def test_subject_round_trip():
  registry = get_registry()
  mirror = registry.reflect(zoo.Animal)

  assert mirror.subject is zoo.Animal
  assert mirror.subject_id == id(zoo.Animal)
  assert registry.lookup_id(mirror.subject_id) is mirror
  assert mirror.registry is registry


def test_collected_subject_is_evicted():
  """
  Scenario: A dynamically created class is reflected and then dropped.
  Expectation: The registry forgets it and the mirror reports the loss.
  """
  registry = get_registry()
  ephemeral = type("Ephemeral", (), {})
  mirror = registry.reflect(ephemeral)
  key = mirror.subject_id
  assert registry.lookup_id(key) is mirror

  del ephemeral
  gc.collect()

  assert registry.lookup_id(key) is None
  with pytest.raises(MirrorError):
    _ = mirror.subject


def test_non_weakrefable_subject_is_kept_alive():
  mirror = live_mirrors.reflect(("a", "b"))
  assert mirror.subject == ("a", "b")


def test_reset_registry_starts_fresh():
  before = live_mirrors.reflect(zoo.Dog)
  registry = reset_registry(MirrorConfig(static_fallback=False))

  assert registry is get_registry()
  assert registry.resolver.static_fallback is False
  assert len(registry) == 0
  assert live_mirrors.reflect(zoo.Dog) is not before


def test_registry_reset_clears_cache():
  registry = MirrorRegistry()
  registry.reflect(zoo.Dog)
  assert len(registry) == 1

  registry.reset()
  assert len(registry) == 0


def test_concurrent_reflection_yields_one_mirror():
  registry = MirrorRegistry()
  with ThreadPoolExecutor(max_workers=8) as pool:
    mirrors = list(pool.map(lambda _: registry.reflect(zoo.Puppy), range(64)))

  assert all(m is mirrors[0] for m in mirrors)
