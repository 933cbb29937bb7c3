"""
Tests for the best-effort file resolver.

Verifies:
1. Modules resolve to their own `__file__`.
2. Classes resolve through method locations, preferring a file named after the class.
3. The static-analysis fallback is consulted only when enabled, and failures yield None.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import live_mirrors
from live_mirrors.config import MirrorConfig
from live_mirrors.inference.resolver import PackageResolver
from live_mirrors.mirrors.method_mirror import SourceLocation
from live_mirrors.registry import reset_registry
from mirror_fixtures import zoo


def _fake_mirror(class_name, files):
  mirror = MagicMock()
  mirror.is_class.return_value = True
  mirror.demodulized_name.return_value = class_name
  methods = []
  for path in files:
    method = MagicMock()
    method.source_location.return_value = SourceLocation(file=path, line=1)
    methods.append(method)
  mirror.instance_methods.return_value = methods
  mirror.class_methods.return_value = []
  return mirror


def test_module_file():
  assert live_mirrors.reflect(zoo).file() == zoo.__file__


def test_class_file_from_methods():
  assert Path(live_mirrors.reflect(zoo.Dog).file()).name == "zoo.py"


def test_class_without_methods_uses_module():
  assert Path(live_mirrors.reflect(zoo.Outer).file()).name == "zoo.py"


def test_prefers_file_named_after_class():
  """
  Scenario: Most methods live in a helper file, one in `http_server.py`.
  Expectation: The file matching the class name wins.
  """
  mirror = _fake_mirror("HttpServer", ["/src/helpers.py", "/src/helpers.py", "/src/http_server.py"])
  assert PackageResolver().resolve(mirror) == "/src/http_server.py"


def test_most_common_file_otherwise():
  mirror = _fake_mirror("Server", ["/src/a.py", "/src/b.py", "/src/b.py"])
  assert PackageResolver().resolve(mirror) == "/src/b.py"


def test_static_fallback():
  """
  Scenario: A class whose module is not loaded and has no methods.
  Expectation: Griffe is asked for the object's filepath.
  """
  phantom = type("Phantom", (), {"__module__": "phantom_mod"})
  fake_root = MagicMock()
  fake_root.__getitem__.return_value.filepath = Path("/src/phantom_mod.py")

  with patch("live_mirrors.inference.resolver.griffe.load", return_value=fake_root) as mock_load:
    path = live_mirrors.reflect(phantom).file()
    live_mirrors.reflect(phantom).file()

  assert path == str(Path("/src/phantom_mod.py"))
  mock_load.assert_called_once_with("phantom_mod")
  fake_root.__getitem__.assert_called_with("Phantom")


def test_static_fallback_disabled():
  reset_registry(MirrorConfig(static_fallback=False))
  phantom = type("Phantom", (), {"__module__": "phantom_mod"})

  with patch("live_mirrors.inference.resolver.griffe.load") as mock_load:
    assert live_mirrors.reflect(phantom).file() is None

  mock_load.assert_not_called()


def test_static_failure_is_unknown():
  phantom = type("Phantom", (), {"__module__": "phantom_mod"})

  with patch("live_mirrors.inference.resolver.griffe.load", side_effect=ImportError("phantom_mod")):
    assert live_mirrors.reflect(phantom).file() is None
