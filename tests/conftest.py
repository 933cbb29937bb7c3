"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports (the package under ``src`` and the
  ``mirror_fixtures`` subjects next to this file).
- Global registry isolation so cached mirrors never leak between tests.
- Reset of the lazily-loading fixture package.
"""

import sys
from pathlib import Path

import pytest

# Add src to path so we can import 'live_mirrors' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))
sys.path.insert(0, str(Path(__file__).parent))

from live_mirrors.registry import reset_registry  # noqa: E402


@pytest.fixture(autouse=True)
def isolate_registry():
  """
  Gives every test a fresh process-wide registry.
  """
  registry = reset_registry()
  yield registry
  reset_registry()


@pytest.fixture
def lazy_pkg():
  """
  Provides the PEP 562 fixture package with ``Heavy`` not yet loaded.

  Undoes any load a previous test triggered.
  """
  import mirror_fixtures.lazy_pkg as pkg

  namespace = pkg.__dict__
  namespace.pop("Heavy", None)
  pkg.LOADS.clear()
  yield pkg
  namespace.pop("Heavy", None)
  pkg.LOADS.clear()
