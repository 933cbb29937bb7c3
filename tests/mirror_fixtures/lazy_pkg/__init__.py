"""Package that imports ``Heavy`` on first access (PEP 562)."""

LOADS = []

__all__ = ["Eager", "Heavy"]


class Eager:
  pass


def __getattr__(name):
  if name == "Heavy":
    from mirror_fixtures.lazy_pkg._heavy import Heavy

    LOADS.append(name)
    globals()["Heavy"] = Heavy
    return Heavy
  raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
