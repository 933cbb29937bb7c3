"""Loaded through importlib.util.LazyLoader by the tests."""

WOKEN = True


class Pillow:
  pass
