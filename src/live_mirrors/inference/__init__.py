"""Best-effort provenance inference (package and file attribution)."""

from live_mirrors.inference.resolver import PackageResolver

__all__ = ["PackageResolver"]
