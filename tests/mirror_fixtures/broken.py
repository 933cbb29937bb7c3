"""Fails while importing: the name it pulls in does not exist."""

from mirror_fixtures.zoo import Cat  # noqa: F401
