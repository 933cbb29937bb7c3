"""Importable subjects for the mirror tests."""
