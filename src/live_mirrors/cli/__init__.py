"""Command line interface for browsing mirrors."""
