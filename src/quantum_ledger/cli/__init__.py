"""Command-line tools for working with a running backend."""
