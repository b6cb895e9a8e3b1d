"""Command-line interface for promptstitch."""
