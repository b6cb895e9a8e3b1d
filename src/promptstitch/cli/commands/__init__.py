"""CLI commands for promptstitch."""

from promptstitch.cli.commands.fill import fill
from promptstitch.cli.commands.saved import saved
from promptstitch.cli.commands.suggest import suggest
from promptstitch.cli.commands.types import types_command

__all__ = [
    "fill",
    "saved",
    "suggest",
    "types_command",
]
