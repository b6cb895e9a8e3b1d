"""List block types."""

import click
from rich.console import Console
from rich.table import Table

from promptstitch.blocks.types import BLOCK_ORDER, is_existing_block_type

console = Console()


@click.command()
def types_command() -> None:
    """List block types in the order they appear in a composed prompt."""
    table = Table(title="Block Types")
    table.add_column("#", justify="right")
    table.add_column("Type", style="cyan")
    table.add_column("Kind")

    for index, block_type in enumerate(BLOCK_ORDER, start=1):
        kind = "core" if is_existing_block_type(block_type) else "extended"
        table.add_row(str(index), block_type, kind)

    console.print(table)
