"""Suggest content for a block type."""

from __future__ import annotations

import asyncio

import click
from rich.console import Console
from rich.markup import escape

from promptstitch.blocks.types import is_valid_block_type
from promptstitch.builder.ai_fill import NO_CLIENT_MESSAGE
from promptstitch.cli.context import CLIContext
from promptstitch.llm.client import LLMClient

console = Console()


async def _collect_suggestions(client: LLMClient, block_type: str, count: int) -> list[str]:
    try:
        return await client.generate_suggestions(block_type, count)
    finally:
        await client.aclose()


@click.command()
@click.argument("block_type")
@click.option(
    "--count",
    "-n",
    default=3,
    type=click.IntRange(1, 10),
    help="Number of suggestions to request",
)
@click.pass_obj
def suggest(obj: CLIContext, block_type: str, count: int) -> None:
    """Suggest content for a block.

    BLOCK_TYPE is a block type such as Task, Tone or "Creativity Level".
    """
    if not is_valid_block_type(block_type):
        console.print(f"[yellow]Warning:[/yellow] '{escape(block_type)}' is not a known block type")

    client = obj.create_llm_client()
    if client is None:
        console.print(f"[red]Error:[/red] {NO_CLIENT_MESSAGE}")
        raise SystemExit(1)

    suggestions = asyncio.run(_collect_suggestions(client, block_type, count))
    if not suggestions:
        console.print("[red]Error:[/red] No suggestions could be generated. Please try again.")
        raise SystemExit(1)

    console.print(f"\n[bold]{escape(block_type)} suggestions:[/bold]")
    for index, suggestion in enumerate(suggestions, start=1):
        console.print(f"  {index}. {escape(suggestion)}")
    if len(suggestions) < count:
        console.print(f"[dim]Only {len(suggestions)} of {count} suggestions were generated.[/dim]")
