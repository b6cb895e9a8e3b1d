"""AI Fill command: generate prompt blocks from a description."""

from __future__ import annotations

import asyncio
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from promptstitch.blocks.models import Block
from promptstitch.builder.ai_fill import NO_CLIENT_MESSAGE, AIFillOrchestrator, AIFillResult
from promptstitch.builder.store import PromptStore
from promptstitch.cli.context import CLIContext
from promptstitch.llm.client import LLMClient

console = Console()


def _display_blocks(blocks: list[Block]) -> None:
    table = Table(title="Generated Blocks", show_lines=True)
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Content")
    for block in blocks:
        table.add_row(escape(str(block.type)), escape(block.content))
    console.print(table)


def _ask_clarifications(result: AIFillResult) -> dict[str, str]:
    console.print(Panel(result.message or "A few quick questions.", border_style="yellow"))
    console.print("[dim]Press Enter to skip a question.[/dim]")
    answers = {}
    for index, question in enumerate(result.questions, start=1):
        answers[question] = Prompt.ask(
            f"[bold]{index}. {question}[/bold]", default="", show_default=False
        )
    return answers


async def run_fill(
    store: PromptStore,
    client: LLMClient,
    intent: str,
    save: Optional[bool] = None,
    name: Optional[str] = None,
    color: Optional[str] = None,
) -> bool:
    """Run AI Fill end to end in one event loop.

    Returns:
        True if blocks were generated (and saved, when saving was requested).
    """
    orchestrator = AIFillOrchestrator(store, client)
    try:
        result = await orchestrator.submit(intent)
        if result.needs_clarification and not result.error:
            answers = _ask_clarifications(result)
            result = await orchestrator.submit_clarifications(answers)

        if not result.is_complete:
            console.print(f"[red]Error:[/red] {escape(result.error or 'AI Fill did not finish.')}")
            return False

        console.print(f"\n[green]{result.message}[/green]")
        _display_blocks(result.blocks)
        console.print(Panel(escape(store.composed_prompt), title="Composed Prompt"))

        if save is None:
            save = Confirm.ask("\nSave this prompt?", default=False)
        if not save:
            return True

        saved = await store.save_current_prompt(custom_name=name, custom_color=color)
        if not saved.success:
            console.print(f"[red]Error:[/red] {escape(saved.error)}")
            return False
        console.print(f"[green]Saved prompt:[/green] {saved.prompt_id}")
        return True
    finally:
        await client.aclose()


@click.command()
@click.argument("intent")
@click.option("--save/--no-save", default=None, help="Save the result without asking")
@click.option("--name", default=None, help="Custom name for the saved prompt")
@click.option("--color", default=None, help="Color for the saved prompt, e.g. \"#10b981\"")
@click.pass_obj
def fill(
    obj: CLIContext,
    intent: str,
    save: Optional[bool],
    name: Optional[str],
    color: Optional[str],
) -> None:
    """Generate prompt blocks from a description.

    INTENT is a plain-language description of the prompt you want, e.g.
    "Write a friendly onboarding email for new customers".

    The model may ask up to three clarification questions first.
    """
    client = obj.create_llm_client()
    if client is None:
        console.print(f"[red]Error:[/red] {NO_CLIENT_MESSAGE}")
        raise SystemExit(1)

    store = obj.create_store()
    if not asyncio.run(run_fill(store, client, intent, save=save, name=name, color=color)):
        raise SystemExit(1)
