"""Saved prompt management commands."""

from __future__ import annotations

import asyncio

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from promptstitch.blocks.models import compose_prompt
from promptstitch.builder.store import PromptStore, order_for_display
from promptstitch.cli.context import CLIContext
from promptstitch.persistence.errors import categorize_error, get_recovery_action
from promptstitch.persistence.models import GatewayResult, PromptSnapshot

console = Console()


def _fail(result: GatewayResult) -> None:
    """Print a failed result with a recovery hint and exit."""
    console.print(f"[red]Error:[/red] {escape(result.error)}")
    if result.error_code:
        action = get_recovery_action(categorize_error(result.error_code))
        console.print(f"[dim]{action.title}: {action.description}[/dim]")
    raise SystemExit(1)


def _load(store: PromptStore) -> list[PromptSnapshot]:
    """Load saved prompts or exit with the gateway error."""
    result = asyncio.run(store.load_saved_prompts())
    if not result.success:
        _fail(result)
    return order_for_display(store.saved_prompts)


def _resolve(prompts: list[PromptSnapshot], prompt_id: str) -> PromptSnapshot:
    """Find a prompt by id or unique id prefix."""
    for prompt in prompts:
        if prompt.id == prompt_id:
            return prompt

    matches = [p for p in prompts if p.id.startswith(prompt_id)]
    if len(matches) == 1:
        return matches[0]
    if matches:
        console.print(f"[red]Error:[/red] '{escape(prompt_id)}' matches {len(matches)} prompts")
    else:
        console.print(f"[red]Error:[/red] Prompt '{escape(prompt_id)}' not found")
    raise SystemExit(1)


def _short_date(iso_timestamp: str) -> str:
    return iso_timestamp[:16].replace("T", " ")


@click.group()
def saved() -> None:
    """Saved prompt management commands."""
    pass


@saved.command("list")
@click.pass_obj
def list_saved(obj: CLIContext) -> None:
    """List saved prompts, pinned first."""
    prompts = _load(obj.create_store())

    if not prompts:
        console.print("[yellow]No saved prompts yet.[/yellow]")
        console.print('Create one with: promptstitch fill "<request>" --save')
        return

    table = Table(title=f"Saved Prompts ({len(prompts)})")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Name", style="cyan")
    table.add_column("Preview")
    table.add_column("Blocks", justify="right")
    table.add_column("Created")

    for prompt in prompts:
        name = escape(prompt.display_name)
        if prompt.is_pinned:
            name = f"[yellow]*[/yellow] {name}"
        table.add_row(
            prompt.id[:8],
            name,
            escape(prompt.preview),
            str(len(prompt.blocks)),
            _short_date(prompt.created_at),
        )

    console.print(table)


@saved.command()
@click.argument("prompt_id")
@click.pass_obj
def show(obj: CLIContext, prompt_id: str) -> None:
    """Show a saved prompt.

    PROMPT_ID is the prompt id or a unique prefix of it.
    """
    prompt = _resolve(_load(obj.create_store()), prompt_id)

    details = f"""
[bold]Name:[/bold] {escape(prompt.display_name)}
[bold]ID:[/bold] {prompt.id}
[bold]Created:[/bold] {_short_date(prompt.created_at)}
[bold]Updated:[/bold] {_short_date(prompt.updated_at)}
[bold]Pinned:[/bold] {'yes' if prompt.is_pinned else 'no'}
[bold]Color:[/bold] {escape(prompt.custom_color)}
"""
    console.print(Panel(details.strip(), title=escape(prompt.display_name), border_style="blue"))

    table = Table(show_lines=True)
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Content")
    for block in prompt.blocks:
        table.add_row(escape(str(block.type)), escape(block.content))
    console.print(table)

    console.print(Panel(escape(compose_prompt(prompt.blocks)), title="Composed Prompt"))


@saved.command()
@click.argument("prompt_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_obj
def delete(obj: CLIContext, prompt_id: str, yes: bool) -> None:
    """Delete a saved prompt."""
    store = obj.create_store()
    prompt = _resolve(_load(store), prompt_id)

    if not yes and not Confirm.ask(f"Delete '{escape(prompt.display_name)}'?", default=False):
        console.print("Cancelled.")
        return

    result = asyncio.run(store.delete_saved_prompt(prompt.id))
    if not result.success:
        _fail(result)
    console.print(f"[green]Deleted:[/green] {escape(prompt.display_name)}")


@saved.command()
@click.argument("prompt_id")
@click.pass_obj
def pin(obj: CLIContext, prompt_id: str) -> None:
    """Pin a saved prompt, or unpin it if already pinned."""
    store = obj.create_store()
    prompt = _resolve(_load(store), prompt_id)

    result = asyncio.run(store.toggle_pin(prompt.id))
    if not result.success:
        _fail(result)

    state = "Unpinned" if prompt.is_pinned else "Pinned"
    console.print(f"[green]{state}:[/green] {escape(prompt.display_name)}")
