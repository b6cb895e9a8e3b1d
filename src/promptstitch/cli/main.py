"""Main CLI entry point for promptstitch."""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from promptstitch import __version__
from promptstitch.cli.context import CLIContext
from promptstitch.cli.commands.fill import fill
from promptstitch.cli.commands.saved import saved
from promptstitch.cli.commands.suggest import suggest
from promptstitch.cli.commands.types import types_command


def configure_logging(verbose: bool) -> None:
    """Route log records through rich on stderr."""
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        root.addHandler(handler)


@click.group()
@click.version_option(version=__version__)
@click.option("--project-dir", default=".", help="Project root directory")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx: click.Context, project_dir: str, verbose: bool) -> None:
    """PromptStitch - build LLM prompts from typed blocks.

    \b
    GETTING STARTED:
      promptstitch types                 List block types in prompt order
      promptstitch fill "<request>"      Generate blocks from a description
      promptstitch suggest Tone          Suggest content for a block type

    \b
    SAVED PROMPTS:
      promptstitch saved list            List saved prompts
      promptstitch saved show <id>       Show a saved prompt
      promptstitch saved pin <id>        Pin or unpin a prompt
      promptstitch saved delete <id>     Delete a prompt

    \b
    CONFIGURATION:
      .promptstitch/config.yaml          api_key, model, user_id, ...
      GEMINI_API_KEY                     Overrides api_key
    """
    configure_logging(verbose)
    ctx.obj = CLIContext.load(project_dir)


cli.add_command(fill)
cli.add_command(suggest)
cli.add_command(saved)
cli.add_command(types_command, name="types")


if __name__ == "__main__":
    cli()
