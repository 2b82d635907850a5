"""Main CLI entry point for Findexa."""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .commands import SearchCommand
from .config import Config
from .error_handling import ErrorManager

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(
    name="findexa",
    help="Findexa - search and replace across documents and files",
    no_args_is_help=True,
)


@app.callback()
def callback(
    version: bool = typer.Option(False, "--version", help="Show version and exit")
) -> None:
    """
    Findexa: literal and regex search-and-replace.

    Run 'findexa search PATTERN [PATHS...]' to search files and directories.
    """
    if version:
        from . import __version__
        console.print(f"Findexa version {__version__}")
        raise typer.Exit()


@app.command()
def search(
    pattern: str = typer.Argument(..., help="Text or regular expression to look for"),
    paths: Optional[List[Path]] = typer.Argument(None, help="Files or directories (default: current directory)"),
    regex: bool = typer.Option(False, "--regex", help="Treat the pattern as a regular expression"),
    case_sensitive: Optional[bool] = typer.Option(
        None, "--case-sensitive/--ignore-case", help="Match case exactly, or fold case"
    ),
    whole_word: Optional[bool] = typer.Option(
        None, "--whole-word/--any-word", help="Only match whole words, or match anywhere"
    ),
    dot_matches_newline: Optional[bool] = typer.Option(
        None, "--dot-matches-newline/--dot-stops-at-newline", help="Let '.' match line breaks, or not"
    ),
    replace: Optional[str] = typer.Option(None, "--replace", help="Replacement text ($1 / ${name} for captures)"),
    apply: bool = typer.Option(False, "--apply", help="Write replacements to disk"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """Search files for PATTERN, optionally replacing every match."""
    if apply and replace is None:
        raise typer.BadParameter("--apply requires --replace", param_hint="--apply")

    config = Config()
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.get_log_level(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Unset flags defer to ~/.findexarc
    options = config.default_options(
        pattern,
        is_regex=regex,
        case_sensitive=case_sensitive,
        whole_word=whole_word,
        dot_matches_newline=dot_matches_newline,
        wrap=False,
    )

    command = SearchCommand(config=config, error_manager=ErrorManager(err_console))
    result = command.run(options, paths or [], replacement=replace, apply=apply)

    for warning in result.warnings:
        typer.echo(warning, err=True)

    if not result.success:
        typer.echo(f"Error: {result.error}", err=True)
        raise typer.Exit(result.exit_code)
    if result.output:
        typer.echo(result.output)


@app.command()
def config() -> None:
    """Show the effective configuration."""
    config = Config()
    settings = config.as_dict()

    panel_content = Text()
    panel_content.append("Current Configuration:\n\n", style="bold")

    for key, value in settings["search"].items():
        panel_content.append(f"{key}: {value}\n", style="blue")

    files = settings["files"]
    ignore = ", ".join(files["ignore_patterns"]) or "(defaults only)"
    panel_content.append(f"\nIgnore patterns: {ignore}\n", style="cyan")
    max_size = files["max_file_size"] if files["max_file_size"] is not None else "unlimited"
    panel_content.append(f"Max file size: {max_size}\n", style="cyan")
    panel_content.append(
        f"Pathological pattern guard: {settings['guard_pathological_patterns']}\n", style="cyan"
    )
    panel_content.append(f"Log level: {settings['log_level']}\n", style="cyan")

    config_exists = "Exists" if config.config_path.exists() else "Not found"
    panel_content.append(f"\nConfig file ({config.config_path}): {config_exists}\n", style="magenta")

    console.print(Panel(panel_content, title="Findexa Configuration", border_style="blue"))


@app.command()
def setup() -> None:
    """Write a default ~/.findexarc."""
    config = Config()

    console.print("[bold cyan]Findexa Setup[/bold cyan]\n")
    config.create_default_config()
    console.print(f"Created default config file at {config.config_path}")
    console.print("\n[yellow]Next steps:[/yellow]")
    console.print("1. Edit the search defaults and ignore patterns to taste")
    console.print("2. Run 'findexa config' to verify your setup")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
