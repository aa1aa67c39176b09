"""
CLI for dirscout.

Provides a command-line interface for bounded directory listing.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from dirscout.core.config import DirscoutConfig, load_config
from dirscout.core.listing import list_files_sync

# Initialize Rich Console
console = Console()

app = typer.Typer(
    name="dirscout",
    help="Bounded, fast directory listing",
    add_completion=False,
)


def _configure_logging(cfg: DirscoutConfig) -> None:
    level = getattr(logging, cfg.logging.level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format=cfg.logging.format)


def get_config(config_path: Optional[Path] = None) -> DirscoutConfig:
    """
    Load configuration from .env, an optional config file and the environment.

    Returns:
        DirscoutConfig with environment overrides applied
    """
    load_dotenv()
    cfg = load_config(config_path)
    _configure_logging(cfg)
    return cfg


@app.command("list")
def list_command(
    path: Path = typer.Argument(..., help="Directory to list"),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Descend into subdirectories"),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-n", help="Maximum number of entries (default from config)"
    ),
    timeout_ms: Optional[int] = typer.Option(
        None, "--timeout-ms", help="Scan timeout in milliseconds (default from config)"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to a YAML or JSON config file"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
):
    """List the entries of a directory."""
    try:
        cfg = get_config(config_path)
    except (FileNotFoundError, ValueError, TypeError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    actual_limit = limit if limit is not None else cfg.listing.default_limit
    if actual_limit <= 0:
        console.print(f"[bold red]Error:[/bold red] --limit must be positive, got {actual_limit}")
        raise typer.Exit(1)
    if timeout_ms is not None and timeout_ms <= 0:
        console.print(f"[bold red]Error:[/bold red] --timeout-ms must be positive, got {timeout_ms}")
        raise typer.Exit(1)

    paths, limit_reached = list_files_sync(
        path, recursive, actual_limit, config=cfg, timeout_ms=timeout_ms
    )

    if as_json:
        typer.echo(json.dumps({"paths": paths, "limit_reached": limit_reached}, indent=2))
        return

    if not paths:
        console.print("[yellow]No files found.[/yellow]")
        return

    for entry in paths:
        console.print(entry, markup=False, highlight=False, soft_wrap=True)

    if limit_reached:
        console.print(
            f"[dim]File list truncated at {actual_limit} entries. "
            "Narrow the path or raise --limit to see more.[/dim]"
        )


@app.command()
def config(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to a YAML or JSON config file"
    ),
):
    """Show the effective configuration."""
    try:
        cfg = get_config(config_path)
    except (FileNotFoundError, ValueError, TypeError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(
        Panel(
            Syntax(cfg.to_yaml(), "yaml", word_wrap=True),
            title="Configuration",
            border_style="dim",
            expand=False,
        )
    )


if __name__ == "__main__":
    app()
