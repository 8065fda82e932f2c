"""Configuration management CLI commands for ClearCache."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .config import parse_categories
from .exceptions import ConfigurationError
from .settings import CONFIG_FILENAME, create_sample_config, get_config_path, load_config
from .validation import validate_max_depth, validate_parallel_workers

config_app = typer.Typer(
    name="config",
    help="Manage ClearCache configuration",
    no_args_is_help=True,
)
console = Console()


@config_app.command()
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
    global_config: bool = typer.Option(
        False, "--global", "-g", help="Create global config in home directory"
    ),
) -> None:
    """Create a sample configuration file."""
    if global_config:
        config_path = Path.home() / CONFIG_FILENAME
    else:
        config_path = Path.cwd() / CONFIG_FILENAME

    if config_path.exists() and not force:
        console.print(f"[yellow]Config file already exists: {config_path}[/yellow]")
        console.print("Use --force to overwrite or --global for global config")
        raise typer.Exit(1)

    try:
        create_sample_config(config_path)
    except ConfigurationError as e:
        console.print(f"[red]Error creating config: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Created config file: {config_path}[/green]")
    console.print("  • [cyan]clearcache config show[/cyan] - View current settings")


@config_app.command()
def show(
    config_file: Path | None = typer.Option(None, "--config", "-c", help="Path to config file"),
) -> None:
    """Display current configuration."""
    try:
        config = load_config(config_file)
    except ConfigurationError as e:
        console.print(f"[red]Error loading config: {e}[/red]")
        raise typer.Exit(1)

    config_path = config_file or get_config_path()
    console.print(f"[bold]Configuration from: {config_path}[/bold]")
    if not config_path.exists():
        console.print("[dim]  (using defaults - no config file found)[/dim]")
    console.print()

    table = Table(title="Traversal Settings", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Max depth", str(config.traversal.max_depth))
    table.add_row("Follow symlinks", "✓" if config.traversal.follow_symlinks else "✗")
    table.add_row("Respect .gitignore", "✓" if config.traversal.respect_gitignore else "✗")
    table.add_row("Use .clearcacheignore", "✓" if config.traversal.use_ignore_file else "✗")
    console.print(table)
    console.print()

    table = Table(title="Clean Settings", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Cache types", config.clean.cache_types)
    table.add_row("Parallel workers", str(config.clean.parallel_workers))
    table.add_row("Include libraries", "✓" if config.clean.include_libraries else "✗")
    console.print(table)


@config_app.command()
def path() -> None:
    """Print the configuration file location."""
    config_path = get_config_path()
    status = "exists" if config_path.exists() else "not created"
    console.print(f"{config_path} [dim]({status})[/dim]")


@config_app.command()
def validate(
    config_file: Path | None = typer.Option(None, "--config", "-c", help="Path to config file"),
) -> None:
    """Validate configuration file."""
    try:
        config = load_config(config_file)
        parse_categories(config.clean.cache_types)
        validate_parallel_workers(config.clean.parallel_workers)
        validate_max_depth(config.traversal.max_depth)
    except (ConfigurationError, ValueError) as e:
        console.print(f"[red]Configuration validation failed: {e}[/red]")
        raise typer.Exit(1)

    config_path = config_file or get_config_path()
    console.print(f"[green]✓ Configuration is valid: {config_path}[/green]")
