"""CLI interface for clearcache."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .cleaner import CacheCleaner, SharedCounter
from .config import (
    ALL_CATEGORIES,
    get_library_signatures,
    get_safe_signatures,
    parse_categories,
)
from .config_cli import config_app
from .exceptions import ClearCacheError
from .ignore import write_default_ignore_file
from .settings import load_config
from .validation import (
    validate_directory_for_scanning,
    validate_max_depth,
    validate_parallel_workers,
)

app = typer.Typer(
    name="clearcache",
    help="Find and remove build and cache artifacts in development directories",
    no_args_is_help=False,
)

# Add config subcommands
app.add_typer(config_app)

console = Console()


def setup_logging(verbose: bool) -> None:
    """Route package logging through rich."""
    logger = logging.getLogger("clearcache")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.handlers.clear()
    handler = RichHandler(console=console, show_time=False, show_path=False)
    logger.addHandler(handler)
    logger.propagate = False


@app.command()
def clean(
    directory: Path = typer.Argument(
        Path("."), help="Directory to clean (default: current directory)"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Show what would be deleted without deleting"
    ),
    recursive: bool = typer.Option(
        False, "--recursive", "-r", help="Clean all subdirectories, not only direct entries"
    ),
    types: Optional[str] = typer.Option(
        None, "--types", "-t", help="Comma-separated cache types (node,rust,go,python,docker,general,all)"
    ),
    parallel: Optional[int] = typer.Option(
        None, "--parallel", "-p", help="Number of parallel threads (default: CPU count)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    include_libraries: bool = typer.Option(
        False,
        "--include-libraries",
        "-l",
        help="Also remove dependencies that need reinstalling (node_modules, target, ...)",
    ),
    max_depth: Optional[int] = typer.Option(
        None, "--max-depth", help="Maximum traversal depth (default: 20)"
    ),
    no_ignore: bool = typer.Option(False, "--no-ignore", help="Do not read .clearcacheignore"),
    respect_gitignore: bool = typer.Option(
        False, "--respect-gitignore", help="Skip paths listed in .gitignore"
    ),
    follow_symlinks: bool = typer.Option(
        False, "--follow-symlinks", help="Follow symbolic links while walking"
    ),
    init_ignore: bool = typer.Option(
        False, "--init-ignore", help="Write a default .clearcacheignore into DIRECTORY and exit"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to configuration file"
    ),
) -> None:
    """Find cache directories and files and delete them."""
    setup_logging(verbose)
    root = directory.expanduser()

    try:
        validate_directory_for_scanning(root)

        if init_ignore:
            written = write_default_ignore_file(root)
            console.print(f"[green]✓ Created {written}[/green]")
            return

        config = load_config(config_file)
        cache_types = parse_categories(types if types is not None else config.clean.cache_types)
        workers = parallel if parallel is not None else config.clean.parallel_workers
        depth = max_depth if max_depth is not None else config.traversal.max_depth
        validate_parallel_workers(workers)
        validate_max_depth(depth)
    except ClearCacheError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Invalid option: {e}[/red]")
        raise typer.Exit(1)

    console.print("[bold cyan]ClearCache[/bold cyan]")
    console.print(f"Directory: [yellow]{root.resolve()}[/yellow]")
    console.print(f"Cache types: [green]{', '.join(c.value for c in cache_types)}[/green]")
    console.print(f"Threads: [blue]{workers}[/blue]")
    if dry_run:
        console.print("[bold yellow]DRY RUN - no files will be deleted[/bold yellow]")

    cleaner = CacheCleaner(
        root_directory=root.resolve(),
        cache_types=cache_types,
        parallel_threads=workers,
        recursive=recursive,
        dry_run=dry_run,
        include_libraries=include_libraries or config.clean.include_libraries,
        no_ignore=no_ignore or not config.traversal.use_ignore_file,
        respect_gitignore=respect_gitignore or config.traversal.respect_gitignore,
        max_depth=depth,
        follow_symlinks=follow_symlinks or config.traversal.follow_symlinks,
    )

    total_bytes = SharedCounter()
    total_files = SharedCounter()
    try:
        result = cleaner.clean(total_bytes, total_files)
    except ClearCacheError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title="Summary", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Files processed", str(result.files_deleted))
    table.add_row("Space freed" if not dry_run else "Space to free", result.size_human)
    table.add_row("Directories cleaned", str(result.directories_cleaned))
    table.add_row("Time", f"{result.duration_seconds:.2f}s")
    console.print(table)

    if result.errors:
        console.print("[bold yellow]Some errors occurred:[/bold yellow]")
        for error in result.errors:
            console.print(f"  • [red]{error}[/red]")
    else:
        console.print("[bold green]All operations completed successfully![/bold green]")


@app.command("types")
def list_types(
    libraries: bool = typer.Option(
        True, "--libraries/--no-libraries", help="Show dependency caches too"
    ),
) -> None:
    """List the cache signatures ClearCache knows about."""
    table = Table(title="Cache Signatures", show_lines=False)
    table.add_column("Type", style="magenta")
    table.add_column("Name", style="cyan")
    table.add_column("Matches")
    table.add_column("Description")
    table.add_column("Status", style="dim")

    for category in ALL_CATEGORIES:
        signatures = get_safe_signatures(category)
        if libraries:
            signatures += get_library_signatures(category)
        for signature in signatures:
            if signature.is_library:
                status = "[red]library[/red]"
            elif not signature.recursive_safe:
                status = "[yellow]caution[/yellow]"
            else:
                status = "[green]safe[/green]"
            table.add_row(
                category.value,
                signature.name,
                ", ".join(signature.patterns) or "(docker commands)",
                signature.description,
                status,
            )

    console.print(table)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """ClearCache - cache cleanup for development directories."""
    if ctx.invoked_subcommand is None:
        console.print(
            Panel(
                "[bold blue]ClearCache[/bold blue] - cache cleanup for development trees\n\n"
                "Commands:\n"
                "  [cyan]clearcache clean [DIR] -r -n[/cyan]  - Preview a recursive clean\n"
                "  [cyan]clearcache clean [DIR] -r[/cyan]     - Delete caches\n"
                "  [cyan]clearcache types[/cyan]              - List known cache types\n"
                "  [cyan]clearcache config init[/cyan]        - Create a config file\n\n"
                "[dim]Add a .clearcacheignore (clean --init-ignore) to protect paths[/dim]",
                border_style="blue",
            )
        )


if __name__ == "__main__":
    app()
