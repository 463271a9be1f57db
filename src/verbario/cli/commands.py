"""CLI commands for verbario.

Commands:
- seed: Load new verb files into the store
- reset: Forget which verb files were seeded
- status: Show seeded vs. new verb files
- serve: Run the Web API
"""

from __future__ import annotations

import typer
from rich.console import Console

from verbario.config.app_config import AppConfig, load_app_config
from verbario.core.errors import ConfigError, StoreUnavailable
from verbario.core.seeder import VerbSeeder
from verbario.db.database import RecordStore

app = typer.Typer(
    name="verbario",
    help="Spanish verbs and English–Hungarian translations backend.",
    no_args_is_help=True,
)

console = Console()


def _load_config_or_exit() -> AppConfig:
    try:
        return load_app_config()
    except ConfigError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)


def _build_seeder(config: AppConfig) -> VerbSeeder:
    store = RecordStore(config.store_path, connect_timeout=config.connect_timeout)
    return VerbSeeder(
        store=store,
        verbs_dir=config.seeder.verbs_dir,
        ledger_path=config.seeder.ledger_path,
    )


@app.command()
def seed() -> None:
    """Load verb files that have not been seeded yet."""
    seeder = _build_seeder(_load_config_or_exit())

    try:
        report = seeder.run()
    except StoreUnavailable as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    if report.files_found == 0:
        console.print("[yellow]⚠ No verb files found to process[/yellow]")
        return
    if report.files_processed == 0:
        console.print("[green]✓ All files have already been seeded[/green]")
        return

    for result in report.files:
        console.print(
            f"  [dim]{result.filename}:[/dim] {result.inserted} inserted, "
            f"{result.skipped} skipped, {result.failed} failed"
        )
    console.print("[green]✓ Seeding complete[/green]")
    console.print(f"  [dim]files processed:[/dim] {report.files_processed}")
    console.print(f"  [dim]verbs inserted:[/dim]  {report.inserted}")
    console.print(f"  [dim]verbs failed:[/dim]    {report.failed}")
    console.print(f"  [dim]seeded files:[/dim]    {report.ledger_size}")


@app.command()
def reset() -> None:
    """Clear the seed ledger so every file is processed on the next run."""
    seeder = _build_seeder(_load_config_or_exit())
    if seeder.reset():
        console.print("[green]✓ Seeded files tracking reset[/green]")
    else:
        console.print("[dim]No seeded files tracking found to reset[/dim]")


@app.command()
def status() -> None:
    """Show how many verb files are seeded and how many are new."""
    seeder = _build_seeder(_load_config_or_exit())
    info = seeder.status()

    console.print("[bold]Seeding status[/bold]")
    console.print(f"  [dim]total files:[/dim]    {info.total_files}")
    console.print(f"  [dim]already seeded:[/dim] {info.seeded}")
    console.print(f"  [dim]new files:[/dim]      {info.new}")
    if info.seeded_files:
        console.print(f"  [dim]seeded:[/dim] {', '.join(info.seeded_files)}")
    if info.new_files:
        console.print(f"  [dim]new:[/dim]    {', '.join(info.new_files)}")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port (default: PORT env)"),
) -> None:
    """Run the Web API with uvicorn."""
    import uvicorn

    from verbario.web.api import create_app

    config = _load_config_or_exit()
    store = RecordStore(config.store_path, connect_timeout=config.connect_timeout)
    try:
        store.connect()
    except StoreUnavailable as e:
        console.print(f"[red]✗ Failed to start server: {e}[/red]")
        raise typer.Exit(code=1)

    with store:
        uvicorn.run(create_app(config, store=store), host=host, port=port or config.port)


if __name__ == "__main__":
    app()
