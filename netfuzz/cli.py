"""
netfuzz CLI — the main entry point.

Usage:
    netfuzz fuzz --library enet
    netfuzz fuzz -l 1 --clients 64 --port 9600
    netfuzz libraries
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich import box
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from netfuzz import __version__
from netfuzz.config import (
    DEFAULT_CLIENTS,
    DEFAULT_HOST,
    DEFAULT_PORT,
    LIBRARIES,
    build_config,
    library_name,
)
from netfuzz.errors import BackendError, ConfigurationError, SchedulerError
from netfuzz.ui import (
    ConsolePhaseRenderer,
    console,
    print_banner,
    print_run_info,
    print_section,
    print_summary,
)

app = typer.Typer(
    name="netfuzz",
    help="⚡ Swarm fuzzer for reliable UDP transports.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

EXIT_CONFIG_ERROR = 1
EXIT_BACKEND_FAILURE = 2


def _setup_logging(debug: bool):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _version_callback(value: bool):
    if value:
        console.print(f"netfuzz v{__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-V", help="Show version and exit.", callback=_version_callback, is_eager=True),
):
    """netfuzz — fiber-style networking fuzzer for reliable UDP transports."""
    if ctx.invoked_subcommand is None:
        print_banner()


# ─── FUZZ COMMAND ────────────────────────────────────────────────────────────

@app.command()
def fuzz(
    library: str = typer.Option(..., "--library", "-l", help="Networking library identifier (0/hypernet, 1/enet)"),
    clients: int = typer.Option(DEFAULT_CLIENTS, "--clients", "-c", help="Number of simulated clients"),
    port: int = typer.Option(DEFAULT_PORT, "--port", "-p", help="Port number for connection establishment"),
    host: str = typer.Option(DEFAULT_HOST, "--host", help="Address the server binds and clients dial"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for random payloads"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Log every transport event"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write the run summary to this JSON file"),
):
    """
    🔥 Fuzz a reliable UDP library with a swarm of clients.

    One server and N clients run cooperatively in this process and push the
    transport through four phases:

      1. Spawning       start every client
      2. Connections    connect/reject churn
      3. Transmission   reliable echo traffic in both directions
      4. Disconnection  tear down every connection

    Press Ctrl+C to stop the swarm early.
    """
    from netfuzz.fuzzer.fuzz_engine import FuzzEngine
    from netfuzz.interrupt import InterruptFlag
    from netfuzz.transport import get_backend

    _setup_logging(debug)

    try:
        config = build_config(library, clients=clients, port=port, host=host, seed=seed)
    except ConfigurationError as e:
        console.print(f"[danger]Error: {escape(str(e))}[/danger]")
        raise typer.Exit(EXIT_CONFIG_ERROR)

    print_banner(small=True)
    print_run_info(library_name(config.library), config.clients, config.port, config.host)
    console.print("  [muted]Initialization...[/muted]")

    try:
        backend = get_backend(config.library)
    except ConfigurationError as e:
        console.print(f"[danger]{escape(e.message)}[/danger]")
        raise typer.Exit(EXIT_CONFIG_ERROR)

    print_section("Fuzzing", "🔥")
    try:
        with InterruptFlag() as interrupted, ConsolePhaseRenderer() as renderer:
            engine = FuzzEngine(config, backend, renderer=renderer, interrupted=interrupted)
            summary = engine.run()
    except BackendError as e:
        console.print(f"[danger]{escape(str(e))}[/danger]")
        raise typer.Exit(EXIT_BACKEND_FAILURE)
    except SchedulerError as e:
        console.print(f"[danger]Scheduler failure: {escape(str(e))}[/danger]")
        raise typer.Exit(EXIT_BACKEND_FAILURE)

    console.print("  [muted]Deinitialization...[/muted]")
    print_summary(summary)

    if output:
        _save_summary(summary, output)


def _save_summary(summary, output_path: str) -> bool:
    """Write the run summary as JSON; report failure on the console."""
    try:
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(summary.to_json(), encoding="utf-8")
    except OSError as e:
        console.print(f"  [danger]✗ Failed to save summary to {escape(output_path)}: {escape(str(e))}[/danger]")
        return False
    console.print(f"  [success]✔ Summary saved to {escape(output_path)}[/success]")
    return True


# ─── LIBRARIES COMMAND ───────────────────────────────────────────────────────

@app.command("libraries")
def list_libraries():
    """📋 List networking libraries netfuzz knows about."""
    from netfuzz.transport import BACKENDS

    table = Table(box=box.ROUNDED, border_style="cyan", title="[bold]Networking Libraries[/bold]")
    table.add_column("ID", justify="right", style="accent")
    table.add_column("Name", style="bold")
    table.add_column("Package", style="muted")
    table.add_column("Status")

    for lib, info in LIBRARIES.items():
        status = "[success]supported[/success]" if BACKENDS.get(lib) else "[warning]not implemented[/warning]"
        table.add_row(str(int(lib)), info["name"], info["package"] or "-", status)

    console.print(table)


if __name__ == "__main__":
    app()
