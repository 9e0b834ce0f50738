"""
netfuzz terminal UI: banner, live phase lines and run summary.
"""

import time

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TaskID, TextColumn, TimeElapsedColumn
from rich.table import Table
from rich.theme import Theme

from netfuzz import __version__
from netfuzz.models import PhaseProgress, RunOutcome, RunSummary

# ── Custom Theme ─────────────────────────────────────────────────────────────

NETFUZZ_THEME = Theme({
    "info": "cyan",
    "warning": "yellow",
    "danger": "red bold",
    "success": "green bold",
    "muted": "dim white",
    "accent": "bold cyan",
    "phase": "bold white",
    "value": "green",
})

console = Console(theme=NETFUZZ_THEME)

# ── Banner ───────────────────────────────────────────────────────────────────

BANNER = f"""[cyan]
  ┌┐┌┌─┐┌┬┐┌─┐┬ ┬┌─┐┌─┐
  │││├┤  │ ├┤ │ │┌─┘┌─┘
  ┘└┘└─┘ ┴ └  └─┘└─┘└─┘
[/cyan][dim white]  ──── Reliable UDP Swarm Fuzzer ── v{__version__} ────[/dim white]
"""

SMALL_BANNER = f"[bold cyan]⚡ netfuzz[/bold cyan] [dim]v{__version__}[/dim]"


def print_banner(small: bool = False):
    """Print the netfuzz banner."""
    if small:
        console.print(SMALL_BANNER)
    else:
        console.print(BANNER)


def print_run_info(library: str, clients: int, port: int, host: str = ""):
    """Print the networking library and swarm size."""
    table = Table(box=box.SIMPLE_HEAVY, show_header=False, padding=(0, 2))
    table.add_column("key", style="muted", width=20)
    table.add_column("value", style="value")
    table.add_row("Networking library", library)
    table.add_row("Number of clients", str(clients))
    table.add_row("Endpoint", f"{host}:{port}" if host else str(port))
    console.print(Panel(
        table,
        title="[bold cyan]◉ Run[/bold cyan]",
        border_style="cyan",
        padding=(1, 2),
    ))


def print_section(title: str, icon: str = "─"):
    """Print a section divider."""
    console.print()
    console.rule(f"[bold cyan] {icon} {title} [/bold cyan]", style="dim cyan")
    console.print()


# ── Phase lines ──────────────────────────────────────────────────────────────

class ConsolePhaseRenderer:
    """
    Draws one live line per phase: `Phase N: <Name> (<current>/<target>)`.

    The progress display is refreshed by hand, never from a background
    thread, and at most once per `refresh_interval` unless a phase changes.
    """

    def __init__(self, refresh_interval: float = 0.1):
        self.refresh_interval = refresh_interval
        self.progress = Progress(
            TextColumn("  [phase]Phase {task.fields[number]}: {task.description}[/phase]"),
            TextColumn("[muted]({task.completed:.0f}/{task.total:.0f})[/muted]"),
            BarColumn(bar_width=30, style="dim cyan", complete_style="cyan"),
            TimeElapsedColumn(),
            console=console,
            auto_refresh=False,
        )
        self._tasks: dict[int, TaskID] = {}
        self._last_refresh = 0.0

    def __enter__(self) -> "ConsolePhaseRenderer":
        self.progress.start()
        return self

    def __exit__(self, *exc) -> None:
        self.progress.stop()

    def _refresh(self, force: bool = False) -> None:
        now = time.monotonic()
        if force or now - self._last_refresh >= self.refresh_interval:
            self.progress.refresh()
            self._last_refresh = now

    def update(self, progress: PhaseProgress) -> None:
        task = self._tasks.get(progress.number)
        if task is None:
            task = self.progress.add_task(
                progress.name, total=progress.target, number=progress.number,
            )
            self._tasks[progress.number] = task
            self.progress.update(task, completed=progress.current)
            self._refresh(force=True)
            return
        self.progress.update(task, completed=progress.current)
        self._refresh()

    def complete(self, progress: PhaseProgress) -> None:
        task = self._tasks[progress.number]
        self.progress.update(task, completed=progress.current)
        self.progress.stop_task(task)
        self._refresh(force=True)

    def finish(self, completed: bool) -> None:
        self._refresh(force=True)
        if completed:
            console.print("  [success]Done![/success]")
        else:
            console.print("  [warning]⚠ Every actor parked, fuzzing stopped early.[/warning]")


# ── Summary ──────────────────────────────────────────────────────────────────

def print_summary(summary: RunSummary):
    """Print final counters of a run."""
    state = summary.state
    table = Table(
        box=box.DOUBLE_EDGE,
        title="[bold white]Run Summary[/bold white]",
        border_style="cyan",
        padding=(0, 2),
    )
    table.add_column("Counter", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Clients spawned", str(state.clients_spawned))
    table.add_row("Clients connected", str(state.clients_connected))
    table.add_row("Connection iterations", str(state.connection_iterations))
    table.add_row("Disconnection iterations", str(state.disconnection_iterations))
    table.add_row("Messages exchanged", str(state.messages_exchanged))
    table.add_row("Clients disconnected", str(state.clients_disconnected))
    table.add_row("Clients parked", str(state.clients_parked))
    table.add_section()
    table.add_row("Scheduler turns", str(summary.turns))
    table.add_row("Duration", f"{summary.duration_s:.2f}s")

    console.print()
    console.print(table)

    if summary.outcome is RunOutcome.COMPLETED:
        console.print("\n  [success]✔  All phases completed.[/success]")
    else:
        done = ", ".join(summary.phases_completed) or "none"
        console.print(f"\n  [warning]⚡ Run stopped early. Phases completed: {done}[/warning]")
    console.print()
