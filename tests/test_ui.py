"""Tests for console rendering and the operator interrupt."""
import signal

from loopback import LoopbackBackend

from netfuzz.fuzzer.fuzz_engine import FuzzEngine
from netfuzz.interrupt import InterruptFlag, never
from netfuzz.models import FuzzConfig, Library, PhaseProgress, RunTargets
from netfuzz.ui import ConsolePhaseRenderer, print_run_info, print_summary


def _run(renderer, clients=2):
    config = FuzzConfig(library=Library.ENET, clients=clients, seed=1)
    targets = RunTargets(clients=clients, connection_iterations=10, message_iterations=3)
    return FuzzEngine(config, LoopbackBackend(), renderer=renderer, targets=targets).run()


def test_phase_lines_and_done_marker(capsys):
    """A completed run draws all four phase lines and the completion marker."""
    with ConsolePhaseRenderer(refresh_interval=0) as renderer:
        _run(renderer)
    out = capsys.readouterr().out

    assert "Phase 1: Spawning" in out
    assert "Phase 2: Connections" in out
    assert "Phase 3: Transmission" in out
    assert "Phase 4: Disconnection" in out
    assert "(12/12)" in out
    assert "Done!" in out


def test_renderer_adds_one_task_per_phase():
    """Repeated updates of a phase reuse its line."""
    renderer = ConsolePhaseRenderer()
    renderer.update(PhaseProgress(number=1, name="Spawning", current=0, target=4))
    renderer.update(PhaseProgress(number=1, name="Spawning", current=3, target=4))
    renderer.update(PhaseProgress(number=2, name="Connections", current=0, target=10))

    tasks = renderer.progress.tasks
    assert len(tasks) == 2
    assert tasks[0].completed == 3
    assert tasks[0].fields["number"] == 1


def test_summary_table(capsys):
    """The summary lists the final counters."""
    with ConsolePhaseRenderer() as renderer:
        summary = _run(renderer, clients=1)
    print_summary(summary)
    out = capsys.readouterr().out

    assert "Run Summary" in out
    assert "Messages exchanged" in out
    assert "All phases completed" in out


def test_run_info(capsys):
    """The banner table names the library and the client count."""
    print_run_info("ENet", 256, 9500, "127.0.0.1")
    out = capsys.readouterr().out
    assert "ENet" in out
    assert "256" in out


# ─── Interrupt ───────────────────────────────────────────────────────────────

def test_interrupt_flag_request():
    """The flag reports a stop once requested."""
    flag = InterruptFlag()
    assert flag() is False
    flag.request()
    assert flag() is True
    assert never() is False


def test_interrupt_flag_captures_sigint():
    """Inside the block SIGINT sets the flag; the old handler comes back after."""
    before = signal.getsignal(signal.SIGINT)
    with InterruptFlag() as flag:
        handler = signal.getsignal(signal.SIGINT)
        handler(signal.SIGINT, None)
        assert flag() is True
    assert signal.getsignal(signal.SIGINT) is before
