"""Tests for the cooperative scheduler."""
import pytest

from netfuzz.errors import SchedulerError
from netfuzz.fuzzer.scheduler import Scheduler, Signal


# ─── Helpers ─────────────────────────────────────────────────────────────────

def _looping(name, log):
    while True:
        log.append(name)
        yield Signal.SCHEDULE


def _root_after(turns, log, name="root"):
    for _ in range(turns - 1):
        log.append(name)
        yield Signal.SCHEDULE
    log.append(name)
    yield Signal.ROOT


def _park_after(turns, log, name):
    for _ in range(turns):
        log.append(name)
        yield Signal.SCHEDULE
    log.append(name)
    yield Signal.SUSPEND


# ─── Rotation ────────────────────────────────────────────────────────────────

def test_round_robin_order():
    """Tasks take turns in the order they were spawned."""
    log = []
    sched = Scheduler()
    sched.spawn("a", _looping("a", log))
    sched.spawn("b", _looping("b", log))
    sched.spawn("root", _root_after(3, log))

    sched.run()

    assert log == ["a", "b", "root"] * 3
    assert sched.turns == 9


def test_schedule_rotates_front_to_back():
    """schedule() runs the front task and moves it to the back."""
    log = []
    sched = Scheduler()
    first = sched.spawn("a", _looping("a", log))
    sched.spawn("b", _looping("b", log))

    assert sched.schedule() is Signal.SCHEDULE
    assert sched.current is first
    assert log == ["a"]
    sched.schedule()
    assert log == ["a", "b"]


def test_yielded_task_waits_for_everyone_else():
    """A task runs again only after every other rotating task had one turn."""
    log = []
    sched = Scheduler()
    for name in "abcd":
        sched.spawn(name, _looping(name, log))
    sched.spawn("root", _root_after(5, log))

    sched.run()

    for i in range(len(log) - 5):
        window = log[i:i + 5]
        assert len(set(window)) == 5


# ─── Parking ─────────────────────────────────────────────────────────────────

def test_suspended_task_never_runs_again():
    """A task that yields SUSPEND leaves the rotation for good."""
    log = []
    sched = Scheduler()
    parked = sched.spawn("p", _park_after(1, log, "p"))
    sched.spawn("a", _looping("a", log))
    sched.spawn("root", _root_after(5, log))

    sched.run()

    assert log.count("p") == 2
    assert parked.parked is True
    assert sched.pending == 2
    assert log[-4:] == ["a", "root", "a", "root"]


def test_finished_body_counts_as_parked():
    """A body that simply returns is dropped like a parked one."""
    def once(log):
        log.append("once")
        return
        yield  # pragma: no cover

    log = []
    sched = Scheduler()
    task = sched.spawn("once", once(log))
    sched.spawn("root", _root_after(3, log))

    sched.run()

    assert task.parked
    assert log == ["once", "root", "root", "root"]


def test_suspend_removes_most_recently_scheduled():
    """suspend() drops the task that last received control."""
    log = []
    sched = Scheduler()
    a = sched.spawn("a", _looping("a", log))
    sched.spawn("b", _looping("b", log))

    sched.schedule()
    sched.suspend()

    assert a.parked
    assert sched.pending == 1
    sched.schedule()
    sched.schedule()
    assert log == ["a", "b", "b"]


def test_rotation_running_dry_raises():
    """If every task parks before one yields ROOT, that's a scheduler error."""
    log = []
    sched = Scheduler()
    sched.spawn("x", _park_after(0, log, "x"))
    sched.spawn("y", _park_after(2, log, "y"))

    with pytest.raises(SchedulerError):
        sched.run()
    assert sched.pending == 0


# ─── Cleanup ─────────────────────────────────────────────────────────────────

def test_close_runs_cleanup_of_live_tasks():
    """close() lets unfinished bodies run their finally blocks."""
    released = []

    def holder(name):
        try:
            while True:
                yield Signal.SCHEDULE
        finally:
            released.append(name)

    log = []
    sched = Scheduler()
    sched.spawn("h1", holder("h1"))
    sched.spawn("h2", holder("h2"))
    sched.spawn("root", _root_after(2, log))

    sched.run()
    assert released == []

    sched.close()
    assert sorted(released) == ["h1", "h2"]
    assert sched.pending == 0
