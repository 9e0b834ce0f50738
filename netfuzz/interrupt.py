"""
Ctrl+C stops the swarm instead of killing the process.
"""

import signal


class InterruptFlag:
    """
    Callable that reports whether the operator asked the run to stop.

    Use as a context manager: SIGINT is captured while inside the block and
    the previous handler is restored on exit.
    """

    def __init__(self):
        self.requested = False
        self._previous = None

    def __call__(self) -> bool:
        return self.requested

    def request(self, *_args) -> None:
        self.requested = True

    def __enter__(self) -> "InterruptFlag":
        self._previous = signal.signal(signal.SIGINT, self.request)
        return self

    def __exit__(self, *exc) -> None:
        signal.signal(signal.SIGINT, self._previous)
        self._previous = None


def never() -> bool:
    return False
