"""Interruptible wait scheduling.

The scheduler drives a :class:`Waiter` (the host's timed-wait primitive)
through ``IDLE -> WAITING -> (TIMED_OUT | SIGNALED) -> CENTURY_DRAIN -> DONE``.
Signal handlers only record the signal number in a :class:`SignalFlag`; all
decisions are made by the scheduler after each wait returns.
"""

import select
import signal
import socket
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from types import FrameType, TracebackType

from loguru import logger

from waitlimit.duration import Duration, WaitTotal
from waitlimit.units import UnitTable
from waitlimit.util import NANOS_PER_SECOND

# Signals that wake a wait. SIGALRM ends it; the others report progress
# unless waiting for a signal was requested.
WATCHED_SIGNALS: tuple[signal.Signals, ...] = (
    signal.SIGALRM,
    signal.SIGUSR1,
    signal.SIGUSR2,
)

# Longest single timed wait handed to the host (32-bit seconds)
NATIVE_WAIT_LIMIT = Duration(seconds=2**31 - 1)


class SignalFlag:
    """Last signal delivered, written by the handler and read by the scheduler."""

    __slots__ = ("signum",)

    def __init__(self):
        self.signum: int | None = None

    def record(self, signum: int, frame: FrameType | None = None) -> None:
        self.signum = signum

    def take(self) -> int | None:
        signum, self.signum = self.signum, None
        return signum


class Waiter(ABC):

    @abstractmethod
    def wait(self, duration: Duration) -> Duration | None:
        """Wait up to ``duration``.

        Returns None when the full duration elapsed, otherwise the time still
        remaining when a signal cut the wait short. The remaining time is
        always strictly less than ``duration``.
        """
        pass

    @abstractmethod
    def sleep(self, duration: Duration) -> None:
        """Sleep for ``duration``, resuming transparently across signals."""
        pass

    @abstractmethod
    def pause(self) -> None:
        """Block until a watched signal arrives."""
        pass


def _chunks(nanos: int, limit: int) -> Iterable[int]:
    while nanos > 0:
        step = min(nanos, limit)
        yield step
        nanos -= step


class SystemWaiter(Waiter):
    """Waiter backed by ``select`` on a signal wake-up socket.

    Use as a context manager: entering installs handlers for the watched
    signals and routes their wake-up bytes to a private socket pair, exiting
    restores whatever was there before.
    """

    def __init__(
        self,
        flag: SignalFlag,
        signals: Iterable[signal.Signals] = WATCHED_SIGNALS,
        limit: Duration = NATIVE_WAIT_LIMIT,
    ):
        self.flag: SignalFlag = flag
        self.signals: tuple[signal.Signals, ...] = tuple(signals)
        self.limit: int = limit.total_nanos
        self._reader: socket.socket | None = None
        self._writer: socket.socket | None = None
        self._previous_fd: int = -1
        self._previous_handlers: dict[signal.Signals, object] = {}

    def __enter__(self) -> "SystemWaiter":
        self._reader, self._writer = socket.socketpair()
        self._reader.setblocking(False)
        self._writer.setblocking(False)
        self._previous_fd = signal.set_wakeup_fd(
            self._writer.fileno(), warn_on_full_buffer=False
        )
        for signum in self.signals:
            self._previous_handlers[signum] = signal.signal(
                signum, self.flag.record
            )
        logger.debug("watching signals {}", [s.name for s in self.signals])
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)  # pyright: ignore[reportArgumentType]
        self._previous_handlers.clear()
        signal.set_wakeup_fd(self._previous_fd)
        for sock in (self._reader, self._writer):
            if sock is not None:
                sock.close()
        self._reader = self._writer = None

    def _drain(self) -> None:
        """Empty the wake-up socket, recording any watched signal it carried."""
        if self._reader is None:
            return
        while True:
            try:
                data = self._reader.recv(512)
            except BlockingIOError:
                return
            if not data:
                return
            for signum in data:
                if signum in self.signals:
                    self.flag.record(signum)

    def wait(self, duration: Duration) -> Duration | None:
        if self._reader is None:
            raise RuntimeError("SystemWaiter must be entered before waiting")
        requested = duration.total_nanos
        deadline = time.monotonic_ns() + requested
        while True:
            left = deadline - time.monotonic_ns()
            if left <= 0:
                return None
            timeout = min(left, self.limit) / NANOS_PER_SECOND
            readable, _, _ = select.select([self._reader], [], [], timeout)
            if not readable:
                continue
            self._drain()
            if self.flag.signum is not None:
                left = deadline - time.monotonic_ns()
                return Duration.from_nanos(max(0, min(left, requested - 1)))

    def sleep(self, duration: Duration) -> None:
        for step in _chunks(duration.total_nanos, self.limit):
            time.sleep(step / NANOS_PER_SECOND)

    def pause(self) -> None:
        if self._reader is None:
            raise RuntimeError("SystemWaiter must be entered before pausing")
        # A signal landing before select still leaves a byte on the socket
        while self.flag.signum is None:
            select.select([self._reader], [], [])
            self._drain()


class State(Enum):
    IDLE = "idle"
    WAITING = "waiting"
    TIMED_OUT = "timed out"
    SIGNALED = "signaled"
    CENTURY_DRAIN = "century drain"
    DONE = "done"


@dataclass(frozen=True, kw_only=True)
class Outcome:
    states: tuple[State, ...]
    signal: int | None = None
    resumes: int = 0
    centuries_drained: int = 0

    @property
    def signaled(self) -> bool:
        return State.SIGNALED in self.states


ProgressCallback = Callable[[Duration, int | None], None]


class SleepScheduler:
    """Suspend for a parsed wait total, reacting to signals between waits."""

    def __init__(
        self,
        waiter: Waiter,
        flag: SignalFlag,
        table: UnitTable,
        *,
        signal_wait: bool = False,
        on_progress: ProgressCallback | None = None,
    ):
        self.waiter: Waiter = waiter
        self.flag: SignalFlag = flag
        self.century: Duration = Duration.from_nanos(table.century.nanos)
        self.signal_wait: bool = signal_wait
        self.on_progress: ProgressCallback | None = on_progress
        self.state: State = State.IDLE
        self._states: list[State] = []

    def _enter(self, state: State) -> None:
        logger.debug("{} -> {}", self.state.value, state.value)
        self.state = state
        self._states.append(state)

    def run(self, total: WaitTotal) -> Outcome:
        if self._states:
            raise RuntimeError("SleepScheduler instances run only once")
        self._states.append(State.IDLE)

        if self.signal_wait and total.is_zero:
            # No timeout exists in this mode
            self.waiter.pause()
            self._enter(State.SIGNALED)
            return self._finish(signum=self.flag.take())

        self._enter(State.WAITING)
        pending = total.duration
        resumes = 0
        signum = None
        while True:
            remaining = self.waiter.wait(pending)
            signum = self.flag.take()
            if remaining is None:
                self._enter(State.TIMED_OUT)
                signum = None
                break
            if self.signal_wait or signum == signal.SIGALRM:
                self._enter(State.SIGNALED)
                break
            if remaining >= pending:
                raise RuntimeError(
                    f"Wait did not make progress: {remaining} left of {pending}"
                )
            if self.on_progress is not None:
                self.on_progress(remaining, signum)
            pending = remaining
            resumes += 1
            self._enter(State.WAITING)

        drained = 0
        if total.centuries:
            self._enter(State.CENTURY_DRAIN)
            for _ in range(total.centuries):
                self.waiter.sleep(self.century)
                drained += 1
        return self._finish(signum=signum, resumes=resumes, drained=drained)

    def _finish(
        self, signum: int | None = None, resumes: int = 0, drained: int = 0
    ) -> Outcome:
        self._enter(State.DONE)
        return Outcome(
            states=tuple(self._states),
            signal=signum,
            resumes=resumes,
            centuries_drained=drained,
        )
