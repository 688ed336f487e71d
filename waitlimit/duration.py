"""Duration values, token accumulation and overhead compensation."""

from dataclasses import dataclass

from loguru import logger

from waitlimit.units import CenturyScale, Contribution, SubSecond, UnitTable, Whole
from waitlimit.util import NANOS_PER_SECOND

# Estimated process scheduling and startup latency, subtracted once per run
OVERHEAD_NANOS = 300_000


@dataclass(frozen=True, kw_only=True, order=True)
class Duration:
    seconds: int = 0
    nanoseconds: int = 0

    def __post_init__(self) -> None:
        if self.seconds < 0:
            raise ValueError(
                f"Duration seconds ({self.seconds}) must be non-negative"
            )
        if not 0 <= self.nanoseconds < NANOS_PER_SECOND:
            raise ValueError(
                f"Duration nanoseconds ({self.nanoseconds}) must be in "
                f"[0, {NANOS_PER_SECOND})\n"
                f"Hint: use normalize(seconds, nanoseconds) to carry the surplus"
            )

    @classmethod
    def from_nanos(cls, nanos: int) -> "Duration":
        seconds, nanoseconds = divmod(nanos, NANOS_PER_SECOND)
        return cls(seconds=seconds, nanoseconds=nanoseconds)

    @property
    def total_nanos(self) -> int:
        return self.seconds * NANOS_PER_SECOND + self.nanoseconds

    @property
    def is_zero(self) -> bool:
        return self.seconds == 0 and self.nanoseconds == 0

    def __str__(self) -> str:
        return f"{self.seconds}.{self.nanoseconds:09d}s"


ZERO = Duration()


def normalize(seconds: int, nanoseconds: int) -> Duration:
    """Carry whole seconds out of ``nanoseconds``.

    Handles any number of carries in one step, so normalizing an already
    normalized value returns it unchanged.
    """
    carry, nanoseconds = divmod(nanoseconds, NANOS_PER_SECOND)
    return Duration(seconds=seconds + carry, nanoseconds=nanoseconds)


@dataclass(frozen=True, kw_only=True)
class WaitTotal:
    """The frozen result of parsing: a duration plus whole centuries."""

    duration: Duration = ZERO
    centuries: int = 0

    def __post_init__(self) -> None:
        if self.centuries < 0:
            raise ValueError(
                f"Century count ({self.centuries}) must be non-negative"
            )

    @property
    def is_zero(self) -> bool:
        return self.duration.is_zero and self.centuries == 0

    def total_nanos(self, table: UnitTable) -> int:
        """Full wait length, centuries included, in nanoseconds."""
        return self.centuries * table.century.nanos + self.duration.total_nanos

    def total_seconds(self, table: UnitTable) -> int:
        return self.total_nanos(table) // NANOS_PER_SECOND


class Accumulator:
    """Running sum of token contributions.

    Contributions are added component-wise, so the order tokens arrive in
    has no effect on the result.
    """

    def __init__(self):
        self.seconds: int = 0
        self.nanoseconds: int = 0
        self.centuries: int = 0

    def add(self, contribution: Contribution) -> None:
        match contribution:
            case Whole(seconds=seconds, nanos=nanos):
                self.seconds += seconds
                self.nanoseconds += nanos
            case SubSecond(nanos=nanos):
                self.nanoseconds += nanos
            case CenturyScale(count=count, nanos=nanos):
                self.centuries += count
                self.nanoseconds += nanos
            case _:
                raise TypeError(
                    f"Unsupported contribution {type(contribution).__name__!r}"
                )

    def result(self) -> WaitTotal:
        duration = normalize(self.seconds, self.nanoseconds)
        logger.debug(
            "accumulated {} with {} centuries", duration, self.centuries
        )
        return WaitTotal(duration=duration, centuries=self.centuries)


def compensate(duration: Duration, overhead: int = OVERHEAD_NANOS) -> Duration:
    """Subtract the fixed scheduling overhead from the nanosecond component.

    When the nanoseconds exceed the overhead the result is exactly
    ``duration - overhead``; borrowing a second and subtracting from
    ``nanoseconds + 1e9`` lands on the same value once normalized. When the
    overhead already dominates the nanoseconds, they are floored to zero and
    the seconds are left alone.
    """
    if overhead < 0:
        raise ValueError(f"Overhead ({overhead}ns) must be non-negative")
    if duration.nanoseconds > overhead:
        return Duration(
            seconds=duration.seconds,
            nanoseconds=duration.nanoseconds - overhead,
        )
    return Duration(seconds=duration.seconds, nanoseconds=0)
