from dataclasses import dataclass

from waitlimit.duration import OVERHEAD_NANOS
from waitlimit.util import CALENDAR_MODES, DEFAULT_CALENDAR


class UsageError(ValueError):
    """Bad command-line usage; no wait is attempted."""


@dataclass(frozen=True, kw_only=True)
class WaitConfig:
    """Everything one run needs, gathered from options and the environment."""

    tokens: tuple[str, ...] = ()
    calendar: str = DEFAULT_CALENDAR
    verbose: bool = False
    signal_wait: bool = False
    run: str | None = None
    overhead_nanos: int = OVERHEAD_NANOS

    def __post_init__(self) -> None:
        if not self.tokens and not self.signal_wait:
            raise UsageError("missing operand")
        if self.calendar not in CALENDAR_MODES:
            valid = ", ".join(CALENDAR_MODES)
            raise UsageError(
                f"Invalid calendar mode '{self.calendar}'. Valid modes: {valid}"
            )
        if self.overhead_nanos < 0:
            raise UsageError(
                f"Overhead ({self.overhead_nanos}ns) must be non-negative"
            )
