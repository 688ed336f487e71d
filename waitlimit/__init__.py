from loguru import logger

from .config import UsageError, WaitConfig
from .duration import (
    OVERHEAD_NANOS,
    Accumulator,
    Duration,
    WaitTotal,
    compensate,
    normalize,
)
from .parser import ParseError, parse_token, parse_tokens, scale_fraction
from .report import COMPLETION, describe, format_remaining
from .scheduler import (
    Outcome,
    SignalFlag,
    SleepScheduler,
    State,
    SystemWaiter,
    Waiter,
)
from .units import CenturyScale, SubSecond, Unit, UnitTable, Whole, unit_table
from .util import CALENDAR_MODES, DEFAULT_CALENDAR

__version__ = "0.1.0"

# Library modules stay quiet unless an application opts in
logger.disable(__name__)

__all__ = [
    "Duration",
    "WaitTotal",
    "Accumulator",
    "normalize",
    "compensate",
    "OVERHEAD_NANOS",
    "ParseError",
    "parse_token",
    "parse_tokens",
    "scale_fraction",
    "Unit",
    "UnitTable",
    "unit_table",
    "Whole",
    "SubSecond",
    "CenturyScale",
    "SignalFlag",
    "Waiter",
    "SystemWaiter",
    "SleepScheduler",
    "State",
    "Outcome",
    "describe",
    "format_remaining",
    "COMPLETION",
    "WaitConfig",
    "UsageError",
    "CALENDAR_MODES",
    "DEFAULT_CALENDAR",
]
