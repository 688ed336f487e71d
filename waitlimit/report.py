"""Human-readable descriptions of a wait."""

from waitlimit.duration import Duration, WaitTotal
from waitlimit.units import UnitTable

COMPLETION = "Time's up!"


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    if count == 1:
        return f"{count} {singular}"
    return f"{count} {plural or singular + 's'}"


def describe(total: WaitTotal, table: UnitTable) -> list[str]:
    """Banner listing the total wait and its non-zero components.

    >>> from waitlimit.units import unit_table
    >>> describe(WaitTotal(duration=Duration(seconds=90)), unit_table())
    ['Waiting for a total of 90 seconds, consisting of:', '    90 seconds']
    """
    seconds = total.total_seconds(table)
    century = table.century
    lines = [
        f"Waiting for a total of {pluralize(seconds, 'second')}, consisting of:"
    ]
    parts = [
        (total.centuries, century.name, century.plural),
        (total.duration.seconds, "second", None),
        (total.duration.nanoseconds, "nanosecond", None),
    ]
    for count, singular, plural in parts:
        if count:
            lines.append(f"    {pluralize(count, singular, plural)}")
    return lines


def format_remaining(remaining: Duration, signum: int | None = None) -> str:
    """Progress line printed when a signal interrupts the wait."""
    line = (
        f"{pluralize(remaining.seconds, 'second')} and "
        f"{pluralize(remaining.nanoseconds, 'nanosecond')} remaining"
    )
    if signum is not None:
        line += f" (signal {int(signum)})"
    return line
