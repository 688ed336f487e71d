"""Duration token parsing.

A token is ``<digits>['.'<digits>]<suffix>``: an optional integer part, an
optional fractional part and an optional unit suffix (seconds when absent).
Each token resolves to one contribution which the accumulator sums.
"""

import re
from collections.abc import Iterable

from loguru import logger

from waitlimit.duration import Accumulator, WaitTotal
from waitlimit.units import CenturyScale, Contribution, SubSecond, UnitTable, Whole
from waitlimit.util import NANOS_PER_SECOND

FRACTION_DIGITS = 9

_TOKEN = re.compile(
    r"(?P<whole>[0-9]*)(?:\.(?P<fraction>[0-9]*))?(?P<suffix>[^0-9.]*)"
)


class ParseError(ValueError):
    """A duration token that cannot be turned into a wait length."""

    def __init__(self, token: str, reason: str):
        super().__init__(f"invalid time interval '{token}': {reason}")
        self.token: str = token
        self.reason: str = reason


def scale_fraction(digits: str, width: int = FRACTION_DIGITS) -> int:
    """Interpret fractional digits as a count of 10**-width units.

    Short input is right-padded with zeros. Input longer than ``width`` keeps
    its most significant digits; the rest are truncated rather than rejected.

    >>> scale_fraction("5")
    500000000
    >>> scale_fraction("1234567891234")
    123456789
    """
    if not digits:
        return 0
    if not digits.isascii() or not digits.isdigit():
        raise ValueError(f"Fraction must be decimal digits, got {digits!r}")
    return int(digits[:width].ljust(width, "0"))


def parse_token(token: str, table: UnitTable) -> Contribution:
    """Resolve one token against a unit table.

    Raises:
        ParseError: If the literal is malformed or the suffix is unknown
    """
    match = _TOKEN.fullmatch(token.strip())
    if match is None:
        raise ParseError(token, "malformed number")

    whole_digits = match["whole"]
    fraction_digits = match["fraction"] or ""
    suffix = match["suffix"]

    if suffix not in table:
        raise ParseError(token, f"unknown unit suffix '{suffix}'")
    if not whole_digits and not fraction_digits:
        raise ParseError(token, "no digits")

    unit = table[suffix]
    count = int(whole_digits or "0")
    fraction = scale_fraction(fraction_digits)

    match unit.kind:
        case "subsecond":
            if fraction:
                logger.debug(
                    "dropping fractional part of sub-second token {!r}", token
                )
            return SubSecond(nanos=count * unit.nanos)
        case "century":
            centuries = count * (unit.nanos // table.century.nanos)
            return CenturyScale(
                count=centuries, nanos=fraction * unit.nanos // NANOS_PER_SECOND
            )
        case _:
            seconds, nanos = divmod(count * unit.nanos, NANOS_PER_SECOND)
            return Whole(
                seconds=seconds,
                nanos=nanos + fraction * unit.nanos // NANOS_PER_SECOND,
            )


def parse_tokens(tokens: Iterable[str], table: UnitTable) -> WaitTotal:
    """Parse every token and sum the contributions into one wait total."""
    accumulator = Accumulator()
    for token in tokens:
        contribution = parse_token(token, table)
        logger.debug("{!r} -> {}", token, contribution)
        accumulator.add(contribution)
    return accumulator.result()
