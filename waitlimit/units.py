"""Suffix table mapping duration suffixes to fixed unit lengths.

A table is built once per calendar mode and never mutated afterwards.
Every parsed token resolves to one of three contribution variants which the
accumulator folds together by plain addition.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from functools import cache
from typing import Literal, TypeAlias

from typing_extensions import override

from waitlimit.util import (
    DAY,
    DEFAULT_CALENDAR,
    FORTNIGHT,
    HOUR,
    MICROSECOND,
    MILLISECOND,
    MINUTE,
    NANOS_PER_SECOND,
    NANOSECOND,
    SECOND,
    WEEK,
    month_nanos,
    year_nanos,
)

UnitKind: TypeAlias = Literal["whole", "subsecond", "century"]


@dataclass(frozen=True, kw_only=True)
class Unit:
    name: str
    plural: str
    nanos: int
    kind: UnitKind = "whole"

    def __post_init__(self) -> None:
        if self.nanos <= 0:
            raise ValueError(f"Unit {self.name!r} must have a positive length")

    def __str__(self) -> str:
        return f"Unit({self.name}, {self.nanos}ns)"


@dataclass(frozen=True, kw_only=True)
class Whole:
    """Contribution of a second-or-larger unit."""

    seconds: int
    nanos: int = 0


@dataclass(frozen=True, kw_only=True)
class SubSecond:
    """Contribution of a millisecond, microsecond or nanosecond token."""

    nanos: int


@dataclass(frozen=True, kw_only=True)
class CenturyScale:
    """Whole centuries kept apart from seconds, plus any fractional remainder."""

    count: int
    nanos: int = 0


Contribution: TypeAlias = Whole | SubSecond | CenturyScale


class UnitTable(Mapping[str, Unit]):
    """Read-only, case-insensitive suffix lookup for one calendar mode."""

    def __init__(self, mode: str, entries: Iterable[tuple[tuple[str, ...], Unit]]):
        self.mode: str = mode
        self._units: dict[str, Unit] = {}
        for suffixes, unit in entries:
            for suffix in suffixes:
                self._units[suffix.lower()] = unit

    @override
    def __getitem__(self, suffix: str) -> Unit:
        return self._units[suffix.lower()]

    @override
    def __iter__(self) -> Iterator[str]:
        return iter(self._units)

    @override
    def __len__(self) -> int:
        return len(self._units)

    @override
    def __contains__(self, suffix: object) -> bool:
        return isinstance(suffix, str) and suffix.lower() in self._units

    def unit(self, name: str) -> Unit:
        """Look a unit up by its canonical name (e.g. ``"century"``)."""
        for unit in self._units.values():
            if unit.name == name:
                return unit
        raise KeyError(name)

    @property
    def century(self) -> Unit:
        return self.unit("century")

    def __repr__(self) -> str:
        return f"UnitTable(mode={self.mode!r}, suffixes={len(self)})"


@cache
def unit_table(mode: str = DEFAULT_CALENDAR) -> UnitTable:
    """Build the suffix table for a calendar mode.

    Year-based units (month, year, decade, century, millennium) follow the
    mode's year length; everything from seconds to fortnights is fixed.

    Raises:
        ValueError: If ``mode`` is not a known calendar mode
    """
    year = year_nanos(mode)
    ns = NANOS_PER_SECOND

    second = Unit(name="second", plural="seconds", nanos=SECOND * ns)
    century = Unit(
        name="century", plural="centuries", nanos=100 * year, kind="century"
    )

    entries: list[tuple[tuple[str, ...], Unit]] = [
        (("", "s", "sec", "secs", "second", "seconds"), second),
        (
            ("m", "min", "mins", "minute", "minutes"),
            Unit(name="minute", plural="minutes", nanos=MINUTE * ns),
        ),
        (
            ("h", "hr", "hrs", "hour", "hours"),
            Unit(name="hour", plural="hours", nanos=HOUR * ns),
        ),
        (("d", "day", "days"), Unit(name="day", plural="days", nanos=DAY * ns)),
        (
            ("w", "wk", "wks", "week", "weeks"),
            Unit(name="week", plural="weeks", nanos=WEEK * ns),
        ),
        (
            ("f", "fortnight", "fortnights"),
            Unit(name="fortnight", plural="fortnights", nanos=FORTNIGHT * ns),
        ),
        (
            ("o", "mo", "month", "months"),
            Unit(name="month", plural="months", nanos=month_nanos(mode)),
        ),
        (
            ("y", "yr", "yrs", "year", "years"),
            Unit(name="year", plural="years", nanos=year),
        ),
        (
            ("x", "decade", "decades"),
            Unit(name="decade", plural="decades", nanos=10 * year),
        ),
        (("c", "century", "centuries"), century),
        (
            ("k", "millennium", "millennia"),
            Unit(
                name="millennium",
                plural="millennia",
                nanos=1000 * year,
                kind="century",
            ),
        ),
        (
            ("ms", "msec", "millisecond", "milliseconds"),
            Unit(
                name="millisecond",
                plural="milliseconds",
                nanos=MILLISECOND,
                kind="subsecond",
            ),
        ),
        (
            ("u", "us", "µs", "μs", "usec", "microsecond", "microseconds"),
            Unit(
                name="microsecond",
                plural="microseconds",
                nanos=MICROSECOND,
                kind="subsecond",
            ),
        ),
        (
            ("n", "ns", "nsec", "nanosecond", "nanoseconds"),
            Unit(
                name="nanosecond",
                plural="nanoseconds",
                nanos=NANOSECOND,
                kind="subsecond",
            ),
        ),
    ]
    return UnitTable(mode, entries)
