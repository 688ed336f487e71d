import pytest

from waitlimit import (
    OVERHEAD_NANOS,
    Accumulator,
    CenturyScale,
    Duration,
    SubSecond,
    WaitTotal,
    Whole,
    compensate,
    normalize,
    unit_table,
)
from waitlimit.duration import ZERO


def test_duration_validates_fields():
    with pytest.raises(ValueError, match="must be non-negative"):
        Duration(seconds=-1)

    with pytest.raises(ValueError, match=r"must be in \[0, 1000000000\)"):
        Duration(nanoseconds=1_000_000_000)

    with pytest.raises(ValueError):
        Duration(nanoseconds=-1)


def test_duration_ordering_and_helpers():
    assert Duration(seconds=1) > Duration(nanoseconds=999_999_999)
    assert Duration.from_nanos(2_500_000_001) == Duration(
        seconds=2, nanoseconds=500_000_001
    )
    assert Duration(seconds=3, nanoseconds=7).total_nanos == 3_000_000_007
    assert ZERO.is_zero
    assert not Duration(nanoseconds=1).is_zero
    assert str(Duration(seconds=2, nanoseconds=5)) == "2.000000005s"


def test_normalize_carries_many_seconds():
    assert normalize(1, 2_500_000_000) == Duration(seconds=3, nanoseconds=500_000_000)
    assert normalize(0, 999_999_999) == Duration(nanoseconds=999_999_999)
    assert normalize(0, 1_000_000_000) == Duration(seconds=1)


def test_normalize_is_idempotent():
    once = normalize(7, 12_345_678_901)
    twice = normalize(once.seconds, once.nanoseconds)

    assert once == twice


def test_accumulator_sums_every_variant():
    acc = Accumulator()
    acc.add(Whole(seconds=5, nanos=700_000_000))
    acc.add(SubSecond(nanos=600_000_000))
    acc.add(CenturyScale(count=2, nanos=1))

    assert acc.result() == WaitTotal(
        duration=Duration(seconds=6, nanoseconds=300_000_001), centuries=2
    )


def test_empty_accumulator_is_zero():
    assert Accumulator().result().is_zero


def test_accumulator_rejects_unknown_contribution():
    with pytest.raises(TypeError, match="Unsupported contribution 'int'"):
        Accumulator().add(5)  # pyright: ignore[reportArgumentType]


def test_wait_total_counts_centuries_in_total():
    total = WaitTotal(duration=Duration(seconds=10), centuries=2)

    assert total.total_seconds(unit_table()) == 2 * 3_110_400_000 + 10
    assert not total.is_zero

    with pytest.raises(ValueError, match="must be non-negative"):
        WaitTotal(centuries=-1)


def test_compensation_floors_small_nanoseconds():
    assert compensate(Duration(nanoseconds=100)) == Duration()
    assert compensate(Duration(nanoseconds=OVERHEAD_NANOS)) == Duration()
    assert compensate(Duration(seconds=5, nanoseconds=100)) == Duration(seconds=5)


def test_compensation_subtracts_overhead():
    assert compensate(Duration(nanoseconds=OVERHEAD_NANOS + 1)) == Duration(
        nanoseconds=1
    )
    assert compensate(Duration(seconds=5, nanoseconds=500_000)) == Duration(
        seconds=5, nanoseconds=500_000 - OVERHEAD_NANOS
    )


def test_compensation_keeps_result_normalized():
    result = compensate(Duration(seconds=1, nanoseconds=999_999_999))

    assert 0 <= result.nanoseconds < 1_000_000_000
    assert result.total_nanos == 1_999_999_999 - OVERHEAD_NANOS


def test_compensation_with_custom_overhead():
    assert compensate(Duration(seconds=1, nanoseconds=10), overhead=0) == Duration(
        seconds=1, nanoseconds=10
    )
    assert compensate(Duration(nanoseconds=50), overhead=20) == Duration(
        nanoseconds=30
    )

    with pytest.raises(ValueError, match="must be non-negative"):
        compensate(Duration(), overhead=-1)
