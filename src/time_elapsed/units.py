"""Unit selection and conversion for nanosecond durations.

All arithmetic is integer division on raw nanosecond counts; values are
truncated, never rounded.
"""

from enum import StrEnum
from typing import Union

__all__ = ['Unit', 'unit_of', 'units_of', 'to_unit', 'to_units',
           'humanize', 'humanize_pair']

UnitLike = Union['Unit', str]


class Unit(StrEnum):
    """Display units, from nanoseconds up to hours."""
    NANOSECONDS = 'ns'
    MICROSECONDS = 'μs'
    MILLISECONDS = 'ms'
    SECONDS = 's'
    MINUTES = 'min'
    HOURS = 'hrs'

    @property
    def nanos(self) -> int:
        """Number of nanoseconds in one of this unit."""
        return _FACTORS[self]

    @property
    def finer(self) -> 'Unit':
        """The next finer unit, shown in parentheses in summaries."""
        return _FINER[self]


_FACTORS: dict[Unit, int] = {
    Unit.NANOSECONDS: 1,
    Unit.MICROSECONDS: 1_000,
    Unit.MILLISECONDS: 1_000_000,
    Unit.SECONDS: 1_000_000_000,
    Unit.MINUTES: 60_000_000_000,
    Unit.HOURS: 3_600_000_000_000,
}

_FINER: dict[Unit, Unit] = {
    Unit.NANOSECONDS: Unit.NANOSECONDS,
    Unit.MICROSECONDS: Unit.NANOSECONDS,
    Unit.MILLISECONDS: Unit.MICROSECONDS,
    Unit.SECONDS: Unit.MILLISECONDS,
    Unit.MINUTES: Unit.SECONDS,
    Unit.HOURS: Unit.MINUTES,
}

# Each threshold is checked on its own against the raw count. The boundaries
# are 4ms, 15s, 300s and 540s and must stay exactly as they are.
_THRESHOLDS: tuple[tuple[int, Unit], ...] = (
    (4_000_000, Unit.MICROSECONDS),
    (15_000_000_000, Unit.MILLISECONDS),
    (300_000_000_000, Unit.SECONDS),
    (540_000_000_000, Unit.MINUTES),
)


def _check(nanos: int) -> int:
    if nanos < 0:
        raise ValueError(f"Duration cannot be negative, got {nanos} ns.")
    return nanos


def _as_unit(unit: UnitLike) -> Unit:
    if isinstance(unit, Unit):
        return unit
    try:
        return Unit(unit)
    except ValueError:
        raise ValueError(f"Unknown unit of measurement: {unit!r}") from None


def unit_of(nanos: int) -> Unit:
    """Pick the display unit for a duration.

    Args:
        nanos: the duration in nanoseconds

    Returns:
        Unit: microseconds below 4ms, milliseconds below 15s, seconds below
        300s, minutes below 540s and hours otherwise

    Raises:
        ValueError: if nanos is negative
    """
    _check(nanos)
    for threshold, unit in _THRESHOLDS:
        if nanos // threshold == 0:
            return unit
    return Unit.HOURS


def units_of(nanos: int) -> tuple[Unit, Unit]:
    """Return the (coarse, fine) unit pair used for summaries."""
    unit = unit_of(nanos)
    return unit, unit.finer


def to_unit(nanos: int, unit: UnitLike) -> int:
    """Convert nanoseconds to a whole number of the given unit.

    Args:
        nanos: the duration in nanoseconds
        unit: a Unit or its label, e.g. 'ms'

    Returns:
        int: the truncated value

    Raises:
        ValueError: if nanos is negative or the unit label is unknown
    """
    return _check(nanos) // _as_unit(unit).nanos


def to_units(nanos: int, unit: UnitLike) -> tuple[int, int]:
    """Convert nanoseconds to the given unit and to the next finer one."""
    coarse = _as_unit(unit)
    return to_unit(nanos, coarse), to_unit(nanos, coarse.finer)


def humanize(nanos: int) -> str:
    unit = unit_of(nanos)
    return f"{to_unit(nanos, unit)} {unit}"


def humanize_pair(nanos: int) -> str:
    coarse, fine = units_of(nanos)
    coarse_value, fine_value = to_units(nanos, coarse)
    return f"{coarse_value} {coarse} ({fine_value} {fine})"
