"""
Precision approximation of composite durations.

approximate_time() keeps at most `precision` non-zero units, rounding the
first discarded unit into its more significant neighbour when it is at
least half of its unit's maximum, and carrying any unit that has reached
its maximum. Years are the most significant unit: they count toward the
precision budget but are never discarded or carried.

Precision behaviour:
  - 0: every unit, years included, is reset; the duration is empty.
  - 1: only the most significant non-zero unit is kept (rounded).
  - 2..4: that many significant non-zero units are kept.
  - >= 5: nothing is discarded; only improper units are carried.

Examples at precision 2:
  0y 1d 2h 28m 30s -> 1d 2h
  0y 0d 23h 59m 59s -> 1d (the carry cascades from minutes to days)
"""

from ts_annotate.composite_time import BOUNDED_MAX_VALUES, CompositeTime, TimeUnit


def _approximate_pass(precision: int, values: list[int]) -> bool:
    """Run a single scan over values, adjusting at most one unit.

    Returns True when values changed and another scan is needed.
    """
    overflowing_index = -1
    non_zero_count = 0

    for i, value in enumerate(values):
        if value == 0:
            continue

        non_zero_count += 1

        if i == TimeUnit.YEAR:
            # Years never overflow.
            continue

        max_value = BOUNDED_MAX_VALUES[i - 1]

        if non_zero_count > precision:
            if value >= max_value // 2:
                values[i - 1] += 1
            for j in range(i, len(values)):
                values[j] = 0
            return True
        elif value >= max_value:
            overflowing_index = i

    if overflowing_index != -1:
        # One improper unit is adjusted per pass.
        values[overflowing_index - 1] += 1
        values[overflowing_index] = 0
        return True

    return False


def approximate_time(precision: int, comp: CompositeTime) -> CompositeTime:
    """Normalise comp to at most `precision` significant non-zero units."""
    if precision < 0:
        raise ValueError(f"precision must be >= 0, got {precision}")
    if precision == 0:
        return CompositeTime()

    values = list(comp)
    while _approximate_pass(precision, values):
        pass
    return CompositeTime(*values)
