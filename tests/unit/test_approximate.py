"""
Unit tests for precision approximation.
"""

import unittest

from ts_annotate.approximate import approximate_time
from ts_annotate.composite_time import (
    TIME_UNIT_COUNT,
    UNITS,
    CompositeTime,
    composite_to_seconds,
    seconds_to_composite,
)
from ts_annotate.self_test import APPROXIMATION_CASES, check_case, run_self_test

SAMPLE_SECONDS = (1, 59, 90, 3599, 5399, 86399, 95310, 31535999, 31622400, 63071999)


class ApproximateTester(unittest.TestCase):
    """Rounding and carry behaviour of approximate_time."""

    def test_pinned_cases(self) -> None:
        for case in APPROXIMATION_CASES:
            with self.subTest(case=case.description):
                self.assertEqual(check_case(case), case.expected)

    def test_round_into_hours(self) -> None:
        comp = seconds_to_composite(composite_to_seconds(CompositeTime(1, 2, 3, 45, 59)))
        self.assertEqual(approximate_time(3, comp), CompositeTime(1, 2, 4, 0, 0))

    def test_each_precision_of_95310(self) -> None:
        comp = seconds_to_composite(95310)
        self.assertEqual(approximate_time(1, comp), CompositeTime(0, 1, 0, 0, 0))
        self.assertEqual(approximate_time(2, comp), CompositeTime(0, 1, 2, 0, 0))
        self.assertEqual(approximate_time(3, comp), CompositeTime(0, 1, 2, 29, 0))
        self.assertEqual(approximate_time(4, comp), CompositeTime(0, 1, 2, 28, 30))

    def test_cascade_to_years(self) -> None:
        self.assertEqual(
            approximate_time(2, CompositeTime(1, 364, 23, 59, 59)),
            CompositeTime(2, 0, 0, 0, 0),
        )
        self.assertEqual(
            approximate_time(1, CompositeTime(0, 364, 23, 0, 0)),
            CompositeTime(1, 0, 0, 0, 0),
        )

    def test_cascade_to_a_day(self) -> None:
        self.assertEqual(
            approximate_time(2, CompositeTime(0, 0, 23, 59, 59)),
            CompositeTime(0, 1, 0, 0, 0),
        )

    def test_below_half_is_dropped(self) -> None:
        self.assertEqual(
            approximate_time(1, CompositeTime(0, 0, 0, 1, 29)),
            CompositeTime(0, 0, 0, 1, 0),
        )

    def test_precision_zero_clears_everything(self) -> None:
        for comp in (CompositeTime(3, 0, 0, 0, 0), CompositeTime(1, 2, 3, 4, 5), CompositeTime()):
            with self.subTest(comp=comp):
                self.assertEqual(approximate_time(0, comp), CompositeTime())

    def test_full_precision_is_identity(self) -> None:
        for seconds in SAMPLE_SECONDS:
            comp = seconds_to_composite(seconds)
            for precision in (TIME_UNIT_COUNT, TIME_UNIT_COUNT + 3):
                with self.subTest(seconds=seconds, precision=precision):
                    self.assertEqual(approximate_time(precision, comp), comp)

    def test_improper_units_are_carried(self) -> None:
        self.assertEqual(
            approximate_time(TIME_UNIT_COUNT, CompositeTime(0, 0, 0, 59, 60)),
            CompositeTime(0, 0, 1, 0, 0),
        )
        self.assertEqual(
            approximate_time(TIME_UNIT_COUNT, CompositeTime(0, 365, 0, 0, 0)),
            CompositeTime(1, 0, 0, 0, 0),
        )

    def test_idempotent(self) -> None:
        for seconds in SAMPLE_SECONDS:
            for precision in range(0, TIME_UNIT_COUNT + 1):
                with self.subTest(seconds=seconds, precision=precision):
                    once = approximate_time(precision, seconds_to_composite(seconds))
                    self.assertEqual(approximate_time(precision, once), once)

    def test_result_is_proper_and_within_budget(self) -> None:
        for seconds in SAMPLE_SECONDS:
            for precision in range(1, TIME_UNIT_COUNT):
                with self.subTest(seconds=seconds, precision=precision):
                    comp = approximate_time(precision, seconds_to_composite(seconds))
                    for value, unit in zip(comp[1:], UNITS[1:]):
                        self.assertLess(value, unit.max_value)
                    self.assertLessEqual(sum(1 for v in comp if v), max(precision, 1))

    def test_never_adds_more_than_one_carry(self) -> None:
        for seconds in SAMPLE_SECONDS:
            for precision in range(1, TIME_UNIT_COUNT):
                with self.subTest(seconds=seconds, precision=precision):
                    comp = approximate_time(precision, seconds_to_composite(seconds))
                    total = composite_to_seconds(comp)
                    self.assertLessEqual(total - seconds, UNITS[0].seconds)

    def test_negative_precision_rejected(self) -> None:
        with self.assertRaises(ValueError):
            approximate_time(-1, CompositeTime())

    def test_self_test_passes(self) -> None:
        self.assertEqual(run_self_test(), 0)


if __name__ == "__main__":
    unittest.main()
