"""
Unit tests for breakeven search, display formatting and pairwise crossovers.

Version: 0.1.0
Status: Active
"""

import unittest

import numpy as np

from mortgage_breakeven.breakeven import (
    BreakevenPeriod,
    Resolution,
    breakeven_exceeds,
    find_breakeven,
    first_crossing,
    format_breakeven_period,
    pairwise_breakeven,
    pairwise_breakevens,
)


class TestFirstCrossing(unittest.TestCase):

    def test_first_true_index(self):
        self.assertEqual(first_crossing([False, False, True, False, True]), 2)
        self.assertEqual(first_crossing([True, False]), 0)

    def test_never(self):
        self.assertIsNone(first_crossing([False] * 10))
        self.assertIsNone(first_crossing([]))


class TestFindBreakeven(unittest.TestCase):

    def test_condition_holds_at_and_after_breakeven_only_first(self):
        savings = np.arange(0, 2_000, 100, dtype=float)
        month = find_breakeven(savings, 750.0)
        self.assertEqual(month, 8)
        self.assertTrue(savings[month] >= 750.0)
        self.assertTrue(np.all(savings[:month] < 750.0))

    def test_strict_requires_exceeding(self):
        savings = np.arange(0, 1_000, 100, dtype=float)
        self.assertEqual(find_breakeven(savings, 500.0), 5)
        self.assertEqual(find_breakeven(savings, 500.0, strict=True), 6)

    def test_series_threshold(self):
        rent = np.array([0.0, 100.0, 200.0, 300.0])
        ownership = np.array([250.0, 250.0, 250.0, 250.0])
        self.assertEqual(find_breakeven(rent, ownership, strict=True), 3)

    def test_rounding_noise_does_not_cross(self):
        self.assertIsNone(find_breakeven(np.array([0.0, 100.0000000001]), 100.0, strict=True))
        self.assertEqual(find_breakeven(np.array([0.0, 99.9999999999]), 100.0), 1)

    def test_immediate_breakeven(self):
        self.assertEqual(find_breakeven(np.array([0.0, 10.0]), 0.0), 0)

    def test_never(self):
        self.assertIsNone(find_breakeven(np.zeros(12), 1.0))

    def test_exceeds(self):
        self.assertTrue(breakeven_exceeds(None, 36))
        self.assertTrue(breakeven_exceeds(37, 36))
        self.assertFalse(breakeven_exceeds(36, 36))
        self.assertFalse(breakeven_exceeds(0, 36))


class TestBreakevenDisplay(unittest.TestCase):

    def test_format(self):
        cases = [
            (None, "Never"),
            (0, "0 months"),
            (1, "1 month"),
            (3, "3 months"),
            (12, "1 year"),
            (18, "1 year 6 months"),
            (25, "2 years 1 month"),
            (120, "10 years"),
        ]
        for month, expected in cases:
            with self.subTest(month=month):
                self.assertEqual(format_breakeven_period(month), expected)

    def test_period_fields(self):
        period = BreakevenPeriod(30)
        self.assertEqual((period.years, period.months), (2, 6))
        self.assertIs(period.resolution, Resolution.YEAR)
        self.assertIs(BreakevenPeriod(23).resolution, Resolution.MONTH)
        self.assertIs(BreakevenPeriod(24).resolution, Resolution.YEAR)

    def test_never_period(self):
        period = BreakevenPeriod(None)
        self.assertTrue(period.is_never)
        self.assertIsNone(period.years)
        self.assertIsNone(period.months)
        self.assertIs(period.resolution, Resolution.YEAR)


class TestPairwiseBreakeven(unittest.TestCase):

    def setUp(self):
        t = np.arange(0, 37, dtype=float)
        # option 0: cashback up front, higher running cost
        self.net_costs = np.vstack([-700.0 + 100.0 * t, 50.0 * t])

    def test_crossing(self):
        result = pairwise_breakeven(self.net_costs, 0, 1)
        self.assertEqual((result.first, result.second), (0, 1))
        self.assertEqual(result.leader, 0)
        self.assertEqual(result.challenger, 1)
        self.assertEqual(result.month, 15)

    def test_leader_taken_from_start(self):
        result = pairwise_breakeven(self.net_costs[::-1], 0, 1)
        self.assertEqual(result.leader, 1)
        self.assertEqual(result.challenger, 0)
        self.assertEqual(result.month, 15)

    def test_no_crossing(self):
        t = np.arange(0, 13, dtype=float)
        result = pairwise_breakeven(np.vstack([10.0 * t, 20.0 * t]), 0, 1)
        self.assertEqual(result.leader, 0)
        self.assertIsNone(result.month)

    def test_identical_rows(self):
        row = np.linspace(0.0, 500.0, 13)
        result = pairwise_breakeven(np.vstack([row, row]), 0, 1)
        self.assertEqual(result.leader, 0)
        self.assertIsNone(result.month)

    def test_tie_at_start_uses_first_difference(self):
        t = np.arange(0, 13, dtype=float)
        result = pairwise_breakeven(np.vstack([20.0 * t, 10.0 * t]), 0, 1)
        self.assertEqual(result.leader, 1)
        self.assertIsNone(result.month)

    def test_all_pairs(self):
        for n_options, expected in [(2, 1), (3, 3), (4, 6)]:
            with self.subTest(n_options=n_options):
                costs = np.arange(n_options * 5, dtype=float).reshape(n_options, 5)
                results = pairwise_breakevens(costs)
                self.assertEqual(len(results), expected)
                self.assertEqual(len({(r.first, r.second) for r in results}), expected)
                self.assertTrue(all(r.first < r.second for r in results))

    def test_single_option_has_no_pairs(self):
        self.assertEqual(pairwise_breakevens(np.arange(5, dtype=float)), [])


if __name__ == '__main__':
    unittest.main()
