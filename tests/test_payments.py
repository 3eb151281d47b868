"""
Unit tests for level-payment amortization.

Verifies the closed forms (payment, balance factor) against the month-by-month
schedule, terminal conditions, the zero-rate branch, and the re-amortization
that applies a follow-on rate at the end of a fixed period.

Version: 0.1.0
Status: Active
"""

import unittest

import numpy as np

from mortgage_breakeven.payments import (
    amortization_schedule,
    balance_factor,
    cost_of_credit_percent,
    follow_on_ltv,
    monthly_follow_on_payment,
    monthly_payment,
    rate_path,
    remaining_balance,
    split_payment,
    total_repayable,
)
from tests.utilities import euros, fixed, variable


# =============================================================================
# Test Parameters
# =============================================================================

CENT_PLACES: int = 2                # closed form vs known published figures
SCHEDULE_PLACES: int = 3            # closed form vs iterated schedule
RATES: list[float] = [0.5, 2.0, 3.5, 4.5, 8.0, 12.0]
TERMS: list[int] = [12, 120, 240, 300, 360]
PRINCIPAL: int = euros(300_000)


class TestMonthlyPayment(unittest.TestCase):

    def test_known_payment(self):
        """$100,000 at 6% over 30 years pays $599.55 a month."""
        self.assertAlmostEqual(monthly_payment(euros(100_000), 6.0, 360) / 100, 599.55, places=CENT_PLACES)

    def test_zero_rate_is_straight_line(self):
        for term in TERMS:
            with self.subTest(term=term):
                with self.assertWarns(UserWarning):
                    payment = monthly_payment(PRINCIPAL, 0.0, term)
                self.assertEqual(payment, PRINCIPAL / term)

    def test_payment_exceeds_straight_line_for_positive_rate(self):
        for rate in RATES:
            with self.subTest(rate=rate):
                self.assertGreater(monthly_payment(PRINCIPAL, rate, 300), PRINCIPAL / 300)

    def test_contract_violations_raise(self):
        for args in [(0, 3.5, 300), (-1, 3.5, 300), (PRINCIPAL, 3.5, 0), (PRINCIPAL, -0.5, 300)]:
            with self.subTest(args=args):
                with self.assertRaises(ValueError):
                    monthly_payment(*args)


class TestRemainingBalance(unittest.TestCase):

    def test_balance_is_zero_at_maturity(self):
        for rate in RATES:
            for term in TERMS:
                with self.subTest(rate=rate, term=term):
                    self.assertLessEqual(abs(remaining_balance(PRINCIPAL, rate, term, term)), 1.0)

    def test_balance_at_origination_is_principal(self):
        for rate in RATES:
            with self.subTest(rate=rate):
                self.assertAlmostEqual(remaining_balance(PRINCIPAL, rate, 300, 0), PRINCIPAL, places=6)

    def test_elapsed_is_clamped(self):
        self.assertAlmostEqual(remaining_balance(PRINCIPAL, 3.5, 300, -12), PRINCIPAL, places=6)
        self.assertEqual(remaining_balance(PRINCIPAL, 3.5, 300, 400), 0.0)

    def test_zero_rate_balance_is_linear(self):
        self.assertAlmostEqual(remaining_balance(PRINCIPAL, 0.0, 300, 150), PRINCIPAL / 2, places=6)

    def test_balance_factor_is_decreasing(self):
        factors = [balance_factor(3.5, 300, e) for e in range(301)]
        self.assertTrue(all(a > b for a, b in zip(factors, factors[1:])))
        self.assertEqual(factors[0], 1.0)
        self.assertEqual(factors[-1], 0.0)


class TestSplitPayment(unittest.TestCase):

    def test_interest_and_principal(self):
        interest, principal = split_payment(100_000, 12.0, 2_000)
        self.assertAlmostEqual(interest, 1_000.0, places=9)
        self.assertAlmostEqual(principal, 1_000.0, places=9)

    def test_principal_capped_at_balance(self):
        interest, principal = split_payment(500, 12.0, 2_000)
        self.assertEqual(principal, 500)


class TestAmortizationSchedule(unittest.TestCase):

    def test_schedule_matches_closed_form(self):
        for rate in RATES:
            for term in [120, 300]:
                schedule = amortization_schedule(PRINCIPAL, rate, term)
                level = monthly_payment(PRINCIPAL, rate, term)
                for month in [1, term // 3, term // 2, term - 1]:
                    with self.subTest(rate=rate, term=term, month=month):
                        self.assertAlmostEqual(schedule.payment[month], level, places=SCHEDULE_PLACES)
                        self.assertAlmostEqual(
                            schedule.ending_balance[month],
                            remaining_balance(PRINCIPAL, rate, term, month),
                            places=SCHEDULE_PLACES,
                        )

    def test_period_zero_is_initial_state(self):
        schedule = amortization_schedule(PRINCIPAL, 3.5, 300)
        self.assertEqual(schedule.period[0], 0)
        self.assertEqual(schedule.ending_balance[0], PRINCIPAL)
        self.assertEqual(schedule.payment[0], 0.0)
        self.assertEqual(schedule.cumulative_interest[0], 0.0)
        self.assertEqual(schedule.horizon, 300)

    def test_schedule_fully_amortizes(self):
        schedule = amortization_schedule(PRINCIPAL, 4.5, 240)
        self.assertAlmostEqual(schedule.ending_balance[-1], 0.0, places=6)
        self.assertAlmostEqual(schedule.cumulative_principal[-1], PRINCIPAL, places=4)

    def test_payment_equals_interest_plus_principal(self):
        schedule = amortization_schedule(PRINCIPAL, 3.5, 240)
        np.testing.assert_allclose(schedule.payment, schedule.interest + schedule.principal, atol=1e-6)

    def test_horizon_truncates(self):
        schedule = amortization_schedule(PRINCIPAL, 3.5, 300, horizon_months=36)
        self.assertEqual(len(schedule.period), 37)
        self.assertAlmostEqual(
            schedule.ending_balance[36], remaining_balance(PRINCIPAL, 3.5, 300, 36), places=SCHEDULE_PLACES
        )

    def test_zero_rate_schedule_is_linear(self):
        schedule = amortization_schedule(PRINCIPAL, 0.0, 100)
        np.testing.assert_allclose(schedule.payment[1:], PRINCIPAL / 100)
        self.assertTrue(np.all(schedule.interest == 0.0))

    def test_follow_on_rate_reamortizes_remaining_balance(self):
        path = rate_path(3.5, 300, 36, 4.5)
        schedule = amortization_schedule(PRINCIPAL, path, 300)
        balance_at_switch = remaining_balance(PRINCIPAL, 3.5, 300, 36)
        expected = monthly_payment(balance_at_switch, 4.5, 264)
        self.assertAlmostEqual(schedule.payment[36], monthly_payment(PRINCIPAL, 3.5, 300), places=SCHEDULE_PLACES)
        self.assertAlmostEqual(schedule.payment[37], expected, places=SCHEDULE_PLACES)
        self.assertAlmostEqual(schedule.payment[200], expected, places=SCHEDULE_PLACES)
        self.assertAlmostEqual(schedule.ending_balance[-1], 0.0, places=6)

    def test_short_rate_vector_raises(self):
        with self.assertRaises(ValueError):
            amortization_schedule(PRINCIPAL, [3.5] * 10, 300)


class TestRatePath(unittest.TestCase):

    def test_fixed_then_follow_on(self):
        path = rate_path(3.5, 60, 24, 4.2)
        self.assertEqual(len(path), 60)
        self.assertTrue(np.all(path[:24] == 3.5))
        self.assertTrue(np.all(path[24:] == 4.2))

    def test_no_follow_on_keeps_rate(self):
        self.assertTrue(np.all(rate_path(3.5, 60, 24, None) == 3.5))


class TestFollowOnAndTotals(unittest.TestCase):

    def setUp(self):
        self.fixed = fixed("f", 3.5, years=3)
        self.follow_on = variable("v", 4.5)

    def test_follow_on_payment(self):
        payment = monthly_follow_on_payment(self.fixed, self.follow_on, PRINCIPAL, 300)
        balance = remaining_balance(PRINCIPAL, 3.5, 300, 36)
        self.assertAlmostEqual(payment, monthly_payment(balance, 4.5, 264), places=9)

    def test_no_follow_on_payment(self):
        self.assertIsNone(monthly_follow_on_payment(self.fixed, None, PRINCIPAL, 300))
        self.assertIsNone(monthly_follow_on_payment(self.follow_on, self.follow_on, PRINCIPAL, 300))
        self.assertIsNone(monthly_follow_on_payment(self.fixed, self.follow_on, PRINCIPAL, 36))

    def test_total_repayable_with_follow_on(self):
        payment = monthly_payment(PRINCIPAL, 3.5, 300)
        follow_on = monthly_follow_on_payment(self.fixed, self.follow_on, PRINCIPAL, 300)
        total = total_repayable(self.fixed, payment, follow_on, 300)
        self.assertAlmostEqual(total, payment * 36 + follow_on * 264, places=6)

    def test_total_repayable_without_follow_on_uses_fixed_payment(self):
        payment = monthly_payment(PRINCIPAL, 3.5, 300)
        self.assertAlmostEqual(total_repayable(self.fixed, payment, None, 300), payment * 300, places=6)

    def test_total_repayable_at_least_principal(self):
        for rate in RATES:
            for term in TERMS:
                with self.subTest(rate=rate, term=term):
                    payment = monthly_payment(PRINCIPAL, rate, term)
                    total = total_repayable(variable("v", rate), payment, None, term)
                    self.assertGreaterEqual(total, PRINCIPAL)
                    self.assertGreaterEqual(cost_of_credit_percent(total, PRINCIPAL), 0.0)

    def test_follow_on_ltv_falls_with_amortization(self):
        ltv = follow_on_ltv(PRINCIPAL, 3.5, 300, 36, 90.0)
        self.assertLess(ltv, 90.0)
        self.assertAlmostEqual(ltv, 90.0 * balance_factor(3.5, 300, 36), places=9)

    def test_cost_of_credit_percent(self):
        self.assertAlmostEqual(cost_of_credit_percent(120, 100), 20.0, places=9)


if __name__ == '__main__':
    unittest.main()
