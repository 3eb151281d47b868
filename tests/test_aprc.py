"""
Unit tests for the APRC solver.

Version: 0.1.0
Status: Active
"""

import math
import unittest

from mortgage_breakeven.aprc import (
    APRC_REFERENCE_LOAN_AMOUNT,
    APRC_REFERENCE_TERM_MONTHS,
    DEFAULT_APRC_FEES,
    AprcFeeConfig,
    aprc_cashflows,
    calculate_aprc,
    infer_follow_on_rate,
    npv,
    resolve_aprc,
    solve_aprc,
)
from mortgage_breakeven.money import to_minor_units
from mortgage_breakeven.payments import monthly_payment
from tests.utilities import fixed, variable


# =============================================================================
# Test Parameters
# =============================================================================

NOMINAL_PLACES: int = 3             # solved nominal rate vs input rate, % points
NO_FEES = AprcFeeConfig()


class TestAprcCashflows(unittest.TestCase):

    def test_drawdown_net_of_valuation_fee(self):
        cashflows = aprc_cashflows(3.5, 36, 4.0)
        self.assertEqual(len(cashflows), APRC_REFERENCE_TERM_MONTHS + 1)
        self.assertEqual(cashflows[0], -(APRC_REFERENCE_LOAN_AMOUNT - DEFAULT_APRC_FEES.valuation_fee))

    def test_payments_rounded_to_cents(self):
        cashflows = aprc_cashflows(3.5, 36, 4.0, NO_FEES)
        expected = to_minor_units(monthly_payment(APRC_REFERENCE_LOAN_AMOUNT, 3.5, APRC_REFERENCE_TERM_MONTHS))
        self.assertEqual(cashflows[1], expected)
        self.assertEqual(cashflows[36], expected)
        self.assertEqual(cashflows[37], round(cashflows[37]))
        self.assertGreater(cashflows[37], cashflows[36])

    def test_security_release_fee_on_last_payment(self):
        with_fee = aprc_cashflows(3.5, 36, 4.0)
        without_fee = aprc_cashflows(3.5, 36, 4.0, AprcFeeConfig(valuation_fee=DEFAULT_APRC_FEES.valuation_fee))
        self.assertEqual(with_fee[-1] - without_fee[-1], DEFAULT_APRC_FEES.security_release_fee)
        self.assertEqual(with_fee[-2], without_fee[-2])

    def test_fixed_period_covering_term_ignores_follow_on(self):
        cashflows = aprc_cashflows(3.5, APRC_REFERENCE_TERM_MONTHS, 9.0, NO_FEES)
        self.assertEqual(cashflows[1], cashflows[-1])

    def test_negative_fees_raise(self):
        with self.assertRaises(ValueError):
            AprcFeeConfig(valuation_fee=-1)


class TestSolveAprc(unittest.TestCase):

    def test_zero_fees_constant_rate_equals_nominal(self):
        for rate in [1.0, 3.5, 4.25, 7.0]:
            with self.subTest(rate=rate):
                result = solve_aprc(rate, APRC_REFERENCE_TERM_MONTHS, rate, NO_FEES)
                self.assertTrue(result.converged)
                self.assertAlmostEqual(result.nominal_rate, rate, places=NOMINAL_PLACES)

    def test_aprc_is_effective_annual_rate(self):
        result = solve_aprc(3.5, APRC_REFERENCE_TERM_MONTHS, 3.5, NO_FEES)
        self.assertEqual(result.aprc, 3.56)
        self.assertEqual(result.aprc, round(((1 + result.monthly_rate) ** 12 - 1) * 100, 2))

    def test_residual_within_tolerance(self):
        result = solve_aprc(3.5, 36, 4.2)
        self.assertTrue(result.converged)
        self.assertLessEqual(abs(result.residual), 1e-6 * APRC_REFERENCE_LOAN_AMOUNT)
        self.assertAlmostEqual(npv(result.monthly_rate, aprc_cashflows(3.5, 36, 4.2)), result.residual, places=6)

    def test_fees_raise_aprc(self):
        with_fees = calculate_aprc(3.5, 36, 4.0)
        without_fees = calculate_aprc(3.5, 36, 4.0, NO_FEES)
        self.assertGreater(with_fees, without_fees)

    def test_aprc_increases_with_follow_on_rate(self):
        aprcs = [calculate_aprc(3.5, 36, follow_on) for follow_on in [3.0, 4.0, 5.0, 6.0]]
        self.assertEqual(aprcs, sorted(aprcs))
        self.assertLess(aprcs[0], aprcs[-1])

    def test_unsolvable_returns_best_estimate_without_raising(self):
        with self.assertWarns(UserWarning):
            result = solve_aprc(45.0, APRC_REFERENCE_TERM_MONTHS, 45.0)
        self.assertFalse(result.converged)
        self.assertFalse(math.isnan(result.aprc))
        self.assertAlmostEqual(result.aprc, 30.0, places=2)


class TestResolveAprc(unittest.TestCase):

    def test_disclosed_apr_is_used_verbatim(self):
        rate = fixed("f", 3.5, apr=3.61)
        result = resolve_aprc(rate, variable("v", 9.0))
        self.assertTrue(result.disclosed)
        self.assertEqual(result.aprc, 3.61)
        self.assertEqual(result.iterations, 0)

    def test_fixed_with_follow_on_is_solved(self):
        rate = fixed("f", 3.5, years=3)
        result = resolve_aprc(rate, variable("v", 4.2))
        self.assertFalse(result.disclosed)
        self.assertEqual(result.aprc, calculate_aprc(3.5, 36, 4.2))

    def test_fixed_without_follow_on_assumes_fixed_for_term(self):
        rate = fixed("f", 3.5, years=3)
        self.assertEqual(
            resolve_aprc(rate, None).aprc,
            calculate_aprc(3.5, APRC_REFERENCE_TERM_MONTHS, 3.5),
        )

    def test_lender_fees(self):
        rate = variable("v", 4.0)
        self.assertLess(resolve_aprc(rate, fees=NO_FEES).aprc, resolve_aprc(rate).aprc)


class TestInferFollowOnRate(unittest.TestCase):

    def test_recovers_follow_on_rate(self):
        for follow_on in [3.8, 4.2, 5.5]:
            with self.subTest(follow_on=follow_on):
                observed = calculate_aprc(3.5, 36, follow_on)
                self.assertAlmostEqual(infer_follow_on_rate(3.5, 36, observed), follow_on, delta=0.05)

    def test_unreachable_aprc_raises(self):
        with self.assertRaises(ValueError):
            infer_follow_on_rate(3.5, 36, 40.0)

    def test_fixed_period_covering_term_raises(self):
        with self.assertRaises(ValueError):
            infer_follow_on_rate(3.5, APRC_REFERENCE_TERM_MONTHS, 3.6)


if __name__ == '__main__':
    unittest.main()
