"""
Mortgage Breakeven Test Suite

Runs every test module in dependency order using unittest's standard
`load_tests` protocol: the building blocks (rounding, products, amortization,
APRC, rate resolution, breakeven search, projections) before the scenario
calculators that are built on them.

Usage:
    # Run everything in order (recommended)
    python -m unittest tests.test_suite

    # Or use unittest discovery
    python -m unittest discover tests -p test_*.py -v

    # Or a single module
    python -m unittest tests.test_remortgage

Note:
    `load_tests` fixes MODULE order only. Tests within a module still run in
    alphabetical order.

Version: 0.1.0
Last Updated: 2026-10-18
"""

import sys
import unittest


# =============================================================================
# Test Suite Definition (using unittest's load_tests protocol)
# =============================================================================

TEST_MODULES = [
    'tests.test_money',
    'tests.test_products',
    'tests.test_payments',
    'tests.test_aprc',
    'tests.test_rates',
    'tests.test_breakeven',
    'tests.test_projection',
    'tests.test_remortgage',
    'tests.test_rent_vs_buy',
    'tests.test_cashback',
    'tests.test_share',
]


def load_tests(loader, standard_tests, pattern):
    """
    Custom test loader using unittest's standard `load_tests` protocol.

    Args:
        loader: TestLoader instance
        standard_tests: Tests that would be loaded by default discovery
        pattern: Pattern used to match test files (ignored here)

    Returns:
        unittest.TestSuite containing all test modules in TEST_MODULES order
    """
    suite = unittest.TestSuite()
    for module_name in TEST_MODULES:
        try:
            module = __import__(module_name, fromlist=[''])
        except ImportError as e:
            # report and keep loading the remaining modules
            print(f"WARNING: Failed to import test module {module_name}: {e}",
                  file=sys.stderr)
            continue
        suite.addTest(loader.loadTestsFromModule(module))
    return suite


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == '__main__':
    unittest.main(verbosity=2)
