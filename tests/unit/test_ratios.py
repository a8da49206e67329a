"""Unit tests for affordability ratios and credit band lookup"""

from sacco_lending.domain.models import InterestRateBand, LoanType
from sacco_lending.domain.ratios import (
    debt_to_income_ratio,
    find_interest_rate,
    loan_to_value_ratio,
    payment_to_income_ratio,
    savings_ratio,
)


def test_ratios_as_percentages():
    assert debt_to_income_ratio(400_000, 500_000) == 80.0
    assert loan_to_value_ratio(80_000, 100_000) == 80.0
    assert payment_to_income_ratio(25_000, 100_000) == 25.0
    assert savings_ratio(800_000, 1_000_000) == 80.0


def test_ratios_guard_zero_denominators():
    """Test zero income, collateral or request give 0 instead of inf/nan"""
    assert debt_to_income_ratio(400_000, 0) == 0.0
    assert loan_to_value_ratio(80_000, 0) == 0.0
    assert payment_to_income_ratio(25_000, 0) == 0.0
    assert savings_ratio(800_000, 0) == 0.0
    assert debt_to_income_ratio(400_000, -10) == 0.0


def test_find_interest_rate_by_credit_band():
    bands = [
        InterestRateBand(LoanType.PERSONAL, 300, 649, 22.0),
        InterestRateBand(LoanType.PERSONAL, 650, 749, 16.0),
        InterestRateBand(LoanType.PERSONAL, 750, 850, 12.0),
        InterestRateBand(LoanType.AUTO, 300, 850, 11.0),
    ]

    assert find_interest_rate(LoanType.PERSONAL, 600, bands) == 22.0
    assert find_interest_rate(LoanType.PERSONAL, 650, bands) == 16.0  # inclusive lower bound
    assert find_interest_rate(LoanType.PERSONAL, 850, bands) == 12.0  # inclusive upper bound
    assert find_interest_rate(LoanType.AUTO, 500, bands) == 11.0


def test_find_interest_rate_no_match():
    bands = [InterestRateBand(LoanType.PERSONAL, 650, 850, 16.0)]

    assert find_interest_rate(LoanType.PERSONAL, 600, bands) is None
    assert find_interest_rate(LoanType.MORTGAGE, 700, bands) is None
    assert find_interest_rate(LoanType.MORTGAGE, 700, []) is None
