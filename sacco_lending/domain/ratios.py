"""Affordability ratios and credit-band rate lookup"""

from typing import Iterable, Optional

from sacco_lending.domain.models import InterestRateBand, LoanType


def debt_to_income_ratio(monthly_debt: float, monthly_income: float) -> float:
    """Monthly debt as a percentage of monthly income (0 when there is no income)"""
    if monthly_income <= 0:
        return 0.0
    return (monthly_debt / monthly_income) * 100


def loan_to_value_ratio(loan_amount: float, collateral_value: float) -> float:
    """Loan amount as a percentage of collateral value (0 when there is no collateral)"""
    if collateral_value <= 0:
        return 0.0
    return (loan_amount / collateral_value) * 100


def payment_to_income_ratio(monthly_payment: float, monthly_income: float) -> float:
    """Monthly installment as a percentage of monthly income (0 when there is no income)"""
    if monthly_income <= 0:
        return 0.0
    return (monthly_payment / monthly_income) * 100


def savings_ratio(savings_balance: float, requested_amount: float) -> float:
    """Savings balance as a percentage of the requested amount (0 when nothing is requested)"""
    if requested_amount <= 0:
        return 0.0
    return (savings_balance / requested_amount) * 100


def find_interest_rate(
    loan_type: LoanType,
    credit_score: int,
    bands: Iterable[InterestRateBand],
) -> Optional[float]:
    """Rate of the first band for loan_type whose credit range (inclusive) contains credit_score"""
    for band in bands:
        if band.loan_type == loan_type and band.min_credit_score <= credit_score <= band.max_credit_score:
            return band.rate
    return None
