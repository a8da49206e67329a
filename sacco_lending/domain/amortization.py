"""Amortization engine - fixed monthly payment and repayment schedule generation"""

import math
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import List

from sacco_lending.domain.exceptions import InvalidLoanParameters
from sacco_lending.domain.models import LoanCalculationInput, LoanCalculationResult, PaymentScheduleItem
from sacco_lending.utils.date_utils import add_months

CENT = Decimal("0.01")


def round_money(value: float) -> float:
    """Round a currency amount to cents, halves away from zero"""
    return float(Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP))


def validate_loan_parameters(principal: float, annual_interest_rate: float, term_months: int) -> None:
    """
    Reject inputs the amortization formula cannot handle.

    Raises:
        InvalidLoanParameters: principal <= 0, term_months < 1 or not an integer,
            annual_interest_rate < 0, or a non-finite principal or rate
    """
    if principal is None or not math.isfinite(principal) or principal <= 0:
        raise InvalidLoanParameters(f"Principal must be positive, got {principal!r}")
    if isinstance(term_months, bool) or not isinstance(term_months, int) or term_months <= 0:
        raise InvalidLoanParameters(f"Term must be a positive whole number of months, got {term_months!r}")
    if annual_interest_rate is None or not math.isfinite(annual_interest_rate) or annual_interest_rate < 0:
        raise InvalidLoanParameters(f"Annual interest rate cannot be negative, got {annual_interest_rate!r}")


def _monthly_payment(principal: float, monthly_rate: float, term_months: int) -> float:
    # Equivalent to P * r(1+r)^n / ((1+r)^n - 1), written as P * r / (1 - (1+r)^-n)
    # so long terms cannot overflow and tiny rates do not cancel to zero
    if monthly_rate == 0:
        return principal / term_months

    discount = -math.expm1(-term_months * math.log1p(monthly_rate))
    if discount == 0:
        return principal / term_months

    payment = principal * monthly_rate / discount
    if not math.isfinite(payment):
        raise InvalidLoanParameters(
            f"Monthly payment is not representable for rate {monthly_rate!r} over {term_months} months"
        )
    return payment


def calculate_monthly_payment(principal: float, annual_interest_rate: float, term_months: int) -> float:
    """Fixed monthly installment, rounded to cents"""
    validate_loan_parameters(principal, annual_interest_rate, term_months)
    monthly_rate = annual_interest_rate / 100 / 12
    return round_money(_monthly_payment(principal, monthly_rate, term_months))


def compute_amortization(
    principal: float,
    annual_interest_rate: float,
    term_months: int,
    start_date: date | None = None,
) -> LoanCalculationResult:
    """
    Compute the monthly payment and full amortization schedule for a loan.

    Formula (r = monthly rate, n = term):
        M = P * r(1+r)^n / ((1+r)^n - 1),  or P / n when r == 0

    Each installment splits the rounded M into interest on the rounded
    outstanding balance and principal, so every row satisfies
    principal + interest == total and each balance is the previous one
    minus this row's principal. Cent rounding accumulates into the final
    installment, which repays the whole remaining balance; its interest
    portion absorbs the difference (floored at zero) and the total stays M.

    Args:
        principal: Amount borrowed (> 0)
        annual_interest_rate: Percent per year, e.g. 15.0 for 15% (>= 0)
        term_months: Number of monthly installments (>= 1)
        start_date: Reference date; installment i falls due i months later
            (default: today)

    Returns:
        LoanCalculationResult with rounded totals and the schedule

    Raises:
        InvalidLoanParameters: On non-positive principal/term or negative rate

    Example:
        1,000,000 at 15% over 12 months -> 90,258.31 per month
    """
    validate_loan_parameters(principal, annual_interest_rate, term_months)

    if start_date is None:
        start_date = date.today()

    monthly_rate = annual_interest_rate / 100 / 12
    monthly_payment = _monthly_payment(principal, monthly_rate, term_months)
    total_payment = monthly_payment * term_months
    total_interest = total_payment - principal

    installment = round_money(monthly_payment)
    schedule: List[PaymentScheduleItem] = []
    remaining_balance = round_money(principal)
    for installment_number in range(1, term_months + 1):
        if installment_number == term_months:
            principal_amount = remaining_balance
            interest_amount = max(0.0, round_money(installment - principal_amount))
        else:
            interest_amount = round_money(remaining_balance * monthly_rate)
            principal_amount = min(remaining_balance, max(0.0, round_money(installment - interest_amount)))
        remaining_balance = round_money(remaining_balance - principal_amount)

        schedule.append(
            PaymentScheduleItem(
                installment_number=installment_number,
                due_date=add_months(start_date, installment_number),
                principal_amount=principal_amount,
                interest_amount=interest_amount,
                total_amount=installment,
                remaining_balance=remaining_balance,
            )
        )

    return LoanCalculationResult(
        monthly_payment=round_money(monthly_payment),
        total_payment=round_money(total_payment),
        total_interest=round_money(total_interest),
        schedule=schedule,
    )


def amortize(calculation: LoanCalculationInput, start_date: date | None = None) -> LoanCalculationResult:
    """Run compute_amortization for a LoanCalculationInput"""
    return compute_amortization(
        calculation.principal,
        calculation.annual_interest_rate,
        calculation.term_months,
        start_date=start_date,
    )
