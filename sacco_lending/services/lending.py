"""Lending service - evaluates applications and builds repayment plans"""

import logging
import time
from datetime import date, datetime
from typing import Iterable, Optional, Union

from sacco_lending.config import settings
from sacco_lending.domain.amortization import amortize
from sacco_lending.domain.evaluation import evaluate_loan_application, normalize_criteria
from sacco_lending.domain.exceptions import InterestRateLookupError, InvalidLoanParameters
from sacco_lending.domain.models import (
    DisbursementPlan,
    EvaluationPolicy,
    LoanCalculationInput,
    LoanCalculationResult,
    LoanEvaluationCriteria,
    LoanEvaluationResult,
    LoanType,
)
from sacco_lending.infrastructure.observability.logging import log_evaluation, log_schedule
from sacco_lending.infrastructure.observability.metrics import record_evaluation, schedule_counter
from sacco_lending.services.rates import InterestRateProvider
from sacco_lending.utils.date_utils import add_months, months_elapsed

logger = logging.getLogger(__name__)


def assemble_criteria(
    requested_amount: float,
    loan_type: Union[LoanType, str],
    term_months: int,
    now: Union[date, datetime],
    monthly_income: Optional[float] = None,
    credit_score: Optional[int] = None,
    employment_status: Optional[str] = None,
    savings_balance: Optional[float] = None,
    total_interest_earned: Optional[float] = None,
    savings_opened_at: Optional[Union[date, datetime]] = None,
    active_loan_payments: Iterable[float] = (),
    collateral_value: Optional[float] = None,
) -> LoanEvaluationCriteria:
    """
    Build evaluation criteria from a member's profile, savings account and active loans.

    Account age is counted in whole 30-day periods up to the caller's `now`.
    Active debt is the sum of the monthly payments of the member's running loans.
    """
    payments = [p or 0.0 for p in active_loan_payments]
    return LoanEvaluationCriteria(
        requested_amount=requested_amount,
        monthly_income=monthly_income,
        credit_score=credit_score,
        loan_type=loan_type,
        term_months=term_months,
        savings_balance=savings_balance,
        total_interest_earned=total_interest_earned,
        savings_account_age=months_elapsed(savings_opened_at, now),
        employment_status=employment_status,
        existing_loan_count=len(payments),
        total_active_debt=sum(payments),
        collateral_value=collateral_value,
    )


class LendingService:
    """Entry point for callers that need evaluations and repayment plans"""

    def __init__(
        self,
        rate_provider: Optional[InterestRateProvider] = None,
        policy: Optional[EvaluationPolicy] = None,
    ):
        self.rate_provider = rate_provider or InterestRateProvider()
        self.policy = policy or settings.evaluation_policy()

    def evaluate(self, criteria: LoanEvaluationCriteria, as_of: Optional[date] = None) -> LoanEvaluationResult:
        """
        Evaluate a loan application.

        Flow:
        1. Resolve the default rate for the loan type
        2. Score, gate and price the application
        3. Record metrics and log the outcome
        """
        start_time = time.time()
        loan_type = normalize_criteria(criteria).loan_type

        try:
            default_rate = self.rate_provider.get_default_rate(loan_type, as_of)
        except InterestRateLookupError as e:
            logger.error(f"Rate lookup failed: {e}", extra={"loan_type": loan_type.value})
            raise

        result = evaluate_loan_application(criteria, default_rate, self.policy)

        duration_ms = (time.time() - start_time) * 1000
        record_evaluation(result.is_eligible, loan_type.value, result.risk_tier, result.recommended_interest_rate)
        log_evaluation(
            loan_type.value,
            criteria.requested_amount or 0.0,
            result.is_eligible,
            result.risk_score,
            result.risk_tier,
            result.recommended_interest_rate,
            duration_ms,
        )
        return result

    def build_repayment_plan(
        self,
        principal: float,
        annual_interest_rate: float,
        term_months: int,
        start_date: date,
    ) -> LoanCalculationResult:
        """Amortize a loan from start_date"""
        calculation = amortize(LoanCalculationInput(principal, annual_interest_rate, term_months), start_date)

        schedule_counter.inc()
        log_schedule(principal, annual_interest_rate, term_months, calculation.monthly_payment)
        return calculation

    def plan_disbursement(
        self,
        approved_amount: float,
        loan_type: LoanType,
        term_months: int,
        start_date: date,
        disbursement_amount: Optional[float] = None,
        interest_rate: Optional[float] = None,
    ) -> DisbursementPlan:
        """
        Terms for the loan account opened when an approved loan is disbursed.

        The disbursed amount defaults to the approved amount and cannot exceed it.
        The rate defaults to the loan type's default rate.

        Raises:
            InvalidLoanParameters: Disbursement above approval, or invalid loan terms
        """
        amount = disbursement_amount if disbursement_amount is not None else approved_amount
        if amount > approved_amount:
            raise InvalidLoanParameters(
                f"Disbursement amount {amount:,.2f} cannot exceed approved amount {approved_amount:,.2f}"
            )

        rate = interest_rate if interest_rate is not None else self.rate_provider.get_default_rate(loan_type, start_date)
        calculation = self.build_repayment_plan(amount, rate, term_months, start_date)

        return DisbursementPlan(
            principal=amount,
            annual_interest_rate=rate,
            term_months=term_months,
            monthly_payment=calculation.monthly_payment,
            start_date=start_date,
            next_payment_date=add_months(start_date, 1),
            maturity_date=add_months(start_date, term_months),
            schedule=calculation.schedule,
        )
