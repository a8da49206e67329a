"""Loan evaluation engine - risk scoring, eligibility and pricing for loan applications"""

from dataclasses import replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Tuple

from sacco_lending.domain.amortization import calculate_monthly_payment, round_money
from sacco_lending.domain.models import (
    EvaluationPolicy,
    FactorScore,
    LoanEvaluationCriteria,
    LoanEvaluationResult,
    LoanType,
    SavingsImpact,
)
from sacco_lending.domain.rates import fallback_rate
from sacco_lending.domain.ratios import (
    debt_to_income_ratio,
    loan_to_value_ratio,
    payment_to_income_ratio,
    savings_ratio,
)

DEFAULT_POLICY = EvaluationPolicy()

# Applied when the caller has no value for a field
DEFAULT_CREDIT_SCORE = 600
DEFAULT_LOAN_TYPE = LoanType.PERSONAL
DEFAULT_EMPLOYMENT_STATUS = "UNKNOWN"

# Largest amount the cooperative lends per product
LOAN_AMOUNT_CEILINGS: Dict[LoanType, float] = {
    LoanType.PERSONAL: 50_000_000,
    LoanType.MORTGAGE: 1_000_000_000,
    LoanType.AUTO: 100_000_000,
    LoanType.BUSINESS: 500_000_000,
    LoanType.STUDENT: 200_000_000,
    LoanType.PAYDAY: 5_000_000,
}

MINIMUM_CREDIT_SCORES: Dict[LoanType, int] = {
    LoanType.MORTGAGE: 650,
    LoanType.AUTO: 600,
    LoanType.BUSINESS: 650,
    LoanType.PERSONAL: 580,
    LoanType.STUDENT: 550,
    LoanType.PAYDAY: 500,
}

# Savings the member must hold, as a fraction of the requested amount
MINIMUM_SAVINGS_FRACTIONS: Dict[LoanType, float] = {
    LoanType.MORTGAGE: 0.20,
    LoanType.AUTO: 0.10,
    LoanType.BUSINESS: 0.15,
    LoanType.PERSONAL: 0.05,
    LoanType.STUDENT: 0.03,
    LoanType.PAYDAY: 0.02,
}

EMPLOYMENT_SCORES: Dict[str, Tuple[int, str]] = {
    "EMPLOYED": (85, "Stable employment status"),
    "FULL_TIME": (85, "Stable employment status"),
    "SALARIED": (85, "Stable employment status"),
    "RETIRED": (75, "Retired with pension income"),
    "SELF_EMPLOYED": (70, "Self-employed with variable income"),
    "FREELANCER": (70, "Self-employed with variable income"),
    "CONTRACT": (65, "Contract-based employment"),
    "PART_TIME": (60, "Part-time employment"),
}

LOAN_TYPE_SCORES: Dict[LoanType, Tuple[int, str]] = {
    LoanType.MORTGAGE: (85, "Low-risk secured loan type"),
    LoanType.AUTO: (80, "Low-risk asset-backed loan"),
    LoanType.STUDENT: (75, "Education investment loan"),
    LoanType.PERSONAL: (65, "Medium-risk personal loan"),
    LoanType.BUSINESS: (60, "Medium-risk business loan"),
    LoanType.PAYDAY: (30, "High-risk short-term loan"),
}

# (upper bound inclusive, tier, rate adjustment in percentage points)
RISK_TIERS: List[Tuple[int, str, float]] = [
    (20, "excellent", -1.0),
    (40, "good", 0.0),
    (60, "medium", 1.0),
    (80, "high", 2.5),
    (100, "very_high", 5.0),
]

NEUTRAL_SAVINGS_SCORE = 50
MULTIPLE_LOANS_WARNING_COUNT = 3


def normalize_criteria(criteria: LoanEvaluationCriteria) -> LoanEvaluationCriteria:
    """
    Fill missing fields with the engine's defaults.

    Missing numbers become 0, except the credit score (DEFAULT_CREDIT_SCORE).
    Missing loan type is PERSONAL and missing employment status is UNKNOWN.
    Loan types given as strings are converted to LoanType.
    """
    loan_type = criteria.loan_type or DEFAULT_LOAN_TYPE
    if not isinstance(loan_type, LoanType):
        loan_type = LoanType(str(loan_type).upper())

    # Decoded JSON hands whole-month terms over as floats, e.g. 12.0
    term_months = criteria.term_months or 0
    if isinstance(term_months, float) and term_months.is_integer():
        term_months = int(term_months)

    return replace(
        criteria,
        requested_amount=criteria.requested_amount or 0.0,
        monthly_income=criteria.monthly_income or 0.0,
        credit_score=criteria.credit_score if criteria.credit_score is not None else DEFAULT_CREDIT_SCORE,
        loan_type=loan_type,
        term_months=term_months,
        savings_balance=criteria.savings_balance or 0.0,
        total_interest_earned=criteria.total_interest_earned or 0.0,
        savings_account_age=criteria.savings_account_age or 0,
        employment_status=(criteria.employment_status or DEFAULT_EMPLOYMENT_STATUS).upper(),
        existing_loan_count=criteria.existing_loan_count or 0,
        total_active_debt=criteria.total_active_debt or 0.0,
        collateral_value=criteria.collateral_value or 0.0,
    )


def estimate_monthly_payment(requested_amount: float, annual_rate: float, term_months: int) -> float:
    """Installment for the requested amount at the base rate (0 when amount or term is missing)"""
    if requested_amount <= 0 or term_months <= 0:
        return 0.0
    return calculate_monthly_payment(requested_amount, annual_rate, term_months)


def evaluate_income(monthly_income: float, monthly_payment: float) -> FactorScore:
    """Score income coverage of the estimated installment"""
    coverage = monthly_income / monthly_payment if monthly_payment > 0 else 0.0

    if coverage >= 5:
        return FactorScore(90, 25, "Excellent income relative to payment")
    elif coverage >= 4:
        return FactorScore(80, 25, "Very good income relative to payment")
    elif coverage >= 3:
        return FactorScore(70, 25, "Good income relative to payment")
    elif coverage >= 2.5:
        return FactorScore(60, 25, "Adequate income relative to payment")
    else:
        return FactorScore(30, 25, "Low income relative to payment requirement")


def evaluate_credit_score(credit_score: int) -> FactorScore:
    """Score credit history; a higher bureau score never lowers the factor"""
    if credit_score >= 800:
        return FactorScore(95, 20, "Excellent credit history")
    elif credit_score >= 750:
        return FactorScore(85, 20, "Very good credit history")
    elif credit_score >= 700:
        return FactorScore(75, 20, "Good credit history")
    elif credit_score >= 650:
        return FactorScore(60, 20, "Fair credit history")
    elif credit_score >= 600:
        return FactorScore(40, 20, "Poor credit history")
    else:
        return FactorScore(20, 20, "Very poor credit history")


def evaluate_savings(ratio: float, total_interest_earned: float, account_age_months: int) -> FactorScore:
    """
    Score the member's savings record.

    Starts from a neutral 50 and rewards:
    - savings coverage of the requested amount (-10 to +40)
    - any interest earned, which shows the account is kept active (+10)
    - account tenure of 12+ months (+5) or 24+ months (+10)
    """
    score = NEUTRAL_SAVINGS_SCORE

    if ratio >= 50:
        score += 40
        description = "Excellent savings coverage"
    elif ratio >= 30:
        score += 30
        description = "Very good savings coverage"
    elif ratio >= 20:
        score += 20
        description = "Good savings coverage"
    elif ratio >= 10:
        score += 10
        description = "Adequate savings coverage"
    elif ratio >= 5:
        score += 5
        description = "Minimal savings coverage"
    else:
        score -= 10
        description = "Insufficient savings coverage"

    if total_interest_earned > 0:
        score += 10
        description += " with active savings growth"

    if account_age_months >= 24:
        score += 10
        description += " and long-term financial commitment"
    elif account_age_months >= 12:
        score += 5
        description += " and established savings habit"

    return FactorScore(min(100, max(0, score)), 25, description)


def evaluate_employment(employment_status: str) -> FactorScore:
    score, description = EMPLOYMENT_SCORES.get(employment_status, (30, "Unclear or unstable employment"))
    return FactorScore(score, 15, description)


def evaluate_debt_load(dti_ratio: float, existing_loan_count: int) -> FactorScore:
    """Score existing debt: DTI band, less 5 points per loan already running"""
    if dti_ratio <= 20:
        score, description = 90, "Excellent debt-to-income ratio"
    elif dti_ratio <= 30:
        score, description = 75, "Good debt-to-income ratio"
    elif dti_ratio <= 40:
        score, description = 60, "Acceptable debt-to-income ratio"
    elif dti_ratio <= 50:
        score, description = 40, "High debt-to-income ratio"
    else:
        score, description = 20, "Very high debt-to-income ratio"

    if existing_loan_count > 0:
        score -= 5 * existing_loan_count
        description += f" with {existing_loan_count} active loan(s)"

    return FactorScore(max(0, score), 10, description)


def evaluate_loan_type(loan_type: LoanType, requested_amount: float) -> FactorScore:
    score, description = LOAN_TYPE_SCORES[loan_type]

    if requested_amount > 50_000_000:
        score -= 10
        description += " (large amount)"
    elif requested_amount > 20_000_000:
        score -= 5
        description += " (substantial amount)"

    return FactorScore(score, 5, description)


def calculate_risk_score(factors: Dict[str, FactorScore]) -> int:
    """
    Combine factor scores into a risk score from 0 (lowest risk) to 100 (highest risk).

    Risk is 100 minus the weight-averaged factor score, rounded half up.

    Weights:
    - 25: income coverage of the installment
    - 25: savings record
    - 20: credit score
    - 15: employment
    - 10: existing debt load
    - 5:  loan product
    """
    total_weight = sum(f.weight for f in factors.values())
    if total_weight == 0:
        return 100

    weighted = sum(f.score * f.weight for f in factors.values()) / total_weight
    risk = Decimal(str(100 - weighted)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return min(100, max(0, int(risk)))


def determine_risk_tier(risk_score: int) -> Tuple[str, float]:
    """
    Map risk score to a tier and interest rate adjustment.

    Tiers:
    - 0-20:   excellent (-1.0 pt)
    - 21-40:  good      (no change)
    - 41-60:  medium    (+1.0 pt)
    - 61-80:  high      (+2.5 pts)
    - 81-100: very_high (+5.0 pts)

    Returns: (tier, rate_adjustment)
    """
    for upper, tier, adjustment in RISK_TIERS:
        if risk_score <= upper:
            return tier, adjustment
    return RISK_TIERS[-1][1], RISK_TIERS[-1][2]


def calculate_savings_discount(ratio: float, total_interest_earned: float, account_age_months: int) -> float:
    """Rate discount in percentage points earned by the member's savings record"""
    discount = 0.0

    if ratio >= 50:
        discount += 3.0
    elif ratio >= 30:
        discount += 2.0
    elif ratio >= 20:
        discount += 1.5
    elif ratio >= 10:
        discount += 1.0
    elif ratio >= 5:
        discount += 0.5

    if total_interest_earned > 0:
        discount += 0.5

    if account_age_months >= 24:
        discount += 0.5
    elif account_age_months >= 12:
        discount += 0.25

    return discount


def calculate_recommended_amount(
    requested_amount: float,
    risk_score: int,
    is_eligible: bool,
    policy: EvaluationPolicy = DEFAULT_POLICY,
) -> float:
    """
    Amount the cooperative should offer.

    Eligible applicants at or below the full-approval threshold get the full
    request. Everyone else is scaled down linearly with risk, from 100% at
    risk 0 to policy.min_amount_multiplier at risk 100. Never exceeds the request.
    """
    if is_eligible and risk_score <= policy.full_approval_risk_threshold:
        return requested_amount

    multiplier = 1.0 - (risk_score / 100) * (1.0 - policy.min_amount_multiplier)
    return min(requested_amount, round_money(requested_amount * multiplier))


def calculate_recommended_rate(
    base_rate: float,
    rate_adjustment: float,
    savings_discount: float,
    policy: EvaluationPolicy = DEFAULT_POLICY,
) -> float:
    """Base rate plus risk adjustment less savings discount, floored at a fraction of base"""
    rate = max(base_rate + rate_adjustment - savings_discount, base_rate * policy.rate_floor_fraction)
    return round_money(rate)


def check_eligibility(
    criteria: LoanEvaluationCriteria,
    risk_score: int,
    dti_ratio: float,
    ltv_ratio: float,
    minimum_savings_required: float,
    policy: EvaluationPolicy = DEFAULT_POLICY,
) -> Tuple[List[str], List[str]]:
    """
    Apply hard gates to normalized criteria.

    Any failing gate makes the application ineligible regardless of risk score.

    Returns: (reasons, recommendations)
    """
    reasons: List[str] = []
    recommendations: List[str] = []
    loan_type = criteria.loan_type

    if criteria.requested_amount <= 0:
        reasons.append("Requested amount must be greater than zero")

    if dti_ratio > policy.max_debt_to_income_pct:
        reasons.append(
            f"Debt-to-income ratio ({dti_ratio:.1f}%) exceeds maximum allowed "
            f"({policy.max_debt_to_income_pct:g}%)"
        )
        recommendations.append("Reduce existing debt or increase income to improve debt-to-income ratio")

    minimum_score = MINIMUM_CREDIT_SCORES[loan_type]
    if criteria.credit_score < minimum_score:
        reasons.append(f"Credit score is below minimum requirement ({minimum_score}) for {loan_type.value} loans")
        recommendations.append("Work on improving your credit score by paying bills on time and reducing debt")

    if criteria.monthly_income < policy.minimum_monthly_income:
        reasons.append("Monthly income is too low")
        recommendations.append("Provide additional income sources or consider a co-signer")

    ceiling = LOAN_AMOUNT_CEILINGS[loan_type]
    if criteria.requested_amount > ceiling:
        reasons.append(f"Requested amount exceeds maximum for {loan_type.value} loans ({ceiling:,.0f})")
        recommendations.append("Consider reducing the loan amount to within the limit")

    if criteria.savings_balance < minimum_savings_required:
        reasons.append(f"Savings balance is below the required minimum ({minimum_savings_required:,.0f})")
        recommendations.append(
            f"Build your savings to at least {minimum_savings_required:,.0f} before applying for this loan amount"
        )

    if criteria.collateral_value > 0 and ltv_ratio > policy.max_loan_to_value_pct:
        reasons.append(
            f"Loan-to-value ratio ({ltv_ratio:.1f}%) exceeds maximum allowed ({policy.max_loan_to_value_pct:g}%)"
        )
        recommendations.append("Increase down payment or provide additional collateral")

    if risk_score > policy.eligibility_risk_threshold:
        reasons.append(f"Risk score ({risk_score}) exceeds the approval threshold ({policy.eligibility_risk_threshold})")

    return reasons, recommendations


def _collect_advice(
    criteria: LoanEvaluationCriteria,
    factors: Dict[str, FactorScore],
    ratio: float,
    risk_score: int,
    projected_dti: float,
    policy: EvaluationPolicy,
) -> Tuple[List[str], List[str]]:
    recommendations: List[str] = []
    warnings: List[str] = []

    if factors["credit_score"].score < 60:
        recommendations.append("Improve your credit score by paying bills on time and reducing existing debt")
    if factors["income"].score < 60:
        recommendations.append("Consider applying for a smaller loan amount that better fits your income")
    if criteria.savings_balance > 0 and ratio < 10:
        recommendations.append("Increase your savings balance to get better interest rates and loan terms")
    if criteria.total_interest_earned == 0 and criteria.savings_balance > 0:
        recommendations.append("Keep your savings active to earn interest and demonstrate financial discipline")

    if risk_score > policy.eligibility_risk_threshold:
        warnings.append("High risk profile - loan approval may be difficult")
    if projected_dti > policy.max_debt_to_income_pct:
        warnings.append(
            f"Debt-to-income ratio including this loan ({projected_dti:.1f}%) exceeds the recommended "
            f"{policy.max_debt_to_income_pct:g}% threshold"
        )
    if criteria.existing_loan_count >= MULTIPLE_LOANS_WARNING_COUNT:
        warnings.append("Multiple existing loans may affect approval")

    return recommendations, warnings


def _dedupe(items: List[str]) -> List[str]:
    out: List[str] = []
    for item in items:
        if item not in out:
            out.append(item)
    return out


def evaluate_loan_application(
    criteria: LoanEvaluationCriteria,
    default_interest_rate: float | None = None,
    policy: EvaluationPolicy = DEFAULT_POLICY,
) -> LoanEvaluationResult:
    """
    Main entry point: score an application and decide eligibility, amount and rate.

    Args:
        criteria: Applicant data; missing fields are defaulted, never rejected
        default_interest_rate: Base rate for the loan type from the rate store
            (default: hardcoded fallback table)
        policy: Thresholds to apply

    Returns complete LoanEvaluationResult with factor breakdown and the
    human-readable reasons, recommendations and warnings.
    """
    criteria = normalize_criteria(criteria)
    base_rate = default_interest_rate if default_interest_rate is not None else fallback_rate(criteria.loan_type)

    monthly_payment = estimate_monthly_payment(criteria.requested_amount, base_rate, criteria.term_months)
    dti = debt_to_income_ratio(criteria.total_active_debt, criteria.monthly_income)
    projected_dti = dti + payment_to_income_ratio(monthly_payment, criteria.monthly_income)
    ratio = savings_ratio(criteria.savings_balance, criteria.requested_amount)
    ltv = loan_to_value_ratio(criteria.requested_amount, criteria.collateral_value)
    minimum_savings_required = max(0.0, criteria.requested_amount) * MINIMUM_SAVINGS_FRACTIONS[criteria.loan_type]

    factors = {
        "income": evaluate_income(criteria.monthly_income, monthly_payment),
        "credit_score": evaluate_credit_score(criteria.credit_score),
        "savings": evaluate_savings(ratio, criteria.total_interest_earned, criteria.savings_account_age),
        "employment": evaluate_employment(criteria.employment_status),
        "debt_ratio": evaluate_debt_load(dti, criteria.existing_loan_count),
        "loan_type": evaluate_loan_type(criteria.loan_type, criteria.requested_amount),
    }

    risk_score = calculate_risk_score(factors)
    risk_tier, rate_adjustment = determine_risk_tier(risk_score)

    reasons, gate_recommendations = check_eligibility(
        criteria, risk_score, dti, ltv, minimum_savings_required, policy
    )
    is_eligible = not reasons

    advice, warnings = _collect_advice(criteria, factors, ratio, risk_score, projected_dti, policy)

    savings_discount = calculate_savings_discount(
        ratio, criteria.total_interest_earned, criteria.savings_account_age
    )

    return LoanEvaluationResult(
        is_eligible=is_eligible,
        risk_score=risk_score,
        risk_tier=risk_tier,
        recommended_amount=calculate_recommended_amount(criteria.requested_amount, risk_score, is_eligible, policy),
        recommended_interest_rate=calculate_recommended_rate(base_rate, rate_adjustment, savings_discount, policy),
        debt_to_income_ratio=round_money(dti),
        loan_to_value_ratio=round_money(ltv),
        estimated_monthly_payment=monthly_payment,
        savings_impact=SavingsImpact(
            savings_ratio=round_money(ratio),
            savings_bonus=factors["savings"].score - NEUTRAL_SAVINGS_SCORE,
            minimum_savings_required=round_money(minimum_savings_required),
            meets_savings_requirement=criteria.savings_balance >= minimum_savings_required,
        ),
        factors=factors,
        reasons=reasons,
        recommendations=_dedupe(gate_recommendations + advice),
        warnings=warnings,
    )
