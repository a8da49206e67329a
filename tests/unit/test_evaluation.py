"""Unit tests for loan evaluation, risk scoring and pricing"""

import pytest
from dataclasses import replace
from sacco_lending.domain.evaluation import (
    DEFAULT_POLICY,
    calculate_recommended_amount,
    calculate_recommended_rate,
    calculate_risk_score,
    determine_risk_tier,
    evaluate_credit_score,
    evaluate_savings,
    evaluate_loan_application,
    normalize_criteria,
)
from sacco_lending.domain.models import (
    EvaluationPolicy,
    FactorScore,
    LoanEvaluationCriteria,
    LoanType,
)


def test_over_indebted_member_is_ineligible(over_indebted_member):
    """Test 80% debt-to-income fails the DTI gate with a reason"""
    result = evaluate_loan_application(over_indebted_member)

    assert result.is_eligible is False
    assert result.debt_to_income_ratio == 80.0
    assert any("Debt-to-income ratio (80.0%)" in reason for reason in result.reasons)
    assert result.recommended_amount <= over_indebted_member.requested_amount
    assert "Multiple existing loans may affect approval" in result.warnings


def test_long_standing_saver_gets_full_amount():
    """Test strong savings, good credit and no debt reach the full approval tier"""
    criteria = LoanEvaluationCriteria(
        requested_amount=1_000_000,
        savings_balance=800_000,
        savings_account_age=24,
        credit_score=750,
        monthly_income=1_500_000,
        total_active_debt=0,
    )

    result = evaluate_loan_application(criteria)

    assert result.is_eligible is True
    assert result.reasons == []
    assert result.recommended_amount == 1_000_000
    assert result.savings_impact.savings_ratio == 80.0
    assert result.risk_score <= DEFAULT_POLICY.full_approval_risk_threshold


def test_strong_member_risk_and_pricing(strong_member):
    """Test risk score, tier and rate for a strong applicant"""
    result = evaluate_loan_application(strong_member)

    # Factor average 89.5 -> risk 10.5 rounds half up to 11
    assert result.risk_score == 11
    assert result.risk_tier == "excellent"
    assert result.is_eligible is True
    assert result.savings_impact.savings_bonus == 50
    assert result.savings_impact.meets_savings_requirement is True
    # 15.0 - 1.0 (excellent) - 4.0 (savings) = 10.0, floored at 70% of 15.0
    assert result.recommended_interest_rate == 10.5


def test_injected_default_rate_is_used(strong_member):
    """Test the caller's rate replaces the fallback table"""
    result = evaluate_loan_application(strong_member, default_interest_rate=10.0)

    # 10.0 - 1.0 - 4.0 = 5.0, floored at 7.0
    assert result.recommended_interest_rate == 7.0


def test_dti_gate_overrides_low_risk(strong_member):
    """Test DTI above the maximum rejects even a low-risk applicant"""
    criteria = replace(strong_member, total_active_debt=700_000)  # 46.7%

    result = evaluate_loan_application(criteria)

    assert result.risk_score <= DEFAULT_POLICY.eligibility_risk_threshold
    assert result.is_eligible is False
    assert any("Debt-to-income" in reason for reason in result.reasons)


def test_missing_inputs_do_not_raise():
    """Test an empty application evaluates with zero ratios"""
    result = evaluate_loan_application(LoanEvaluationCriteria())

    assert result.is_eligible is False
    assert result.recommended_amount == 0
    assert result.debt_to_income_ratio == 0.0
    assert result.loan_to_value_ratio == 0.0
    assert result.savings_impact.savings_ratio == 0.0
    assert result.estimated_monthly_payment == 0.0
    assert "Requested amount must be greater than zero" in result.reasons
    assert "Monthly income is too low" in result.reasons


def test_normalize_criteria_defaults():
    criteria = normalize_criteria(LoanEvaluationCriteria(loan_type="auto", employment_status="self_employed"))

    assert criteria.credit_score == 600
    assert criteria.loan_type is LoanType.AUTO
    assert criteria.employment_status == "SELF_EMPLOYED"
    assert criteria.monthly_income == 0.0
    assert criteria.existing_loan_count == 0

    assert normalize_criteria(LoanEvaluationCriteria()).loan_type is LoanType.PERSONAL
    assert normalize_criteria(LoanEvaluationCriteria()).employment_status == "UNKNOWN"


def test_whole_month_float_term_is_accepted(strong_member):
    """Test a term decoded from JSON as 12.0 evaluates like 12"""
    float_term = replace(strong_member, term_months=12.0)

    assert normalize_criteria(float_term).term_months == 12
    assert isinstance(normalize_criteria(float_term).term_months, int)
    assert evaluate_loan_application(float_term) == evaluate_loan_application(strong_member)


def test_loan_type_ceiling(strong_member):
    criteria = replace(strong_member, loan_type=LoanType.PAYDAY, requested_amount=6_000_000)

    result = evaluate_loan_application(criteria)

    assert result.is_eligible is False
    assert "Requested amount exceeds maximum for PAYDAY loans (5,000,000)" in result.reasons


def test_minimum_credit_score_per_loan_type(strong_member):
    mortgage = replace(strong_member, loan_type=LoanType.MORTGAGE, credit_score=640, savings_balance=400_000)
    student = replace(strong_member, loan_type=LoanType.STUDENT, credit_score=560)

    assert evaluate_loan_application(mortgage).is_eligible is False
    assert evaluate_loan_application(student).is_eligible is True


def test_loan_to_value_gate(strong_member):
    """Test LTV applies only when collateral is supplied"""
    over_leveraged = evaluate_loan_application(replace(strong_member, collateral_value=1_000_000))
    secured = evaluate_loan_application(replace(strong_member, collateral_value=2_000_000))

    assert over_leveraged.is_eligible is False
    assert any("Loan-to-value ratio (100.0%)" in reason for reason in over_leveraged.reasons)
    assert secured.is_eligible is True
    assert secured.loan_to_value_ratio == 50.0


def test_minimum_savings_requirement(strong_member):
    result = evaluate_loan_application(replace(strong_member, savings_balance=10_000))

    assert result.is_eligible is False
    assert result.savings_impact.minimum_savings_required == 50_000.0  # 5% of 1,000,000
    assert result.savings_impact.meets_savings_requirement is False
    assert any("Build your savings to at least 50,000" in r for r in result.recommendations)


def test_credit_score_never_increases_risk(strong_member):
    """Test raising the credit score never raises the risk score"""
    scores = [
        evaluate_loan_application(replace(strong_member, credit_score=credit)).risk_score
        for credit in range(300, 851, 10)
    ]

    assert all(later <= earlier for earlier, later in zip(scores, scores[1:]))
    assert scores[0] > scores[-1]


@pytest.mark.parametrize("profile", ["strong_member", "over_indebted_member"])
def test_savings_never_increase_rate(profile, request):
    """Test more savings never raises the recommended rate"""
    base = request.getfixturevalue(profile)
    rates = [
        evaluate_loan_application(replace(base, savings_balance=balance)).recommended_interest_rate
        for balance in range(0, 2_000_001, 50_000)
    ]

    assert all(later <= earlier for earlier, later in zip(rates, rates[1:]))


@pytest.mark.parametrize("requested", [1, 50_000, 1_000_000, 25_000_000, 80_000_000])
@pytest.mark.parametrize("credit", [350, 600, 720, 820])
def test_recommended_amount_never_exceeds_request(requested, credit):
    criteria = LoanEvaluationCriteria(
        requested_amount=requested,
        monthly_income=600_000,
        credit_score=credit,
        term_months=24,
        savings_balance=300_000,
        existing_loan_count=1,
        total_active_debt=100_000,
    )

    result = evaluate_loan_application(criteria)

    assert result.recommended_amount <= requested


def test_calculate_recommended_amount_scaling():
    """Test scaling falls linearly from full amount to the policy minimum"""
    assert calculate_recommended_amount(1_000_000, 40, is_eligible=True) == 1_000_000
    assert calculate_recommended_amount(1_000_000, 60, is_eligible=True) == 700_000.0
    assert calculate_recommended_amount(1_000_000, 100, is_eligible=False) == 500_000.0
    assert calculate_recommended_amount(1_000_000, 0, is_eligible=False) == 1_000_000


def test_calculate_recommended_rate_floor():
    policy = EvaluationPolicy(rate_floor_fraction=0.7)

    assert calculate_recommended_rate(20.0, 2.5, 1.0, policy) == 21.5
    assert calculate_recommended_rate(20.0, -1.0, 10.0, policy) == 14.0


def test_determine_risk_tier_boundaries():
    assert determine_risk_tier(0) == ("excellent", -1.0)
    assert determine_risk_tier(20) == ("excellent", -1.0)
    assert determine_risk_tier(21) == ("good", 0.0)
    assert determine_risk_tier(60) == ("medium", 1.0)
    assert determine_risk_tier(80) == ("high", 2.5)
    assert determine_risk_tier(81) == ("very_high", 5.0)
    assert determine_risk_tier(100) == ("very_high", 5.0)


def test_calculate_risk_score_weighting():
    factors = {
        "a": FactorScore(100, 30, "strong"),
        "b": FactorScore(50, 10, "neutral"),
    }
    # weighted mean 87.5 -> risk 12.5 -> 13
    assert calculate_risk_score(factors) == 13
    assert calculate_risk_score({}) == 100


def test_factor_scoring_steps():
    assert evaluate_credit_score(800).score == 95
    assert evaluate_credit_score(599).score == 20
    assert evaluate_savings(0, 0, 0).score == 40
    assert evaluate_savings(60, 1, 30).score == 100
    assert evaluate_savings(15, 0, 12).score == 65
