"""Prometheus metrics for monitoring eligibility rates, pricing and rate lookups"""

from prometheus_client import Counter, Histogram

# Evaluation metrics
evaluation_counter = Counter(
    "sacco_loan_evaluation_total",
    "Total loan applications evaluated",
    ["outcome", "loan_type"],  # eligible | ineligible
)

risk_tier_counter = Counter(
    "sacco_loan_risk_tier_total",
    "Evaluations by risk tier",
    ["tier"],
)

recommended_rate_histogram = Histogram(
    "sacco_recommended_interest_rate_percent",
    "Recommended annual interest rate",
    buckets=[5.0, 7.5, 10.0, 12.5, 15.0, 17.5, 20.0, 25.0, 30.0, 40.0],
)

# Amortization metrics
schedule_counter = Counter(
    "sacco_repayment_schedule_total",
    "Repayment schedules generated",
)

# Rate store metrics
rate_source_counter = Counter(
    "sacco_default_rate_source_total",
    "Where default interest rates were resolved from",
    ["source"],  # settings | system_setting | interest_rate | fallback
)


def record_evaluation(is_eligible: bool, loan_type: str, risk_tier: str, recommended_rate: float) -> None:
    """Record evaluation metrics for monitoring eligibility and pricing distribution"""
    outcome = "eligible" if is_eligible else "ineligible"
    evaluation_counter.labels(outcome=outcome, loan_type=loan_type).inc()
    risk_tier_counter.labels(tier=risk_tier).inc()
    recommended_rate_histogram.observe(recommended_rate)
