"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional


class LoanType(str, Enum):
    """Loan products offered by the cooperative"""

    PERSONAL = "PERSONAL"
    MORTGAGE = "MORTGAGE"
    AUTO = "AUTO"
    BUSINESS = "BUSINESS"
    STUDENT = "STUDENT"
    PAYDAY = "PAYDAY"


@dataclass(frozen=True)
class LoanCalculationInput:
    """Principal, annual rate (percent) and term for one amortization run"""

    principal: float
    annual_interest_rate: float
    term_months: int


@dataclass(frozen=True)
class PaymentScheduleItem:
    """Single installment in a repayment schedule"""

    installment_number: int
    due_date: date
    principal_amount: float
    interest_amount: float
    total_amount: float
    remaining_balance: float


@dataclass
class LoanCalculationResult:
    """Output of the amortization engine"""

    monthly_payment: float
    total_payment: float
    total_interest: float
    schedule: List[PaymentScheduleItem]


@dataclass
class LoanEvaluationCriteria:
    """
    Applicant data assembled by the caller from profile, savings and loan records.

    Any field may be left as None; the evaluation engine applies its own defaults.
    """

    requested_amount: Optional[float] = None
    monthly_income: Optional[float] = None
    credit_score: Optional[int] = None
    loan_type: Optional[LoanType] = None
    term_months: Optional[int] = None
    savings_balance: Optional[float] = None
    total_interest_earned: Optional[float] = None
    savings_account_age: Optional[int] = None  # months
    employment_status: Optional[str] = None
    existing_loan_count: Optional[int] = None
    total_active_debt: Optional[float] = None  # monthly obligations
    collateral_value: Optional[float] = None


@dataclass(frozen=True)
class FactorScore:
    """One weighted component of the risk score (higher score = stronger applicant)"""

    score: int
    weight: int
    description: str


@dataclass
class SavingsImpact:
    """How the applicant's savings history affected the evaluation"""

    savings_ratio: float  # percent of requested amount
    savings_bonus: int  # savings factor points above neutral
    minimum_savings_required: float
    meets_savings_requirement: bool


@dataclass
class LoanEvaluationResult:
    """Output of the loan evaluation engine"""

    is_eligible: bool
    risk_score: int  # 0-100, higher is worse
    risk_tier: str
    recommended_amount: float
    recommended_interest_rate: float
    debt_to_income_ratio: float
    loan_to_value_ratio: float
    estimated_monthly_payment: float
    savings_impact: SavingsImpact
    factors: Dict[str, FactorScore]
    reasons: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class EvaluationPolicy:
    """Thresholds applied by the evaluation engine"""

    max_debt_to_income_pct: float = 43.0
    max_loan_to_value_pct: float = 80.0
    eligibility_risk_threshold: int = 70
    full_approval_risk_threshold: int = 50
    minimum_monthly_income: float = 1_000.0
    min_amount_multiplier: float = 0.5
    rate_floor_fraction: float = 0.7


@dataclass(frozen=True)
class InterestRateBand:
    """Rate for a loan type within an inclusive credit score range"""

    loan_type: LoanType
    min_credit_score: int
    max_credit_score: int
    rate: float


@dataclass
class DisbursementPlan:
    """Terms of a loan account opened at disbursement"""

    principal: float
    annual_interest_rate: float
    term_months: int
    monthly_payment: float
    start_date: date
    next_payment_date: date
    maturity_date: date
    schedule: List[PaymentScheduleItem]
