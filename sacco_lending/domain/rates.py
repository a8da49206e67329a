"""Default interest rates per loan type"""

from typing import Dict

from sacco_lending.domain.models import LoanType

# Used when neither settings nor the rate store have an entry (percent per year)
DEFAULT_INTEREST_RATES: Dict[LoanType, float] = {
    LoanType.PERSONAL: 15.0,
    LoanType.MORTGAGE: 8.5,
    LoanType.AUTO: 12.0,
    LoanType.BUSINESS: 18.0,
    LoanType.STUDENT: 6.5,
    LoanType.PAYDAY: 25.0,
}

FALLBACK_INTEREST_RATE = 15.0

SETTING_KEY_PREFIX = "LOAN_DEFAULT_INTEREST_RATE_"


def fallback_rate(loan_type: LoanType) -> float:
    """Hardcoded default rate for a loan type"""
    return DEFAULT_INTEREST_RATES.get(loan_type, FALLBACK_INTEREST_RATE)


def setting_key(loan_type: LoanType) -> str:
    """System-settings key holding the configured default rate for a loan type"""
    return f"{SETTING_KEY_PREFIX}{loan_type.value}"
