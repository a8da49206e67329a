"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidLoanParameters(DomainException):
    """Principal, term, rate or disbursement amount is out of range"""

    pass


class InterestRateLookupError(DomainException):
    """Interest rate store returned an error or is unavailable"""

    pass
