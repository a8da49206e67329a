"""Default interest rate resolution across settings, the rate store and the fallback table"""

import logging
from datetime import date
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from sacco_lending.config import settings
from sacco_lending.domain.exceptions import InterestRateLookupError, InvalidLoanParameters
from sacco_lending.domain.models import LoanType
from sacco_lending.domain.rates import DEFAULT_INTEREST_RATES, fallback_rate
from sacco_lending.domain.ratios import find_interest_rate
from sacco_lending.infrastructure.database.repositories import InterestRateRepository
from sacco_lending.infrastructure.database.session import SessionLocal
from sacco_lending.infrastructure.observability.metrics import rate_source_counter

logger = logging.getLogger(__name__)


class InterestRateProvider:
    """Resolves the default rate for each loan type"""

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        overrides: Optional[Dict[str, float]] = None,
    ):
        self.session_factory = session_factory or SessionLocal
        self.overrides = settings.default_interest_rates if overrides is None else overrides

    def get_default_rate(self, loan_type: LoanType, as_of: Optional[date] = None) -> float:
        """
        Default annual rate (percent) for a loan type.

        Resolution order:
        1. Settings override (DEFAULT_INTEREST_RATES)
        2. System setting LOAN_DEFAULT_INTEREST_RATE_<TYPE>
        3. Newest active interest_rate row effective on as_of
        4. Hardcoded fallback table

        Raises:
            InterestRateLookupError: If the rate store cannot be queried
        """
        as_of = as_of or date.today()

        override = self.overrides.get(loan_type.value)
        if override is not None and override > 0:
            return self._resolved(loan_type, "settings", override)

        try:
            with self.session_factory() as db:
                repo = InterestRateRepository(db)
                rate = repo.get_setting_rate(loan_type)
                if rate is not None:
                    return self._resolved(loan_type, "system_setting", rate)

                rate = repo.get_active_rate(loan_type, as_of)
                if rate is not None:
                    return self._resolved(loan_type, "interest_rate", rate)
        except SQLAlchemyError as e:
            raise InterestRateLookupError(f"Could not read default rate for {loan_type.value}: {e}") from e

        return self._resolved(loan_type, "fallback", fallback_rate(loan_type))

    def get_all_default_rates(self, as_of: Optional[date] = None) -> Dict[LoanType, float]:
        return {loan_type: self.get_default_rate(loan_type, as_of) for loan_type in LoanType}

    def get_credit_band_rate(
        self,
        loan_type: LoanType,
        credit_score: int,
        as_of: Optional[date] = None,
    ) -> Optional[float]:
        """Rate from the interest rate table for the applicant's credit band, if one matches"""
        as_of = as_of or date.today()
        try:
            with self.session_factory() as db:
                bands = InterestRateRepository(db).get_rate_bands(loan_type, as_of)
        except SQLAlchemyError as e:
            raise InterestRateLookupError(f"Could not read rate bands for {loan_type.value}: {e}") from e

        return find_interest_rate(loan_type, credit_score, bands)

    def update_default_rate(self, loan_type: LoanType, rate: float) -> None:
        """Store a new default rate for a loan type"""
        if rate is None or rate <= 0:
            raise InvalidLoanParameters(f"Default interest rate must be positive, got {rate!r}")

        try:
            with self.session_factory.begin() as db:
                InterestRateRepository(db).upsert_default_rate(loan_type, rate)
        except SQLAlchemyError as e:
            logger.error(f"Error updating default interest rate for {loan_type.value}: {e}")
            raise InterestRateLookupError(f"Could not update default rate for {loan_type.value}") from e

        logger.info("Default interest rate updated", extra={"loan_type": loan_type.value, "rate": rate})

    def seed_default_rates(self) -> None:
        """Write the hardcoded defaults into system settings"""
        for loan_type, rate in DEFAULT_INTEREST_RATES.items():
            self.update_default_rate(loan_type, rate)

    @staticmethod
    def _resolved(loan_type: LoanType, source: str, rate: float) -> float:
        rate_source_counter.labels(source=source).inc()
        logger.debug("Default rate resolved", extra={"loan_type": loan_type.value, "source": source, "rate": rate})
        return rate
