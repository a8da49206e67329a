"""Data access layer for configured interest rates"""

from datetime import date
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from sacco_lending.domain.models import InterestRateBand, LoanType
from sacco_lending.domain.rates import setting_key
from sacco_lending.infrastructure.database.models import InterestRate, SystemSetting


class InterestRateRepository:
    """Repository for default rates (system settings) and the interest rate table"""

    def __init__(self, db: Session):
        self.db = db

    def get_setting_rate(self, loan_type: LoanType) -> Optional[float]:
        """Configured default rate, or None if unset, non-numeric or not positive"""
        setting = (
            self.db.query(SystemSetting)
            .filter(SystemSetting.key == setting_key(loan_type))
            .first()
        )
        if setting is None or not setting.value:
            return None

        try:
            rate = float(setting.value)
        except ValueError:
            return None
        return rate if rate > 0 else None

    def _active_rates(self, loan_type: LoanType, as_of: date):
        return (
            self.db.query(InterestRate)
            .filter(
                InterestRate.loan_type == loan_type.value,
                InterestRate.is_active.is_(True),
                InterestRate.effective_date <= as_of,
                or_(InterestRate.expiry_date.is_(None), InterestRate.expiry_date > as_of),
            )
        )

    def get_active_rate(self, loan_type: LoanType, as_of: date) -> Optional[float]:
        """Most recently effective active rate for the loan type"""
        row = (
            self._active_rates(loan_type, as_of)
            .order_by(InterestRate.effective_date.desc())
            .first()
        )
        return row.rate if row else None

    def get_rate_bands(self, loan_type: LoanType, as_of: date) -> List[InterestRateBand]:
        """Active credit score bands for the loan type, newest first"""
        rows = (
            self._active_rates(loan_type, as_of)
            .order_by(InterestRate.effective_date.desc(), InterestRate.min_credit_score)
            .all()
        )
        return [
            InterestRateBand(
                loan_type=loan_type,
                min_credit_score=row.min_credit_score,
                max_credit_score=row.max_credit_score,
                rate=row.rate,
            )
            for row in rows
        ]

    def upsert_default_rate(self, loan_type: LoanType, rate: float) -> SystemSetting:
        """Create or update the default rate setting for a loan type"""
        key = setting_key(loan_type)
        setting = self.db.query(SystemSetting).filter(SystemSetting.key == key).first()
        if setting is None:
            setting = SystemSetting(
                key=key,
                value=str(rate),
                description=f"Default interest rate for {loan_type.value.lower()} loans",
            )
            self.db.add(setting)
        else:
            setting.value = str(rate)

        self.db.flush()
        return setting
