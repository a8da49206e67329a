"""Configuration management using Pydantic Settings"""

from typing import Dict

from pydantic_settings import BaseSettings, SettingsConfigDict

from sacco_lending.domain.models import EvaluationPolicy


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database holding system settings and the interest rate table
    database_url: str = "sqlite:///./sacco.db"

    # Service
    service_name: str = "sacco-lending"
    log_level: str = "INFO"

    # Evaluation policy
    max_debt_to_income_pct: float = 43.0
    max_loan_to_value_pct: float = 80.0
    eligibility_risk_threshold: int = 70
    full_approval_risk_threshold: int = 50
    minimum_monthly_income: float = 1_000.0

    # Per-loan-type overrides, e.g. DEFAULT_INTEREST_RATES='{"PERSONAL": 14.5}'
    default_interest_rates: Dict[str, float] = {}

    def evaluation_policy(self) -> EvaluationPolicy:
        """Thresholds for the evaluation engine"""
        return EvaluationPolicy(
            max_debt_to_income_pct=self.max_debt_to_income_pct,
            max_loan_to_value_pct=self.max_loan_to_value_pct,
            eligibility_risk_threshold=self.eligibility_risk_threshold,
            full_approval_risk_threshold=self.full_approval_risk_threshold,
            minimum_monthly_income=self.minimum_monthly_income,
        )


settings = Settings()
