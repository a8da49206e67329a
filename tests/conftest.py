"""Pytest fixtures for testing"""

import pytest
from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sacco_lending.domain.models import LoanEvaluationCriteria, LoanType
from sacco_lending.infrastructure.database.models import Base
from sacco_lending.services.lending import LendingService
from sacco_lending.services.rates import InterestRateProvider


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def session_factory() -> Generator[sessionmaker, None, None]:
    """Create test database and hand out its session factory"""
    Base.metadata.create_all(bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """Session on the test database"""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def rate_provider(session_factory: sessionmaker) -> InterestRateProvider:
    """Rate provider on the test database with no settings overrides"""
    return InterestRateProvider(session_factory=session_factory, overrides={})


@pytest.fixture
def lending_service(rate_provider: InterestRateProvider) -> LendingService:
    return LendingService(rate_provider=rate_provider)


@pytest.fixture
def strong_member() -> LoanEvaluationCriteria:
    """Long-standing saver with good credit, solid income and no debt"""
    return LoanEvaluationCriteria(
        requested_amount=1_000_000,
        monthly_income=1_500_000,
        credit_score=750,
        loan_type=LoanType.PERSONAL,
        term_months=12,
        savings_balance=800_000,
        total_interest_earned=20_000,
        savings_account_age=24,
        employment_status="EMPLOYED",
        existing_loan_count=0,
        total_active_debt=0,
    )


@pytest.fixture
def over_indebted_member() -> LoanEvaluationCriteria:
    """Member already paying 80% of income towards three loans"""
    return LoanEvaluationCriteria(
        requested_amount=2_000_000,
        monthly_income=500_000,
        credit_score=550,
        loan_type=LoanType.PERSONAL,
        term_months=12,
        existing_loan_count=3,
        total_active_debt=400_000,
    )
