"""Service factory - wires settings, logging and the rate store into a LendingService"""

from typing import Optional

from sqlalchemy.orm import sessionmaker

from sacco_lending.config import Settings, settings
from sacco_lending.infrastructure.database.session import SessionLocal, create_db_engine
from sacco_lending.infrastructure.observability.logging import setup_logging
from sacco_lending.services.lending import LendingService
from sacco_lending.services.rates import InterestRateProvider


def create_service(app_settings: Optional[Settings] = None) -> LendingService:
    """
    Create and configure a LendingService.

    Sets up structured logging at the configured level, binds the rate provider
    to the configured database and applies the configured evaluation policy.
    """
    app_settings = app_settings or settings
    setup_logging(app_settings.log_level, app_settings.service_name)

    if app_settings.database_url == settings.database_url:
        session_factory = SessionLocal
    else:
        session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=create_db_engine(app_settings.database_url)
        )

    rate_provider = InterestRateProvider(
        session_factory=session_factory,
        overrides=app_settings.default_interest_rates,
    )
    return LendingService(rate_provider=rate_provider, policy=app_settings.evaluation_policy())
