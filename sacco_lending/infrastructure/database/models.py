"""SQLAlchemy ORM models for the interest rate store"""

import uuid

from sqlalchemy import Boolean, Column, Date, DateTime, Float, Integer, Text, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class SystemSetting(Base):
    """Administrator-managed key/value setting"""

    __tablename__ = "system_settings"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    key = Column(Text, nullable=False, unique=True, index=True)
    value = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class InterestRate(Base):
    """Rate for a loan type and credit score band over an effective period"""

    __tablename__ = "interest_rate"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    loan_type = Column(Text, nullable=False, index=True)
    min_credit_score = Column(Integer, nullable=False, default=300)
    max_credit_score = Column(Integer, nullable=False, default=850)
    rate = Column(Float, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    effective_date = Column(Date, nullable=False)
    expiry_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
