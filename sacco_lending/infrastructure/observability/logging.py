"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args: Any, service_name: str = "sacco-lending", **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "sacco-lending") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_evaluation(
    loan_type: str,
    requested_amount: float,
    is_eligible: bool,
    risk_score: int,
    risk_tier: str,
    recommended_interest_rate: float,
    duration_ms: float,
) -> None:
    """Log structured evaluation outcome for analysis"""
    logging.getLogger("sacco_lending.evaluation").info(
        "Evaluation completed",
        extra={
            "step": "evaluation_complete",
            "loan_type": loan_type,
            "requested_amount": requested_amount,
            "evaluation_outcome": "eligible" if is_eligible else "ineligible",
            "risk_score": risk_score,
            "risk_tier": risk_tier,
            "recommended_interest_rate": recommended_interest_rate,
            "duration_ms": duration_ms,
        },
    )


def log_schedule(principal: float, annual_interest_rate: float, term_months: int, monthly_payment: float) -> None:
    """Log a generated repayment schedule"""
    logging.getLogger("sacco_lending.amortization").info(
        "Repayment schedule generated",
        extra={
            "step": "schedule_generated",
            "principal": principal,
            "annual_interest_rate": annual_interest_rate,
            "term_months": term_months,
            "monthly_payment": monthly_payment,
        },
    )
