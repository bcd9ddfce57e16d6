"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from phantom_wallet.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_loan_event(step: str, user_id: str, loan_id: str, amount, duration_ms: float, **fields: Any) -> None:
    """Log structured loan lifecycle outcome for analysis"""
    logging.getLogger("phantom_wallet.loans").info(
        "Loan %s completed",
        step,
        extra={
            "user_id": user_id,
            "loan_id": loan_id,
            "step": step,
            "amount": str(amount),
            "duration_ms": duration_ms,
            **{key: str(value) for key, value in fields.items()},
        },
    )


def log_savings_event(step: str, user_id: str, account_id: str, amount, duration_ms: float, **fields: Any) -> None:
    """Log structured savings lifecycle outcome for analysis"""
    logging.getLogger("phantom_wallet.savings").info(
        "Savings %s completed",
        step,
        extra={
            "user_id": user_id,
            "account_id": account_id,
            "step": step,
            "amount": str(amount),
            "duration_ms": duration_ms,
            **{key: str(value) for key, value in fields.items()},
        },
    )
