"""Structured JSON logging for calculator observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from money_math.config import settings


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


def log_calculation(calculator: str, duration_ms: float) -> None:
    """Log a completed calculation"""
    logging.debug(
        "Calculation completed",
        extra={
            "calculator": calculator,
            "step": "calculation_complete",
            "duration_ms": duration_ms,
        },
    )


def log_invalid_input(calculator: str, field: str, reason: str) -> None:
    """Log an input the engines rejected; the user is expected to correct it"""
    logging.info(
        "Invalid calculator input",
        extra={
            "calculator": calculator,
            "step": "input_rejected",
            "field": field,
            "reason": reason,
        },
    )


def log_non_convergence(strategy: str, month_cap: int, debt_count: int) -> None:
    """Log a payoff simulation that hit the month cap with debt remaining"""
    logging.warning(
        "Debt payoff did not converge",
        extra={
            "calculator": "debt_payoff",
            "step": "payoff_capped",
            "strategy": strategy,
            "month_cap": month_cap,
            "debt_count": debt_count,
        },
    )
