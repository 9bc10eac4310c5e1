"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from dhanrakshak.config import settings


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

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_parse_outcome(
    request_id: str,
    outcome: str,
    method: Optional[str],
    bank: Optional[str],
    duration_ms: float,
    ai_failure: Optional[str] = None,
) -> None:
    """
    Log one SMS parse. Non-transactional messages are an expected outcome, so every
    outcome is logged at INFO; only AI fallbacks raise the level to WARNING.
    """
    level = logging.WARNING if ai_failure else logging.INFO
    logging.log(
        level,
        "SMS parse completed",
        extra={
            "request_id": request_id,
            "step": "sms_parse",
            "outcome": outcome,
            "parse_method": method,
            "bank": bank,
            "ai_failure": ai_failure,
            "duration_ms": duration_ms,
        },
    )


def log_insights_generated(
    request_id: str,
    net_worth: float,
    suggestion_count: int,
    narrative_source: str,
    duration_ms: float,
) -> None:
    """Log structured insights outcome for analysis"""
    logging.info(
        "Insights generated",
        extra={
            "request_id": request_id,
            "step": "insights_complete",
            "net_worth": net_worth,
            "suggestion_count": suggestion_count,
            "narrative_source": narrative_source,
            "duration_ms": duration_ms,
        },
    )
