"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from installment_ledger.config import settings


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


def log_summary_computed(
    request_id: str,
    view: str,
    month: str,
    purchase_count: int,
    line_count: int,
    duration_ms: float,
    user_id: str | None = None,
) -> None:
    """Log structured outcome of a ledger view computation"""
    logging.getLogger("installment_ledger.views").info(
        "Ledger view computed",
        extra={
            "request_id": request_id,
            "view": view,
            "month": month,
            "user_id": user_id,
            "purchase_count": purchase_count,
            "line_count": line_count,
            "duration_ms": duration_ms,
        },
    )
