"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "bazicash-gateway"


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

    # Route uvicorn through the same handler
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = [handler]
        uvicorn_logger.setLevel(level)
        uvicorn_logger.propagate = False


def log_proxy_request(
    request_id: str,
    endpoint: str,
    customer_email: str,
    outcome: str,
    duration_ms: float,
) -> None:
    """Log structured proxy call outcome for analysis"""
    logging.info(
        "Proxy request completed",
        extra={
            "request_id": request_id,
            "endpoint": endpoint,
            "customer_email": customer_email,
            "step": "proxy_complete",
            "outcome": outcome,
            "duration_ms": duration_ms,
        },
    )


def log_upstream_failure(request_id: str, endpoint: str, error: Exception) -> None:
    """Full upstream error detail goes to logs only, never to the shopper"""
    logging.error(
        f"Admin API error: {error}",
        extra={
            "request_id": request_id,
            "endpoint": endpoint,
            "step": "upstream_failure",
            "error_type": type(error).__name__,
        },
    )
