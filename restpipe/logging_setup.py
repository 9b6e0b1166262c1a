"""
Structured JSON Logging for restpipe

Provides a JSON formatter for structured logging output.
Useful for log aggregation systems like ELK, Datadog, CloudWatch.
"""

import json
import logging
import sys
from typing import Any, Dict, Optional


class JsonFormatter(logging.Formatter):
    """Formats log records as JSON for structured logging"""

    EXTRA_FIELDS = ("method", "url", "status_code", "attempt", "elapsed")

    def format(self, record: logging.LogRecord) -> str:
        """
        Format a log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON string with timestamp, logger name, level, message and
            any request fields attached by the pipeline
        """
        payload: Dict[str, Any] = {
            "ts": int(record.created * 1000),  # milliseconds
            "name": record.name,
            "level": record.levelname,
            "msg": record.getMessage(),
        }

        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)

        for field in self.EXTRA_FIELDS:
            if hasattr(record, field):
                payload[field] = getattr(record, field)

        return json.dumps(payload, default=str)


def setup_structured_logger(
    level: int = logging.INFO,
    stream: Optional[Any] = None,
) -> logging.Logger:
    """
    Configure structured JSON logging for restpipe.

    Args:
        level: Logging level (default: logging.INFO)
        stream: Output stream (default: sys.stdout)

    Returns:
        The configured ``restpipe`` logger, suitable for passing to a
        pipeline as its exchange logger

    Example:
        >>> from restpipe.logging_setup import setup_structured_logger
        >>> log = setup_structured_logger(logging.DEBUG)
        >>> pipeline = RequestPipeline(base_url="https://api.example.com", logger=log)
    """
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JsonFormatter())

    sdk_logger = logging.getLogger("restpipe")
    sdk_logger.setLevel(level)
    sdk_logger.handlers = [handler]
    sdk_logger.propagate = False
    return sdk_logger
