"""Key=value logging for the SOW engine.

Every line carries the timestamp, level, origin and message. Lines logged
through log_with_context also carry the diagnostic they belong to (customer,
diagnostic result, diagnostic type, catalog source) ahead of any other fields,
so one customer's preview, draft and recommendation calls can be grepped
together.
"""

import logging
import sys
from typing import Any

# Rendered right after the message, in this order, when set on the record
CONTEXT_FIELDS = ("customer_id", "diagnostic_result_id", "diagnostic_type", "catalog_source")


def _format_value(value: Any) -> str:
    text = str(value)
    if not text or any(ch.isspace() or ch in '="' for ch in text):
        return '"' + text.replace('"', '\\"') + '"'
    return text


class StructuredFormatter(logging.Formatter):
    """Key=value formatter; values with spaces or '=' are double-quoted."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "module": record.module,
            "function": record.funcName,
            "message": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_data[field] = value

        log_data.update(getattr(record, "extra_data", None) or {})

        line = " ".join(f"{k}={_format_value(v)}" for k, v in log_data.items())
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _level_for_env() -> int:
    try:
        from sow_engine.core.config import get_settings

        return logging.DEBUG if get_settings().SOW_ENGINE_ENV == "dev" else logging.INFO
    except Exception:
        # Settings unavailable (missing env)
        return logging.INFO


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger writing key=value lines to stdout.

    DEBUG in the dev environment, INFO otherwise.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
        logger.setLevel(_level_for_env())

    return logger


def log_with_context(logger: logging.Logger, level: int, msg: str, **kwargs: Any) -> None:
    """
    Log with diagnostic context and additional fields.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        msg: Log message
        **kwargs: CONTEXT_FIELDS (customer_id, catalog_source, ...) and any
            other fields (item_count, recommended_tier, ...)
    """
    extra: dict[str, Any] = {field: kwargs.pop(field) for field in CONTEXT_FIELDS if field in kwargs}
    extra["extra_data"] = kwargs
    logger.log(level, msg, extra=extra)
