"""
Structured logging for the reconciliation engine.
"""

import logging
import json
from datetime import datetime, timezone
from typing import Optional
from pipo_matching.config import get_config


config = get_config()


class StructuredFormatter(logging.Formatter):
    """Formats log records as structured JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "extra"):
            log_obj.update(record.extra)

        return json.dumps(log_obj, default=str)


def setup_logging(name: str = __name__) -> logging.Logger:
    """Setup and return a configured logger."""
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, config.LOG_LEVEL.upper()))

    # Avoid duplicate handlers on repeated imports
    if logger.handlers:
        return logger

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, config.LOG_LEVEL.upper()))
    console_handler.setFormatter(logging.Formatter(config.LOG_FORMAT))
    logger.addHandler(console_handler)

    # File handler with structured JSON
    if config.LOG_FILE:
        file_handler = logging.FileHandler(config.LOG_FILE)
        file_handler.setLevel(getattr(logging, config.LOG_LEVEL.upper()))
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    return logger


def log_engine_action(
    logger: logging.Logger,
    stage: str,
    action: str,
    details: Optional[dict] = None,
) -> None:
    """Log a reconciliation stage event with context."""
    extra = {
        "stage": stage,
        "action": action,
    }
    if details:
        extra.update(details)

    logger.info(
        f"[{stage}] {action}",
        extra={"extra": extra}
    )


def log_rejected_selection(
    logger: logging.Logger,
    pi_item_id: str,
    po_id: str,
    po_line_id: str,
    reason: str,
) -> None:
    """Log a confirmed selection that the applier refused."""
    extra = {
        "type": "rejected_selection",
        "pi_item_id": pi_item_id,
        "po_id": po_id,
        "po_line_id": po_line_id,
        "reason": reason,
    }
    logger.warning(
        f"Selection for PI item {pi_item_id} refused: {reason}",
        extra={"extra": extra}
    )
