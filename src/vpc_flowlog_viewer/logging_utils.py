"""Logging utilities with UUID tracking."""

import json
import logging
import logging.handlers
import uuid

from pathlib import Path
from typing import Any, Optional

PACKAGE_LOGGER = "vpc_flowlog_viewer"


def setup_logger(
    name: str = PACKAGE_LOGGER, debug: bool = False, log_dir: Optional[Path] = None
) -> logging.Logger:
    """Setup logger with rotating file and console handlers."""
    logger = logging.getLogger(name)
    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    # Create logs directory
    log_dir = log_dir or Path.home() / ".vpc-flowlog-viewer"
    log_dir.mkdir(parents=True, exist_ok=True)

    # Rotating file handler (30MB max, 5 backups)
    file_handler = logging.handlers.RotatingFileHandler(
        log_dir / "vpc-flowlog-viewer.log",
        maxBytes=30 * 1024 * 1024,  # 30MB
        backupCount=5,
    )
    file_handler.setLevel(level)

    # Console handler (stderr, stdout carries the records)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    # Formatter
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


def generate_query_id() -> str:
    """Generate unique query ID."""
    return str(uuid.uuid4())[:8]


def log_query_start(logger: logging.Logger, query_id: str, **kwargs: Any) -> None:
    """Log query start with parameters."""
    logger.info(f"Query {query_id} started - {kwargs}")


def log_query_end(
    logger: logging.Logger,
    query_id: str,
    success: bool,
    **kwargs: Any,
) -> None:
    """Log query completion."""
    status = "SUCCESS" if success else "FAILED"
    log_data = {"query_id": query_id, "status": status, **kwargs}

    logger.info(f"Query {query_id} {status} - {json.dumps(log_data, default=str)}")
