"""
Observability helpers for the parcel store.

Times each store operation and emits a structured log line with its outcome.
"""

import time
import logging
from contextlib import asynccontextmanager
from typing import Optional

from tracker.app.core.config import settings
from tracker.app.core.exceptions import AppException, PersistenceError

# Configure structured logger
logger = logging.getLogger("tracker")


def configure_logging(level: Optional[str] = None) -> None:
    """Install a basic handler on the root logger at the configured level."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def track_operation(operation: str, **context):
    """
    Wrap one store operation with timing and an outcome log.

    Rejected requests are logged as warnings, storage failures as errors.
    The exception is always re-raised to the caller.
    """
    start_time = time.time()
    log_data = {"operation": operation, **context}

    try:
        yield log_data
    except AppException as exc:
        log_data["duration_ms"] = round((time.time() - start_time) * 1000, 2)
        log_data["outcome"] = exc.error_code
        if isinstance(exc, PersistenceError):
            logger.error("Parcel operation failed: %s", exc.message, extra=log_data)
        else:
            logger.warning("Parcel operation rejected: %s", exc.message, extra=log_data)
        raise
    except Exception:
        log_data["duration_ms"] = round((time.time() - start_time) * 1000, 2)
        log_data["outcome"] = "ERROR"
        logger.error("Parcel operation failed", extra=log_data)
        raise

    log_data["duration_ms"] = round((time.time() - start_time) * 1000, 2)
    log_data["outcome"] = "OK"
    logger.info("Parcel operation", extra=log_data)
