"""Command processing with bounded retries on write conflicts.

A unit of work that loses a race (stale version, duplicate key, duplicate
identity) is rolled back as a whole, so processing the same command again
re-reads the winner's state and decides afresh.
"""

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from vcreviews.shared.errors import WRITE_CONFLICTS, TransientFailure, is_write_conflict

logger = structlog.get_logger(__name__)


def process_with_retries(command, max_attempts: int):
    """Process ``command`` synchronously and return the handler's result.

    Raises ``TransientFailure`` after ``max_attempts`` conflicting attempts.
    Validation errors that are not duplicates propagate unchanged.
    """
    operation = type(command).__name__
    for attempt in range(1, max_attempts + 1):
        try:
            return current_domain.process(command, asynchronous=False)
        except (*WRITE_CONFLICTS, ValidationError) as exc:
            if not is_write_conflict(exc):
                raise
            logger.warning("write_conflict", operation=operation, attempt=attempt, error=str(exc))

    logger.error("write_conflict_gave_up", operation=operation, attempts=max_attempts)
    raise TransientFailure(f"{operation} kept conflicting with concurrent writes, please retry", operation=operation)
