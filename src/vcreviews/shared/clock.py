"""Wall clock for the context. All "now" readings go through ``utc_now``."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)
