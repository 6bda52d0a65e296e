"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state; nothing is shared
across users. State tracks ids returned by the API so follow-up requests
can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class MemberState:
    """Tracks a simulated member and the reviews they can open."""

    external_id: str
    review_ids: list[str] = field(default_factory=list)
    views_admitted: int = 0
    views_denied: int = 0
    plan: str = "free"

    @property
    def headers(self) -> dict:
        return {"X-User-Id": self.external_id}
