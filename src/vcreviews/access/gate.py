"""Access Gate: identity resolution, provisioning and quota around gated reads.

    ANONYMOUS ──(verified id)──> AUTHENTICATED ──(upsert)──> PROVISIONED
    PROVISIONED ──(quota ledger)──> ADMITTED | DENIED

An anonymous caller is rejected outright. DENIED only ends the current
request: the same member is admitted again once a new month starts or the
member upgrades. The review must exist before a quota unit is consumed.

All writes for one member run under that member's lock, so concurrent
requests from the same member are decided one after another. Conflicting
writes from other processes (stale versions, or a member or monthly counter
another process created first) are retried a bounded number of times and
then surface as a retryable failure.
"""

from dataclasses import dataclass
from enum import Enum

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from vcreviews.access.port import IdentityProvider, IdentityProviderUnavailable, UnknownIdentity
from vcreviews.config import setting
from vcreviews.member.member import Member
from vcreviews.member.plan import UpgradePlan
from vcreviews.member.provisioning import ProvisionMember
from vcreviews.quota.recording import RecordReviewView, quota_status_for
from vcreviews.quota.window import QuotaStatus, ViewDenied
from vcreviews.review.review import Review
from vcreviews.review.store import get_review
from vcreviews.shared.errors import AuthenticationRequired, QuotaExceeded, TransientFailure
from vcreviews.shared.identifiers import member_id_for
from vcreviews.shared.locks import KeyedLock
from vcreviews.shared.processing import process_with_retries

logger = structlog.get_logger(__name__)


class GateState(Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"
    PROVISIONED = "provisioned"
    ADMITTED = "admitted"
    DENIED = "denied"


@dataclass(frozen=True)
class GatedRead:
    """An admitted read: the review plus the quota after this view."""

    review: Review
    view_id: str
    status: QuotaStatus


class AccessGate:
    def __init__(self, identity_provider: IdentityProvider, locks: KeyedLock | None = None, max_attempts=None):
        self.identity_provider = identity_provider
        self.locks = locks if locks is not None else KeyedLock()
        self._max_attempts = max_attempts

    @property
    def max_attempts(self) -> int:
        return self._max_attempts or setting("VIEW_MAX_ATTEMPTS")

    # -------------------------------------------------------------------
    # ANONYMOUS -> AUTHENTICATED -> PROVISIONED
    # -------------------------------------------------------------------
    def authenticate(self, external_id: str | None) -> str:
        if external_id is None or not str(external_id).strip():
            logger.debug("gate_state", state=GateState.ANONYMOUS.value)
            raise AuthenticationRequired("Sign in to read full reviews")
        return str(external_id).strip()

    def provision(self, external_id: str | None) -> Member:
        """Return the caller's member record, creating it on first contact."""
        external_id = self.authenticate(external_id)
        with self.locks.hold(external_id):
            return self._ensure_member(external_id)

    def sync_profile(self, external_id: str | None) -> Member:
        """Re-read the caller's profile from the identity provider and merge it."""
        external_id = self.authenticate(external_id)
        with self.locks.hold(external_id):
            member = self._ensure_member(external_id)
            self._process(self._provisioning_command(external_id))
            return current_domain.repository_for(Member).get(member.id)

    def upgrade_plan(self, external_id: str | None, plan: str) -> Member:
        external_id = self.authenticate(external_id)
        with self.locks.hold(external_id):
            member = self._ensure_member(external_id)
            self._process(UpgradePlan(member_id=member.id, plan=plan))
            return current_domain.repository_for(Member).get(member.id)

    # -------------------------------------------------------------------
    # PROVISIONED -> ADMITTED | DENIED
    # -------------------------------------------------------------------
    def quota_status(self, external_id: str | None) -> QuotaStatus:
        return quota_status_for(self.provision(external_id))

    def view_review(self, external_id: str | None, review_id: str) -> GatedRead:
        """Admit the caller to a full review, consuming one view from the month's quota.

        Raises ``QuotaExceeded`` when a free member has no views left; nothing
        is recorded in that case.
        """
        external_id = self.authenticate(external_id)
        with self.locks.hold(external_id):
            member = self._ensure_member(external_id)
            review = get_review(review_id)
            decision = self._process(RecordReviewView(member_id=member.id, review_id=review.id))

        if isinstance(decision, ViewDenied):
            logger.info(
                "gate_state",
                state=GateState.DENIED.value,
                member_id=str(member.id),
                review_id=str(review.id),
                period=decision.status.period,
            )
            raise QuotaExceeded(decision.status, upgrade_url=setting("UPGRADE_URL"))

        logger.debug("gate_state", state=GateState.ADMITTED.value, member_id=str(member.id), review_id=str(review.id))
        return GatedRead(review=review, view_id=decision.view_id, status=decision.status)

    # -------------------------------------------------------------------
    # Internals (callers hold the member's lock)
    # -------------------------------------------------------------------
    def _ensure_member(self, external_id: str) -> Member:
        repo = current_domain.repository_for(Member)
        try:
            return repo.get(member_id_for(external_id))
        except ObjectNotFoundError:
            pass

        member_id = self._process(self._provisioning_command(external_id))
        logger.debug("gate_state", state=GateState.PROVISIONED.value, external_id=external_id)
        return repo.get(member_id)

    def _provisioning_command(self, external_id: str) -> ProvisionMember:
        try:
            profile = self.identity_provider.fetch_profile(external_id)
        except UnknownIdentity as exc:
            raise AuthenticationRequired("Unknown identity") from exc
        except IdentityProviderUnavailable as exc:
            raise TransientFailure(str(exc), operation="fetch_profile") from exc

        return ProvisionMember(
            external_id=external_id,
            email=profile.email,
            first_name=profile.first_name,
            last_name=profile.last_name,
            image_url=profile.image_url,
        )

    def _process(self, command):
        """Process ``command``, retrying when a concurrent writer got there first."""
        return process_with_retries(command, self.max_attempts)
