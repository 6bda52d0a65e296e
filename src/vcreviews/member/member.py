"""Member aggregate: the platform's record of an authenticated user.

Members are provisioned lazily from the identity provider, keyed by the
provider's user id. Repeat provisioning is an upsert that merges profile
fields: a non-blank value from the provider replaces the stored one, a
blank value never erases it. The plan only changes through an upgrade.
"""

from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from vcreviews.domain import vcreviews
from vcreviews.member.events import MemberProfileSynced, MemberProvisioned, PlanUpgraded
from vcreviews.shared import clock
from vcreviews.shared.identifiers import member_id_for


class Plan(Enum):
    FREE = "free"
    PREMIUM = "premium"


# Plans ordered from lowest to highest
_PLAN_ORDER = [Plan.FREE.value, Plan.PREMIUM.value]

PROFILE_FIELDS = ("email", "first_name", "last_name", "image_url")


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


@vcreviews.aggregate
class Member:
    external_id: String(required=True, max_length=255, unique=True)
    email: String(max_length=254)
    first_name: String(max_length=100)
    last_name: String(max_length=100)
    image_url: String(max_length=500)
    plan: String(choices=Plan, default=Plan.FREE.value)
    provisioned_at: DateTime()
    profile_synced_at: DateTime()
    upgraded_at: DateTime()

    @invariant.post
    def email_must_be_well_formed(self):
        if _is_blank(self.email):
            return
        local_part, _, domain_part = self.email.partition("@")
        if not local_part or not domain_part or "@" in domain_part or " " in self.email:
            raise ValidationError({"email": [f"Invalid email address: {self.email!r}"]})

    @invariant.post
    def external_id_must_not_be_blank(self):
        if self.external_id is not None and not self.external_id.strip():
            raise ValidationError({"external_id": ["External identity cannot be blank"]})

    @property
    def is_premium(self) -> bool:
        return self.plan == Plan.PREMIUM.value

    @property
    def display_name(self) -> str:
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or self.email or self.external_id

    @classmethod
    def provision(cls, external_id, email=None, first_name=None, last_name=None, image_url=None):
        now = clock.utc_now()
        profile = {"email": email, "first_name": first_name, "last_name": last_name, "image_url": image_url}

        member = cls(
            id=member_id_for(external_id),
            external_id=external_id,
            plan=Plan.FREE.value,
            provisioned_at=now,
            profile_synced_at=now,
            **{name: value.strip() for name, value in profile.items() if not _is_blank(value)},
        )
        member.raise_(
            MemberProvisioned(
                member_id=member.id,
                external_id=external_id,
                email=member.email,
                plan=member.plan,
                provisioned_at=now,
            )
        )
        return member

    def merge_profile(self, **profile) -> list[str]:
        """Apply provider profile values under the merge policy; returns the changed field names."""
        unknown = set(profile) - set(PROFILE_FIELDS)
        if unknown:
            raise ValidationError({"profile": [f"Unknown profile fields: {', '.join(sorted(unknown))}"]})

        changes = {
            name: value.strip()
            for name, value in profile.items()
            if not _is_blank(value) and value.strip() != getattr(self, name)
        }
        now = clock.utc_now()

        with atomic_change(self):
            for name, value in changes.items():
                setattr(self, name, value)
            self.profile_synced_at = now

        if changes:
            self.raise_(
                MemberProfileSynced(
                    member_id=self.id,
                    changed_fields=",".join(sorted(changes)),
                    synced_at=now,
                )
            )
        return sorted(changes)

    def upgrade_plan(self, new_plan):
        if new_plan not in _PLAN_ORDER:
            raise ValidationError({"plan": [f"Unknown plan {new_plan!r}"]})
        if _PLAN_ORDER.index(new_plan) <= _PLAN_ORDER.index(self.plan):
            raise ValidationError({"plan": [f"Cannot move from {self.plan} to {new_plan}"]})

        previous_plan = self.plan
        now = clock.utc_now()
        with atomic_change(self):
            self.plan = new_plan
            self.upgraded_at = now

        self.raise_(
            PlanUpgraded(
                member_id=self.id,
                previous_plan=previous_plan,
                new_plan=new_plan,
                upgraded_at=now,
            )
        )
