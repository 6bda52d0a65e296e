"""Domain events for the Member aggregate."""

from protean.fields import DateTime, Identifier, String

from vcreviews.domain import vcreviews


@vcreviews.event(part_of="Member")
class MemberProvisioned:
    """An authenticated user was seen for the first time and given a member record."""

    __version__ = 1

    member_id: Identifier(required=True)
    external_id: String(required=True)
    email: String()
    plan: String(required=True)
    provisioned_at: DateTime(required=True)


@vcreviews.event(part_of="Member")
class MemberProfileSynced:
    """Profile fields were refreshed from the identity provider."""

    __version__ = 1

    member_id: Identifier(required=True)
    changed_fields: String(required=True)  # comma separated
    synced_at: DateTime(required=True)


@vcreviews.event(part_of="Member")
class PlanUpgraded:
    __version__ = 1

    member_id: Identifier(required=True)
    previous_plan: String(required=True)
    new_plan: String(required=True)
    upgraded_at: DateTime(required=True)
