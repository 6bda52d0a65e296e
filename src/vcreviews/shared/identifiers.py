"""Deterministic identities.

Firms, members and monthly usage counters are addressed by natural keys
(slug, external identity, member + period). Deriving the aggregate id from
the key makes "find or create" collapse onto a single primary key, so two
concurrent creators collide in the store instead of producing duplicates.
"""

import uuid

_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "https://vcreviews.app/ids")


def firm_id_for(slug: str) -> str:
    return str(uuid.uuid5(_NAMESPACE, f"firm:{slug}"))


def member_id_for(external_id: str) -> str:
    return str(uuid.uuid5(_NAMESPACE, f"member:{external_id}"))


def usage_id_for(member_id: str, period: str) -> str:
    return str(uuid.uuid5(_NAMESPACE, f"usage:{member_id}:{period}"))


def is_well_formed_id(value: str) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True
