"""ProvisionMember: idempotent upsert of a member keyed by external identity."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import String
from protean.utils.globals import current_domain

from vcreviews.domain import vcreviews
from vcreviews.member.member import Member
from vcreviews.shared.identifiers import member_id_for

logger = structlog.get_logger(__name__)


@vcreviews.command(part_of="Member")
class ProvisionMember:
    """Create the member on first contact, otherwise merge the latest profile."""

    external_id: String(required=True, max_length=255)
    email: String(max_length=254)
    first_name: String(max_length=100)
    last_name: String(max_length=100)
    image_url: String(max_length=500)


@vcreviews.command_handler(part_of=Member)
class ProvisionMemberHandler:
    @handle(ProvisionMember)
    def provision_member(self, command):
        repo = current_domain.repository_for(Member)
        profile = {
            "email": command.email,
            "first_name": command.first_name,
            "last_name": command.last_name,
            "image_url": command.image_url,
        }

        try:
            member = repo.get(member_id_for(command.external_id))
        except ObjectNotFoundError:
            member = Member.provision(external_id=command.external_id, **profile)
            repo.add(member)
            logger.info("member_provisioned", member_id=str(member.id), external_id=command.external_id)
            return str(member.id)

        changed = member.merge_profile(**profile)
        repo.add(member)
        if changed:
            logger.info("member_profile_merged", member_id=str(member.id), changed_fields=changed)
        return str(member.id)
