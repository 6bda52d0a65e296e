"""Plan management: command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from vcreviews.domain import vcreviews
from vcreviews.member.member import Member

logger = structlog.get_logger(__name__)


@vcreviews.command(part_of="Member")
class UpgradePlan:
    """Move a member to a higher plan (upgrades only, no downgrades)."""

    member_id: Identifier(required=True)
    plan: String(required=True, max_length=20)


@vcreviews.command_handler(part_of=Member)
class ManagePlanHandler:
    @handle(UpgradePlan)
    def upgrade_plan(self, command):
        repo = current_domain.repository_for(Member)
        member = repo.get(command.member_id)
        member.upgrade_plan(new_plan=command.plan)
        repo.add(member)
        logger.info("member_plan_upgraded", member_id=str(member.id), plan=member.plan)
