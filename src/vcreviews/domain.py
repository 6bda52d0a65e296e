"""VC Reviews bounded context: firms, founder reviews, rating aggregates and member access.

Founders submit reviews of venture capital firms. Every accepted review
triggers a full recompute of the firm's rating aggregate. Members read
full reviews through an access gate that provisions their account on
first contact and meters free-plan readers against a monthly view quota.
"""

import structlog
from protean.domain import Domain

from vcreviews.utils.logging import configure_logging

configure_logging()

vcreviews = Domain(name="vcreviews")

logger = structlog.get_logger(__name__)
