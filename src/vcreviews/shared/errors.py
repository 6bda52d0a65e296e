"""Application-level failures raised outside the domain model.

Domain rule violations use Protean's ``ValidationError`` and
``ObjectNotFoundError``; the classes here cover authentication, the quota
business outcome and transient infrastructure faults.
"""

from protean.exceptions import ExpectedVersionError, ValidationError
from sqlalchemy.exc import IntegrityError

# A concurrent writer got there first; the whole unit of work can be retried.
WRITE_CONFLICTS = (ExpectedVersionError, IntegrityError)

# Protean's uniqueness check rejects a second insert of the same identity or
# unique field with a ValidationError that carries this phrase.
_DUPLICATE_PHRASE = "is already present"


def is_write_conflict(exc: Exception) -> bool:
    """True when ``exc`` means another writer persisted the same record first."""
    if isinstance(exc, WRITE_CONFLICTS):
        return True
    if not isinstance(exc, ValidationError) or not isinstance(exc.messages, dict):
        return False

    for messages in exc.messages.values():
        if not isinstance(messages, list | tuple):
            messages = [messages]
        if any(_DUPLICATE_PHRASE in str(message) for message in messages):
            return True
    return False


class AuthenticationRequired(Exception):
    """The request carries no verified identity."""

    def __init__(self, message="Authentication required"):
        super().__init__(message)
        self.message = message


class QuotaExceeded(Exception):
    """A free member has used every view in the current monthly window."""

    def __init__(self, status, upgrade_url, message=None):
        self.status = status
        self.upgrade_url = upgrade_url
        self.message = message or (
            f"You've reached your limit of {status.limit} review views this month. "
            "Upgrade to premium for unlimited access."
        )
        super().__init__(self.message)


class TransientFailure(Exception):
    """The store or an upstream collaborator failed; the caller may retry."""

    def __init__(self, message, operation=None):
        super().__init__(message)
        self.message = message
        self.operation = operation
