"""Identity provider port (abstract interface).

The upstream identity layer verifies who is calling and hands us a stable
user id. Profile details (email, names, avatar) are looked up on demand
through this port, so the gate works the same against the fake provider
in tests and the hosted provider in production.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class IdentityProfile:
    external_id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    image_url: str | None = None


class IdentityLookupError(Exception):
    """Base class for identity provider failures."""


class UnknownIdentity(IdentityLookupError):
    """The provider has no user with the given id."""


class IdentityProviderUnavailable(IdentityLookupError):
    """The provider could not be reached or answered with a server error."""


class IdentityProvider(ABC):
    @abstractmethod
    def fetch_profile(self, external_id: str) -> IdentityProfile:
        """Return the profile for ``external_id``.

        Raises ``UnknownIdentity`` when the id does not exist and
        ``IdentityProviderUnavailable`` on transport or server failures.
        """
        ...
