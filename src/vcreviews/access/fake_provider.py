"""Configurable fake identity provider for development and testing.

Unregistered ids get a synthetic profile, so any caller id works out of the
box. Tests can register real-looking profiles, mark ids as unknown, or
switch the provider into an outage.
"""

from vcreviews.access.port import (
    IdentityProfile,
    IdentityProvider,
    IdentityProviderUnavailable,
    UnknownIdentity,
)


class FakeIdentityProvider(IdentityProvider):
    def __init__(self) -> None:
        self.profiles: dict[str, IdentityProfile] = {}
        self.unknown_ids: set[str] = set()
        self.available: bool = True
        self.calls: list[str] = []

    def register(self, external_id: str, **profile) -> IdentityProfile:
        self.profiles[external_id] = IdentityProfile(external_id=external_id, **profile)
        return self.profiles[external_id]

    def forget(self, external_id: str) -> None:
        self.profiles.pop(external_id, None)
        self.unknown_ids.add(external_id)

    def configure(self, available: bool) -> None:
        self.available = available

    def reset(self) -> None:
        self.profiles.clear()
        self.unknown_ids.clear()
        self.available = True
        self.calls.clear()

    def fetch_profile(self, external_id: str) -> IdentityProfile:
        self.calls.append(external_id)

        if not self.available:
            raise IdentityProviderUnavailable("Fake identity provider is switched off")
        if external_id in self.unknown_ids:
            raise UnknownIdentity(f"No user {external_id!r}")
        if external_id in self.profiles:
            return self.profiles[external_id]
        return IdentityProfile(external_id=external_id, email=f"{external_id}@example.com")
