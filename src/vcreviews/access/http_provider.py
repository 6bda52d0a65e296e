"""Identity provider adapter for a Clerk-style user API.

Profiles are fetched with ``GET {base_url}/users/{id}`` using a bearer
secret. The response carries ``email_addresses`` (with the primary one
flagged by ``primary_email_address_id``), ``first_name``, ``last_name``
and ``image_url``.
"""

import requests
import structlog

from vcreviews.access.port import (
    IdentityProfile,
    IdentityProvider,
    IdentityProviderUnavailable,
    UnknownIdentity,
)

logger = structlog.get_logger(__name__)


class HttpIdentityProvider(IdentityProvider):
    def __init__(self, base_url: str, api_key: str, timeout: float = 5, session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_profile(self, external_id: str) -> IdentityProfile:
        url = f"{self.base_url}/users/{external_id}"
        try:
            response = self.session.get(
                url,
                headers={"Authorization": f"Bearer {self.api_key}", "Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("identity_provider_unreachable", external_id=external_id, error=str(exc))
            raise IdentityProviderUnavailable(f"Identity provider unreachable: {exc}") from exc

        if response.status_code == 404:
            raise UnknownIdentity(f"No user {external_id!r}")
        if response.status_code >= 400:
            logger.warning("identity_provider_error", external_id=external_id, status_code=response.status_code)
            raise IdentityProviderUnavailable(f"Identity provider answered {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise IdentityProviderUnavailable("Identity provider returned malformed JSON") from exc

        return IdentityProfile(
            external_id=payload.get("id") or external_id,
            email=_primary_email(payload),
            first_name=payload.get("first_name"),
            last_name=payload.get("last_name"),
            image_url=payload.get("image_url"),
        )


def _primary_email(payload: dict) -> str | None:
    addresses = payload.get("email_addresses") or []
    primary_id = payload.get("primary_email_address_id")
    for address in addresses:
        if address.get("id") == primary_id:
            return address.get("email_address")
    return addresses[0].get("email_address") if addresses else None
