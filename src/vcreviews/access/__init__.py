"""Identity provider factory.

The process entrypoint builds one provider from configuration and injects
it into the ``AccessGate``:
- FakeIdentityProvider for development and testing
- HttpIdentityProvider for production
"""

import os

from vcreviews.access.fake_provider import FakeIdentityProvider
from vcreviews.access.http_provider import HttpIdentityProvider
from vcreviews.access.port import IdentityProvider
from vcreviews.config import setting


def build_identity_provider() -> IdentityProvider:
    """Build the provider named by ``IDENTITY_PROVIDER``. Needs an active domain context."""
    kind = setting("IDENTITY_PROVIDER")
    if kind == "fake":
        return FakeIdentityProvider()
    if kind == "http":
        key_env = setting("IDENTITY_API_KEY_ENV")
        api_key = os.environ.get(key_env)
        if not api_key:
            raise RuntimeError(f"{key_env} must be set to use the http identity provider")
        return HttpIdentityProvider(
            base_url=setting("IDENTITY_API_URL"),
            api_key=api_key,
            timeout=setting("IDENTITY_TIMEOUT_SECONDS"),
        )
    raise RuntimeError(f"Unknown identity provider {kind!r}")
