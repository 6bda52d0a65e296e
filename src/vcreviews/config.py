"""Application settings for the VC Reviews context.

Settings live in the ``[custom]`` table of ``domain.toml`` and can be
overridden per environment (``PROTEAN_ENV``). Every key has a default so
that a bare configuration still boots.
"""

from protean.utils.globals import current_domain

DEFAULTS = {
    "FREE_MONTHLY_VIEW_LIMIT": 6,
    "UPGRADE_URL": "/upgrade",
    "IDENTITY_PROVIDER": "fake",
    "IDENTITY_API_URL": "https://api.clerk.com/v1",
    "IDENTITY_API_KEY_ENV": "CLERK_SECRET_KEY",
    "IDENTITY_TIMEOUT_SECONDS": 5,
    "IDENTITY_HEADER": "X-User-Id",
    "RECOMPUTE_MAX_ATTEMPTS": 5,
    "VIEW_MAX_ATTEMPTS": 5,
}


def setting(name: str):
    """Return the configured value for ``name`` in the active domain."""
    custom = current_domain.config.get("custom") or {}
    if name in custom:
        return custom[name]
    return DEFAULTS[name]
