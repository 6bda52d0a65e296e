"""VC Reviews FastAPI application.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from domain.toml:
#   - unset / "test" → in-memory store, fake identity provider
#   - "development"  → SQLite
#   - "production"   → PostgreSQL, HTTP identity provider
from vcreviews.access import build_identity_provider
from vcreviews.api.application import create_app
from vcreviews.domain import vcreviews

vcreviews.init()

with vcreviews.domain_context():
    identity_provider = build_identity_provider()

app = create_app(identity_provider)
