"""FastAPI application factory.

The caller owns the domain lifecycle: ``vcreviews.init()`` must have run
before the app serves requests. The identity provider is built by the
entrypoint and injected here; the app holds the single ``AccessGate``.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from vcreviews.access.gate import AccessGate
from vcreviews.access.port import IdentityProvider
from vcreviews.api.errors import register_error_handlers
from vcreviews.api.routes import firm_router, member_router, review_router
from vcreviews.domain import vcreviews
from vcreviews.shared.locks import KeyedLock
from vcreviews.utils.logging import bind_request_context, clear_request_context


def create_app(
    identity_provider: IdentityProvider,
    locks: KeyedLock | None = None,
    firm_locks: KeyedLock | None = None,
) -> FastAPI:
    """Build the API. ``locks`` guards members inside the gate, ``firm_locks`` guards firms during submission."""
    app = FastAPI(
        title="VC Reviews API",
        description="Founder reviews of venture capital firms, rating aggregates and metered review access",
    )
    app.state.access_gate = AccessGate(identity_provider=identity_provider, locks=locks)
    app.state.firm_locks = firm_locks if firm_locks is not None else KeyedLock()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the domain context and bind request details to the log context."""
        clear_request_context()
        bind_request_context(method=request.method, path=request.url.path)
        with vcreviews.domain_context():
            response = await call_next(request)
        return response

    register_error_handlers(app)

    app.include_router(review_router)
    app.include_router(firm_router)
    app.include_router(member_router)

    @app.get("/health")
    async def health():
        return {"status": "ok", "domain": vcreviews.name}

    return app
