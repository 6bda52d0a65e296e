from fastapi import Request

from vcreviews.access.gate import AccessGate
from vcreviews.config import setting
from vcreviews.shared.locks import KeyedLock


async def get_firm_locks(request: Request) -> KeyedLock:
    return request.app.state.firm_locks


async def get_access_gate(request: Request) -> AccessGate:
    return request.app.state.access_gate


async def caller_identity(request: Request) -> str | None:
    """Verified user id forwarded by the upstream identity layer, if any."""
    return request.headers.get(setting("IDENTITY_HEADER"))
