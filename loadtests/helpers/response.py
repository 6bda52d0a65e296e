"""Response error extraction for load test observability.

Parses VC Reviews API error responses into human-readable messages. Every
error body has the shape ``{"error": code, "message": text, ...}``; 400s
add ``fields`` and 403 quota denials add ``viewStats``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a compact error message suitable for Locust failure messages and log lines."""
    try:
        body = response.json()
    except ValueError:
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if not isinstance(body, dict) or "error" not in body:
        return str(body)[:300]

    detail = f"{body['error']}: {body.get('message', '')}".rstrip(": ")
    fields = body.get("fields")
    if isinstance(fields, dict) and fields:
        detail += " | " + " | ".join(f"{name}: {', '.join(errors)}" for name, errors in fields.items())
    if body.get("retryable"):
        detail += " (retryable)"
    return detail
