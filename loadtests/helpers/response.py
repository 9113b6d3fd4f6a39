"""Response error extraction for load test observability.

Parses storefront API error responses into human-readable messages.
Every error body has the shape ``{"error": ..., "message": ..., "details": ...}``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    """
    try:
        body = response.json()
    except ValueError:
        # Not JSON: raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if not isinstance(body, dict):
        return str(body)[:300]

    if "error" in body:
        parts = [str(body["error"])]
        if body.get("message"):
            parts.append(str(body["message"]))
        return ": ".join(parts)

    # Unknown shape, stringified
    return str(body)[:300]
