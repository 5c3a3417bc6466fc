"""Credential encoding for the Flowdock API."""

from __future__ import annotations

import base64

DEFAULT_API_URL = "https://api.flowdock.com"


def basic_auth_header(token: str) -> str:
    """HTTP Basic value carrying the personal API token."""
    encoded = base64.b64encode(token.encode()).decode()
    return f"Basic {encoded}"


def auth_headers(token: str) -> dict[str, str]:
    return {
        "Authorization": basic_auth_header(token),
        "Content-Type": "application/json",
    }
