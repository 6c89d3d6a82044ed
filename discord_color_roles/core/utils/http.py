"""Shared httpx client configuration."""

from __future__ import annotations

from typing import Any

import httpx

USER_AGENT = "DiscordBot (discord-color-roles, 1.0)"


def create_async_client(**kwargs: Any) -> httpx.AsyncClient:
    """Create a pre-configured httpx.AsyncClient with HTTP/2 support.

    The caller is responsible for using this within an async context manager
    or calling ``aclose()`` when done.
    """
    headers = {"User-Agent": USER_AGENT, **kwargs.pop("headers", {})}
    return httpx.AsyncClient(
        http2=True,
        timeout=httpx.Timeout(30.0),
        follow_redirects=True,
        headers=headers,
        **kwargs,
    )


def describe_error_body(response: httpx.Response) -> str:
    """Best-effort short description of a Discord error response."""
    try:
        data = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(data, dict) and "message" in data:
        code = data.get("code")
        return f"{data['message']} (code {code})" if code is not None else str(data["message"])
    return response.text[:200]
