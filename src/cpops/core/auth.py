"""HTTP client construction for the control-plane API.

This module centralizes creation of the httpx client used to talk to the
control plane and applies small but important normalization rules (such as
sanitizing the API URL) to avoid malformed request URLs.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

import httpx


class AuthError(RuntimeError):
    """Raised when the control-plane client cannot be configured."""


API_URL_ENV = "CPOPS_API_URL"
ACCESS_TOKEN_ENV = "CPOPS_ACCESS_TOKEN"
TIMEOUT_ENV = "CPOPS_TIMEOUT"
DEFAULT_TIMEOUT_SECONDS = 30.0


def _sanitize_url(url: str | None) -> str | None:
    """
    Normalize a control-plane API URL.

    - Removes query strings (e.g. '?tenant=acmeCo')
    - Removes trailing slashes
    """
    if not url:
        return url
    url = url.strip().split("?", 1)[0]
    return url.rstrip("/")


def _timeout_seconds(raw: str | None) -> float:
    """Return the request timeout, falling back to the default on bad input."""
    if raw is None:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT_SECONDS
    return value if value > 0 else DEFAULT_TIMEOUT_SECONDS


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for the control-plane API."""

    api_url: str
    access_token: str
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_env(
        cls,
        *,
        api_url: str | None = None,
        access_token: str | None = None,
    ) -> ClientConfig:
        """
        Build a config from explicit values, falling back to the environment.

        Raises:
            AuthError: If the API URL or access token is missing.
        """
        url = _sanitize_url(api_url or os.getenv(API_URL_ENV))
        token = (access_token or os.getenv(ACCESS_TOKEN_ENV) or "").strip()
        if not url:
            raise AuthError(
                f"No control-plane API URL configured. Set {API_URL_ENV} or pass --api-url."
            )
        if not token:
            raise AuthError(
                f"Not authenticated. Set {ACCESS_TOKEN_ENV} or pass --token."
            )
        return cls(
            api_url=url,
            access_token=token,
            timeout=_timeout_seconds(os.getenv(TIMEOUT_ENV)),
        )


def get_client(config: ClientConfig) -> httpx.Client:
    """
    Create and return an httpx client for the control-plane API.

    The client carries the bearer token and base URL, and may be shared by
    any number of listing operations.
    """
    return httpx.Client(
        base_url=config.api_url,
        headers={
            "Authorization": f"Bearer {config.access_token}",
            "Content-Type": "application/json",
        },
        timeout=config.timeout,
    )
