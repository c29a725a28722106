"""HTTP client factory for the Keycloak Admin SDK."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from .telemetry import SDK_NAME, SDK_VERSION

if TYPE_CHECKING:
    from .config import KeycloakConfig


def build_timeout(config: KeycloakConfig) -> httpx.Timeout:
    """Translate config timeouts; ``None`` disables the limit."""
    return httpx.Timeout(
        config.timeout,
        connect=config.connect_timeout or config.timeout,
    )


def create_async_http_client(
    config: KeycloakConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create configured async HTTP client.

    Args:
        config: SDK configuration.
        transport: Optional transport override (tests, proxies).

    Returns:
        Configured httpx.AsyncClient.
    """
    return httpx.AsyncClient(
        timeout=build_timeout(config),
        headers={
            "User-Agent": f"{SDK_NAME}/{SDK_VERSION} Python",
            "Accept": "application/json",
        },
        follow_redirects=False,
        transport=transport,
    )
