"""Credential store owning the active session of one client instance."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from ..config import AuthMethod
from ..telemetry import get_logger

if TYPE_CHECKING:
    from ..models import TokenData
    from .token_acquirer import TokenAcquirer


class CredentialStore:
    """Caches the access token and coalesces concurrent acquisitions.

    Concurrent callers that find no valid token share one in-flight
    acquisition task. ``invalidate`` bumps a generation counter so an
    acquisition started before the invalidation never lands in the cache.
    """

    def __init__(self, acquirer: TokenAcquirer) -> None:
        self._acquirer = acquirer
        self._session: TokenData | None = None
        self._refresh_token: str | None = None
        self._inflight: asyncio.Task[TokenData] | None = None
        self._generation = 0
        self._logger = get_logger(acquirer.config)

    @property
    def session(self) -> TokenData | None:
        """Current session, if any."""
        return self._session

    @property
    def can_refresh(self) -> bool:
        """Whether a rejected token can be replaced by a new acquisition."""
        return self._acquirer.method != AuthMethod.BEARER

    async def get_valid_token(self) -> str:
        """Return a token that is not past its buffered expiry.

        Raises:
            AuthenticationError: If acquisition fails.
        """
        session = self._session
        if session is not None and not session.is_expired():
            return session.access_token
        return (await self._await_acquisition()).access_token

    async def login(self) -> TokenData:
        """Acquire a new session now, replacing any cached one."""
        self._discard()
        return await self._await_acquisition()

    def invalidate(self, rejected_token: str | None = None) -> None:
        """Discard the cached session.

        Args:
            rejected_token: Token the server just rejected. When the cache
                already holds a different token, another caller has
                refreshed it and nothing is discarded.
        """
        session = self._session
        if rejected_token is not None and (
            session is None or session.access_token != rejected_token
        ):
            return
        self._logger.debug("Discarding cached access token")
        self._discard()

    def _discard(self) -> None:
        if self._session is not None and self._session.can_refresh():
            self._refresh_token = self._session.refresh_token
        self._session = None
        self._inflight = None
        self._generation += 1

    async def _await_acquisition(self) -> TokenData:
        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._acquire(self._generation))
        # shield: one waiter being cancelled must not cancel the shared task
        return await asyncio.shield(self._inflight)

    def _current_refresh_token(self) -> str | None:
        session = self._session
        if session is not None and session.can_refresh():
            return session.refresh_token
        return self._refresh_token

    async def _acquire(self, generation: int) -> TokenData:
        try:
            session = await self._acquirer.acquire(
                refresh_token=self._current_refresh_token()
            )
        finally:
            if generation == self._generation:
                self._inflight = None
        if generation == self._generation:
            self._session = session
            self._refresh_token = None
        return session
