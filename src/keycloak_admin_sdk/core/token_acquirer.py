"""Token acquisition for the three supported authentication modes.

Builds the grant payloads and performs the exchange against the realm's
OpenID Connect token endpoint.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from ..config import (
    AuthMethod,
    BearerAuth,
    ClientCredentialsAuth,
    PasswordAuth,
)
from ..errors import AuthenticationError, ErrorCode
from ..models import FORM_CONTENT_TYPE, TokenData, TokenResponse
from ..telemetry import get_logger, trace_operation
from .errors import ErrorFactory

if TYPE_CHECKING:
    from ..config import KeycloakConfig


class TokenAcquirer:
    """Performs token-issuing exchanges for the configured auth mode.

    The acquirer is stateless: callers pass the refresh token they hold
    and receive a complete new :class:`TokenData`.
    """

    def __init__(self, config: KeycloakConfig, http: httpx.AsyncClient) -> None:
        """Initialize token acquirer.

        Args:
            config: SDK configuration.
            http: Shared async HTTP client.
        """
        self.config = config
        self._http = http
        self._logger = get_logger(config)

    @property
    def method(self) -> AuthMethod:
        return self.config.auth_method

    async def acquire(self, *, refresh_token: str | None = None) -> TokenData:
        """Obtain a fresh token for the configured mode.

        Args:
            refresh_token: Refresh token from the previous session, used by
                the password mode before falling back to a full login.

        Returns:
            New session data.

        Raises:
            AuthenticationError: If the token endpoint rejects the grant or
                cannot be reached.
        """
        auth = self.config.auth

        if isinstance(auth, BearerAuth):
            return TokenData.bearer(auth.token.get_secret_value())

        if isinstance(auth, PasswordAuth):
            if refresh_token:
                try:
                    return await self._exchange(self.build_refresh_request(refresh_token))
                except AuthenticationError as e:
                    if e.code == ErrorCode.AUTH_ENDPOINT_UNREACHABLE:
                        raise
                    self._logger.info(
                        "Refresh token rejected, logging in again",
                        error=e.error,
                    )
            return await self._exchange(self.build_password_request(auth))

        return await self._exchange(self.build_client_credentials_request(auth))

    def build_password_request(self, auth: PasswordAuth) -> dict[str, str]:
        """Build resource-owner password grant payload."""
        return {
            "grant_type": "password",
            "client_id": auth.client_id,
            "username": auth.username,
            "password": auth.password.get_secret_value(),
        }

    def build_client_credentials_request(
        self,
        auth: ClientCredentialsAuth,
    ) -> dict[str, str]:
        """Build client credentials grant payload."""
        return {
            "grant_type": "client_credentials",
            "client_id": auth.client_id,
            "client_secret": auth.client_secret.get_secret_value(),
        }

    def build_refresh_request(self, refresh_token: str) -> dict[str, str]:
        """Build refresh token grant payload.

        Raises:
            ValueError: If the mode has no user-bound refresh token.
        """
        auth = self.config.auth
        if not isinstance(auth, PasswordAuth):
            msg = f"refresh_token grant is not used for {self.method} authentication"
            raise ValueError(msg)
        return {
            "grant_type": "refresh_token",
            "client_id": auth.client_id,
            "refresh_token": refresh_token,
        }

    async def _exchange(self, data: dict[str, Any]) -> TokenData:
        """POST a grant to the token endpoint and build the session."""
        endpoint = self.config.token_endpoint
        grant_type = data["grant_type"]

        with trace_operation(
            "keycloak.token",
            attributes={
                "keycloak.realm": self.config.auth_realm,
                "oauth.grant_type": grant_type,
            },
        ):
            try:
                response = await self._http.post(
                    endpoint,
                    data=data,
                    headers={"Content-Type": FORM_CONTENT_TYPE},
                )
            except httpx.HTTPError as e:
                cause = ErrorFactory.from_exception(e, endpoint)
                self._logger.warning(
                    "Token endpoint unreachable",
                    endpoint=endpoint,
                    error=str(e),
                )
                raise AuthenticationError(
                    f"Authentication failed: {cause.message}",
                    ErrorCode.AUTH_ENDPOINT_UNREACHABLE,
                    path=endpoint,
                ) from cause

            if not response.is_success:
                error = ErrorFactory.from_token_response(response, endpoint)
                if grant_type == "refresh_token":
                    error.code = str(ErrorCode.TOKEN_REFRESH_FAILED)
                self._logger.warning(
                    "Token request failed",
                    status=response.status_code,
                    grant_type=grant_type,
                    error=error.error,
                )
                raise error

            try:
                token = TokenResponse.model_validate(response.json())
            except (ValueError, ValidationError) as e:
                raise AuthenticationError(
                    "Invalid token response: Expected access_token in response",
                    ErrorCode.INVALID_TOKEN_RESPONSE,
                    status_code=response.status_code,
                    path=endpoint,
                ) from e

        session = TokenData.from_response(
            token, buffer_seconds=self.config.token_expiry_buffer
        )
        self._logger.info(
            "Obtained access token",
            grant_type=grant_type,
            expires_in=token.expires_in,
        )
        return session
