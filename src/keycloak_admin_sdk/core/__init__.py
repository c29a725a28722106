"""Core request-dispatch layer of the Keycloak Admin SDK.

Credential handling, request dispatch and response interpretation shared
by every resource API.
"""

from __future__ import annotations

from .credential_store import CredentialStore
from .dispatcher import (
    CONFIGURED_REALM,
    CallLifecycle,
    CallState,
    IllegalTransitionError,
    RequestDispatcher,
)
from .errors import ErrorFactory
from .interpreter import Expect, ResponseInterpreter, extract_location_id
from .token_acquirer import TokenAcquirer

__all__ = [
    "CONFIGURED_REALM",
    "CallLifecycle",
    "CallState",
    "CredentialStore",
    "ErrorFactory",
    "Expect",
    "IllegalTransitionError",
    "RequestDispatcher",
    "ResponseInterpreter",
    "TokenAcquirer",
    "extract_location_id",
]
