"""Response interpretation for admin API calls.

Classifies an httpx response into a decoded value, the identifier of a
created resource, or a raised SDK error.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any

import httpx

from ..errors import CreationError, ErrorCode, ResponseDecodeError
from .errors import ErrorFactory

if TYPE_CHECKING:
    from ..models import RequestDescriptor


class Expect(StrEnum):
    """Declared return shape of a call."""

    JSON = "json"
    VOID = "void"


def _is_empty(response: httpx.Response) -> bool:
    if response.status_code == 204:
        return True
    if response.headers.get("content-length") == "0":
        return True
    return not response.content.strip()


def _is_json(response: httpx.Response) -> bool:
    content_type = response.headers.get("content-type", "")
    return "json" in content_type.lower()


def _created_body(response: httpx.Response) -> Any:
    if _is_empty(response):
        return None
    try:
        return response.json()
    except ValueError:
        return None


def extract_location_id(location: str | None) -> str | None:
    """Return the trailing path segment of a Location header value."""
    if not location:
        return None
    try:
        path = httpx.URL(location.strip()).path
    except httpx.InvalidURL:
        return None
    segment = path.rstrip("/").rsplit("/", 1)[-1]
    return segment or None


class ResponseInterpreter:
    """Turns HTTP responses into call outcomes."""

    def interpret(
        self,
        response: httpx.Response,
        descriptor: RequestDescriptor,
        *,
        expect: Expect = Expect.JSON,
        correlation_id: str | None = None,
    ) -> Any:
        """Classify ``response``.

        Args:
            response: Response of the final attempt.
            descriptor: The call that produced it.
            expect: Declared return shape.
            correlation_id: Correlation ID attached to raised errors.

        Returns:
            Decoded JSON, response text, the created resource's id, or
            ``None`` for void and empty responses.

        Raises:
            RequestError: On non-2xx responses.
            AuthenticationError: On 401 responses.
            CreationError: On 201 responses without a usable Location.
            ResponseDecodeError: On undecodable JSON bodies.
        """
        if not response.is_success:
            raise ErrorFactory.from_http_response(
                response, descriptor.path, correlation_id=correlation_id
            )

        if expect is Expect.VOID:
            return None

        if response.status_code == 201:
            return self._created(response, descriptor, correlation_id)

        if _is_empty(response):
            return None

        if _is_json(response):
            return self._decode(response, descriptor, correlation_id)

        return response.text

    def _created(
        self,
        response: httpx.Response,
        descriptor: RequestDescriptor,
        correlation_id: str | None,
    ) -> Any:
        body = _created_body(response)
        # A body naming the new resource wins over the Location header.
        if isinstance(body, dict) and body.get("id"):
            return body

        location = response.headers.get("location")
        if location is None:
            if body is not None:
                return body
            raise CreationError(
                f"Created resource at {descriptor.path} but the response has "
                "no Location header",
                path=descriptor.path,
                correlation_id=correlation_id,
            )

        resource_id = extract_location_id(location)
        if resource_id is None:
            raise CreationError(
                f"Created resource at {descriptor.path} but the Location header "
                f"is malformed: {location!r}",
                ErrorCode.MALFORMED_LOCATION,
                path=descriptor.path,
                location=location,
                correlation_id=correlation_id,
            )
        return resource_id

    def _decode(
        self,
        response: httpx.Response,
        descriptor: RequestDescriptor,
        correlation_id: str | None,
    ) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ResponseDecodeError(
                response.status_code,
                f"Failed to parse JSON response: {e}",
                descriptor.path,
                response_body=response.text,
                correlation_id=correlation_id,
            ) from e
