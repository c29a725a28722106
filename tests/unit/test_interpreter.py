"""Unit tests for response interpretation and Location id extraction."""

import httpx
import pytest

from keycloak_admin_sdk.core.interpreter import (
    Expect,
    ResponseInterpreter,
    extract_location_id,
)
from keycloak_admin_sdk.errors import (
    AuthenticationError,
    ConflictError,
    CreationError,
    ErrorCode,
    NotFoundError,
    ResponseDecodeError,
    ServerError,
)
from keycloak_admin_sdk.models import HttpMethod, RequestDescriptor

GET_USERS = RequestDescriptor.build("/users")
CREATE_USER = RequestDescriptor.build("/users", HttpMethod.POST)


@pytest.fixture
def interpreter() -> ResponseInterpreter:
    return ResponseInterpreter()


class TestExtractLocationId:
    """Tests for extract_location_id."""

    @pytest.mark.parametrize(
        ("location", "expected"),
        [
            ("https://kc.example.com/admin/realms/r/users/abc-123", "abc-123"),
            ("https://kc.example.com/admin/realms/r/users/abc-123/", "abc-123"),
            ("https://kc.example.com/admin/realms/r/groups/g1?x=1#frag", "g1"),
            ("/admin/realms/r/roles/role%20name", "role name"),
            ("abc-123", "abc-123"),
        ],
    )
    def test_trailing_segment(self, location: str, expected: str) -> None:
        assert extract_location_id(location) == expected

    @pytest.mark.parametrize("location", [None, "", "https://kc.example.com/", "/"])
    def test_no_identifier(self, location: str | None) -> None:
        assert extract_location_id(location) is None


class TestSuccessfulResponses:
    """Tests for 2xx classification."""

    def test_json_body(self, interpreter: ResponseInterpreter) -> None:
        response = httpx.Response(200, json=[{"id": "u1"}])

        assert interpreter.interpret(response, GET_USERS) == [{"id": "u1"}]

    def test_no_content(self, interpreter: ResponseInterpreter) -> None:
        assert interpreter.interpret(httpx.Response(204), GET_USERS) is None

    def test_empty_200(self, interpreter: ResponseInterpreter) -> None:
        response = httpx.Response(200, headers={"Content-Type": "application/json"})

        assert interpreter.interpret(response, GET_USERS) is None

    def test_plain_text(self, interpreter: ResponseInterpreter) -> None:
        response = httpx.Response(200, text="42")

        assert interpreter.interpret(response, GET_USERS) == "42"

    def test_void_discards_body(self, interpreter: ResponseInterpreter) -> None:
        response = httpx.Response(200, json={"ignored": True})

        assert interpreter.interpret(response, GET_USERS, expect=Expect.VOID) is None

    def test_void_ignores_missing_location(self, interpreter: ResponseInterpreter) -> None:
        assert interpreter.interpret(
            httpx.Response(201), CREATE_USER, expect=Expect.VOID
        ) is None

    def test_undecodable_json(self, interpreter: ResponseInterpreter) -> None:
        response = httpx.Response(
            200, content=b"{not json", headers={"Content-Type": "application/json"}
        )

        with pytest.raises(ResponseDecodeError) as exc_info:
            interpreter.interpret(response, GET_USERS, correlation_id="c-1")

        assert exc_info.value.code == ErrorCode.INVALID_RESPONSE
        assert exc_info.value.correlation_id == "c-1"


class TestCreatedResponses:
    """Tests for 201 Created handling."""

    def test_location_id(self, interpreter: ResponseInterpreter) -> None:
        response = httpx.Response(
            201,
            headers={"Location": "https://kc.example.com/admin/realms/r/users/abc-123"},
        )

        assert interpreter.interpret(response, CREATE_USER) == "abc-123"

    def test_missing_location(self, interpreter: ResponseInterpreter) -> None:
        with pytest.raises(CreationError) as exc_info:
            interpreter.interpret(httpx.Response(201), CREATE_USER)

        assert exc_info.value.code == ErrorCode.MISSING_LOCATION
        assert exc_info.value.path == "/users"

    def test_malformed_location(self, interpreter: ResponseInterpreter) -> None:
        response = httpx.Response(201, headers={"Location": "https://kc.example.com/"})

        with pytest.raises(CreationError) as exc_info:
            interpreter.interpret(response, CREATE_USER)

        assert exc_info.value.code == ErrorCode.MALFORMED_LOCATION
        assert exc_info.value.location == "https://kc.example.com/"

    def test_body_takes_precedence_over_location(
        self, interpreter: ResponseInterpreter
    ) -> None:
        response = httpx.Response(
            201,
            json={"id": "from-body", "name": "acme"},
            headers={"Location": "https://kc.example.com/admin/realms/r/organizations/x"},
        )

        assert interpreter.interpret(response, CREATE_USER) == {
            "id": "from-body",
            "name": "acme",
        }

    @pytest.mark.parametrize("body", [{}, {"id": ""}, ["x"], "created"])
    def test_id_less_body_falls_back_to_location(
        self, interpreter: ResponseInterpreter, body: object
    ) -> None:
        response = httpx.Response(
            201,
            json=body,
            headers={"Location": "https://kc.example.com/admin/realms/r/users/abc-123"},
        )

        assert interpreter.interpret(response, CREATE_USER) == "abc-123"

    def test_id_less_body_without_location_is_returned(
        self, interpreter: ResponseInterpreter
    ) -> None:
        response = httpx.Response(201, json={"status": "ok"})

        assert interpreter.interpret(response, CREATE_USER) == {"status": "ok"}

    def test_unparseable_body_falls_back_to_location(
        self, interpreter: ResponseInterpreter
    ) -> None:
        response = httpx.Response(
            201,
            text="created",
            headers={"Location": "https://kc.example.com/admin/realms/r/users/u-9"},
        )

        assert interpreter.interpret(response, CREATE_USER) == "u-9"


class TestErrorResponses:
    """Tests for non-2xx classification."""

    @pytest.mark.parametrize(
        ("status", "error_cls"),
        [(404, NotFoundError), (409, ConflictError), (502, ServerError)],
    )
    def test_status_errors(
        self,
        interpreter: ResponseInterpreter,
        status: int,
        error_cls: type[Exception],
    ) -> None:
        response = httpx.Response(status, json={"errorMessage": "nope"})

        with pytest.raises(error_cls) as exc_info:
            interpreter.interpret(response, GET_USERS, correlation_id="c-2")

        assert exc_info.value.status_code == status
        assert exc_info.value.path == "/users"
        assert exc_info.value.message == "nope"
        assert exc_info.value.correlation_id == "c-2"

    def test_unauthorized(self, interpreter: ResponseInterpreter) -> None:
        with pytest.raises(AuthenticationError):
            interpreter.interpret(httpx.Response(401), GET_USERS)

    def test_void_still_raises(self, interpreter: ResponseInterpreter) -> None:
        with pytest.raises(NotFoundError):
            interpreter.interpret(httpx.Response(404), GET_USERS, expect=Expect.VOID)
