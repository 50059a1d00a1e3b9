"""Expectation helpers used by the scenarios.

Each helper raises ExpectationError carrying the expected and actual
values, so a failing scenario can be reported without a traceback.
"""

from typing import Any, Dict, Iterable, Mapping

from ..client import ApiResponse
from ..exceptions import ExpectationError


def expect_status(response: ApiResponse, expected: int) -> None:
    """Expect a response to have a given status code."""
    if response.status_code != expected:
        raise ExpectationError(
            f"{response.method} {response.url} returned unexpected status",
            expected=expected,
            actual=response.status_code,
            response_data=response.body if response.body is not None else response.text[:500],
        )


def expect_header_contains(response: ApiResponse, header: str, fragment: str) -> None:
    """Expect a response header to contain a substring."""
    value = response.headers.get(header, "")
    if fragment not in value:
        raise ExpectationError(
            f"Header '{header}' does not include '{fragment}'",
            expected=fragment,
            actual=value or None,
        )


def expect_list(response: ApiResponse) -> list:
    """Expect the response body to be a JSON array and return it."""
    if not isinstance(response.body, list):
        raise ExpectationError(
            "Response body is not a JSON array",
            expected="list",
            actual=type(response.body).__name__,
            response_data=response.body,
        )
    return response.body


def expect_object(response: ApiResponse) -> Dict[str, Any]:
    """Expect the response body to be a JSON object and return it."""
    if not isinstance(response.body, dict):
        raise ExpectationError(
            "Response body is not a JSON object",
            expected="object",
            actual=type(response.body).__name__,
            response_data=response.body,
        )
    return response.body


def expect_at_most(items: list, limit: int) -> None:
    """Expect a collection to hold no more than ``limit`` elements."""
    if len(items) > limit:
        raise ExpectationError(
            f"Expected at most {limit} items",
            expected=f"<= {limit}",
            actual=len(items),
        )


def expect_includes(values: Iterable[Any], required: Iterable[Any]) -> None:
    """Expect every required value to appear among ``values``, in any order."""
    values = list(values)
    missing = [value for value in required if value not in values]
    if missing:
        raise ExpectationError(
            f"Missing expected values: {missing}",
            expected=list(required),
            actual=values,
        )


def expect_field(body: Mapping[str, Any], field: str, expected: Any) -> None:
    """Expect a body field to equal a value."""
    if field not in body:
        raise ExpectationError(
            f"Response body has no '{field}' field",
            expected=expected,
            actual=None,
            response_data=dict(body),
        )
    if body[field] != expected:
        raise ExpectationError(
            f"Field '{field}' has unexpected value",
            expected=expected,
            actual=body[field],
            response_data=dict(body),
        )


def expect_payload_echo(body: Any, payload: Mapping[str, Any]) -> int:
    """Expect a created resource to echo its payload plus an ``id``.

    The body must hold exactly the payload's fields with unchanged values
    and types, plus one integer ``id``.

    Returns:
        The assigned id
    """
    if not isinstance(body, dict):
        raise ExpectationError(
            "Response body is not a JSON object",
            expected=dict(payload, id="<assigned>"),
            actual=body,
        )

    if body.get("id") is None:
        raise ExpectationError(
            "Created resource has no id",
            expected=dict(payload, id="<assigned>"),
            actual=body,
        )

    post_id = body["id"]
    if type(post_id) is not int:
        raise ExpectationError(
            "Created resource id is not an integer",
            expected="int",
            actual=post_id,
            response_data=dict(body),
        )

    expected = dict(payload, id=post_id)
    # True == 1 and 1.0 == 1, so types are compared too
    if body.keys() != expected.keys() or any(
        type(body[key]) is not type(value) or body[key] != value
        for key, value in expected.items()
    ):
        raise ExpectationError(
            "Created resource does not match the submitted payload",
            expected=expected,
            actual=body,
        )

    return post_id
