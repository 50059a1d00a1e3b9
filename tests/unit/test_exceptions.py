"""Unit tests for the exception hierarchy and user-facing formatting."""

import pytest

from postcheck.exceptions import (
    ConfigError,
    ExpectationError,
    PostCheckError,
    RequestFailedError,
    SetupError,
    ValidationError,
    format_error_for_user,
)


@pytest.mark.parametrize("exc_class", [ConfigError, SetupError, ExpectationError, RequestFailedError, ValidationError])
def test_hierarchy(exc_class):
    assert issubclass(exc_class, PostCheckError)


def test_base_error_details():
    error = PostCheckError("boom", details={"step": "x"})
    assert error.message == "boom"
    assert error.details == {"step": "x"}
    assert str(error) == "boom"


class TestFormatErrorForUser:

    def test_expectation_shows_expected_and_actual(self):
        error = ExpectationError("Wrong status", expected=404, actual=200, response_data={"id": 1})
        message = format_error_for_user(error)

        assert "Wrong status" in message
        assert "expected: 404" in message
        assert "actual:   200" in message
        assert "response" not in message

    def test_expectation_debug_includes_response(self):
        error = ExpectationError("Wrong status", expected=404, actual=200, response_data={"id": 1})
        assert "response: {'id': 1}" in format_error_for_user(error, debug=True)

    def test_setup_error(self):
        message = format_error_for_user(SetupError("no token", step="login", status_code=200))
        assert message == "Setup failed: no token\nStep: login\nStatus code: 200"

    def test_request_failed(self):
        error = RequestFailedError("timed out", method="GET", url="http://api.test:3000/posts", timeout=5)
        message = format_error_for_user(error)

        assert "Request: GET http://api.test:3000/posts" in message
        assert "Timeout: 5s" in message

    def test_config_error(self):
        assert format_error_for_user(ConfigError("bad url")) == "Configuration error: bad url"

    def test_generic_error(self):
        assert format_error_for_user(RuntimeError("x")) == "Error: x"
        assert format_error_for_user(RuntimeError("x"), debug=True) == "Error: x\nType: RuntimeError"
