"""Unit tests for auth.py module.

Tests the SessionBootstrapper: registration, login, token capture, and
the conversion of every setup problem into SetupError.
"""

import random
from unittest.mock import patch

import pytest
from requests.exceptions import ConnectionError

from postcheck.auth import SessionBootstrapper
from postcheck.exceptions import SetupError
from postcheck.models import Account


class TestSessionBootstrapper:
    """Test cases for SessionBootstrapper."""

    def test_bootstrap_registers_and_logs_in(self, client, fake_api):
        bootstrapper = SessionBootstrapper(client, rng=random.Random(5))
        session = bootstrapper.bootstrap()

        assert session.access_token
        assert session.user["email"] == bootstrapper.account.email
        assert session.user_id == 1
        assert session.claims()["email"] == bootstrapper.account.email

        paths = [(call["method"], call["url"]) for call in fake_api.calls]
        assert paths == [
            ("POST", "http://api.test:3000/register"),
            ("POST", "http://api.test:3000/login"),
        ]
        assert fake_api.calls[0]["json"] == fake_api.calls[1]["json"] == bootstrapper.account.credentials()

    def test_account_generated_from_rng(self, client):
        bootstrapper = SessionBootstrapper(client, rng=random.Random(5))
        bootstrapper.bootstrap()

        assert bootstrapper.account == Account.generate(random.Random(5))

    def test_register_failure(self, client, fake_api):
        fake_api.reject_register = True

        with pytest.raises(SetupError, match="register returned HTTP 500") as exc_info:
            SessionBootstrapper(client).bootstrap()

        assert exc_info.value.step == "register"
        assert exc_info.value.status_code == 500
        assert len(fake_api.calls) == 1

    def test_duplicate_registration(self, client):
        account = Account(email="test1234@example.com", password="123456")
        bootstrapper = SessionBootstrapper(client)
        bootstrapper.register(account)

        with pytest.raises(SetupError, match="Email already exists"):
            bootstrapper.register(account)

    def test_login_with_wrong_password(self, client):
        bootstrapper = SessionBootstrapper(client)
        bootstrapper.register(Account(email="test1234@example.com", password="123456"))

        with pytest.raises(SetupError) as exc_info:
            bootstrapper.login(Account(email="test1234@example.com", password="654321"))

        assert exc_info.value.step == "login"
        assert exc_info.value.status_code == 400

    def test_login_without_token(self, client, fake_api):
        fake_api.omit_token = True

        with pytest.raises(SetupError, match="no accessToken"):
            SessionBootstrapper(client).bootstrap()

    def test_network_error_during_register(self, client):
        with patch.object(client.session, "request", side_effect=ConnectionError("Connection refused")):
            with pytest.raises(SetupError, match="register request failed") as exc_info:
                SessionBootstrapper(client).bootstrap()

        assert exc_info.value.step == "register"
        assert exc_info.value.status_code is None
