"""Session bootstrapping for the API under test.

Registers a freshly generated account and logs in with it to obtain the
bearer token used by the protected scenarios.
"""

import random
from typing import Optional

from .client import ApiResponse, PostsClient
from .exceptions import RequestFailedError, SetupError
from .models import Account, Session


class SessionBootstrapper:
    """Creates an account and an authenticated session for a suite run."""

    def __init__(self, client: PostsClient, rng: Optional[random.Random] = None) -> None:
        """Initialize the bootstrapper.

        Args:
            client: Client for the API under test
            rng: Random source for account generation
        """
        self.client = client
        self.rng = rng
        self.account: Optional[Account] = None

    def _check(self, step: str, response: ApiResponse, expected: int) -> None:
        if response.status_code != expected:
            detail = response.body if response.body is not None else response.text[:200]
            raise SetupError(
                f"{step} returned HTTP {response.status_code}, expected {expected}: {detail}",
                step=step,
                status_code=response.status_code,
            )

    def register(self, account: Account) -> None:
        """Register an account, expecting 201.

        Raises:
            SetupError: If registration fails
        """
        try:
            response = self.client.register(account)
        except RequestFailedError as e:
            raise SetupError(f"register request failed: {e.message}", step="register")

        self._check("register", response, 201)

    def login(self, account: Account) -> Session:
        """Log in with an account, expecting 200 and an ``accessToken``.

        Raises:
            SetupError: If login fails or no token is returned
        """
        try:
            response = self.client.login(account)
        except RequestFailedError as e:
            raise SetupError(f"login request failed: {e.message}", step="login")

        self._check("login", response, 200)

        body = response.body if isinstance(response.body, dict) else {}
        token = body.get("accessToken")
        if not token or not isinstance(token, str):
            raise SetupError(
                "login response has no accessToken",
                step="login",
                status_code=response.status_code,
            )

        user = body.get("user")
        return Session(access_token=token, user=user if isinstance(user, dict) else {})

    def bootstrap(self) -> Session:
        """Generate an account, register it and log in.

        Returns:
            Authenticated session

        Raises:
            SetupError: If any step fails
        """
        self.account = Account.generate(self.rng)
        self.register(self.account)
        return self.login(self.account)
