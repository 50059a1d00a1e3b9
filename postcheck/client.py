"""HTTP client for the API under test.

This module wraps a requests session with the endpoints exercised by the
contract scenarios. Unlike a typical API client it never converts error
statuses into exceptions: 401 and 404 are expected outcomes that the
scenarios assert on. Only network failures raise.
"""

from typing import Any, Dict, List, Optional, Union

import requests
from requests.adapters import HTTPAdapter
from rich.console import Console
from urllib3.util.retry import Retry

from .config import Settings
from .exceptions import RequestFailedError
from .models import Account, NewPost, PostUpdate, Session

PostId = Union[int, str]


class ApiResponse:
    """Status, headers and decoded body of a single response."""

    def __init__(self, response: requests.Response) -> None:
        self.status_code = response.status_code
        self.headers = response.headers
        self.text = response.text
        self.method = response.request.method if response.request is not None else None
        self.url = response.url
        try:
            self.body: Any = response.json()
        except ValueError:
            self.body = None

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "")

    def __repr__(self) -> str:
        return f"<ApiResponse {self.method} {self.url} [{self.status_code}]>"


class PostsClient:
    """Client for the auth and posts endpoints of a json-server-auth API."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
        console: Optional[Console] = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Target settings. Defaults are used if None.
            session: Requests session to use. A new one is created if None.
            console: Console for debug output
        """
        self.settings = settings or Settings()
        self.url = self.settings.url
        self.timeout = self.settings.timeout
        self.debug = self.settings.debug
        self.console = console or Console(stderr=True)

        self.session = session or requests.Session()
        self._configure_session()

    def _configure_session(self) -> None:
        """Mount adapters that never retry.

        A failed request fails its scenario; it is not replayed.
        """
        adapter = HTTPAdapter(max_retries=Retry(total=0, connect=0, read=0, redirect=0, status=0))
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
        self.session.headers.update({"Accept": "application/json"})

    def _log(self, message: str) -> None:
        if self.debug:
            self.console.print(f"[DEBUG] {message}", markup=False, style="dim")

    def request(
        self,
        method: str,
        endpoint: str,
        auth: Optional[Session] = None,
        **kwargs: Any,
    ) -> ApiResponse:
        """Make a request and return the response whatever its status.

        Args:
            method: HTTP method
            endpoint: Path relative to the base URL
            auth: Session whose bearer token is sent, if any
            **kwargs: Additional arguments passed to requests

        Returns:
            Wrapped response

        Raises:
            RequestFailedError: If the request could not complete
        """
        url = f"{self.url}{endpoint}"
        headers = dict(kwargs.pop("headers", {}) or {})
        if auth is not None:
            headers.update(auth.auth_headers())

        self._log(f"{method} {url}")
        if kwargs.get("params"):
            self._log(f"Params: {kwargs['params']}")
        if kwargs.get("json") is not None:
            self._log(f"Body: {kwargs['json']}")

        try:
            response = self.session.request(
                method=method,
                url=url,
                headers=headers,
                timeout=kwargs.pop("timeout", self.timeout),
                **kwargs,
            )
        except requests.exceptions.Timeout as e:
            raise RequestFailedError(f"Request timed out: {e}", method=method, url=url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise RequestFailedError(str(e), method=method, url=url)

        result = ApiResponse(response)
        self._log(f"Response status: {result.status_code}")
        return result

    # Auth endpoints
    def register(self, account: Account) -> ApiResponse:
        """Register an account."""
        return self.request("POST", "/register", json=account.credentials())

    def login(self, account: Account) -> ApiResponse:
        """Log in with an account's credentials."""
        return self.request("POST", "/login", json=account.credentials())

    # Posts endpoints
    def list_posts(
        self,
        limit: Optional[int] = None,
        ids: Optional[List[PostId]] = None,
    ) -> ApiResponse:
        """List posts.

        Args:
            limit: Maximum number of posts (``_limit``)
            ids: Only return posts with these ids (repeated ``id`` params)

        Returns:
            Wrapped response
        """
        params: Dict[str, Any] = {}
        if limit is not None:
            params["_limit"] = limit
        if ids:
            params["id"] = list(ids)

        return self.request("GET", "/posts", params=params or None)

    def get_post(self, post_id: PostId) -> ApiResponse:
        """Get a post by id."""
        return self.request("GET", f"/posts/{post_id}")

    def create_post(
        self,
        post: NewPost,
        protected: bool = False,
        auth: Optional[Session] = None,
    ) -> ApiResponse:
        """Create a post.

        Args:
            post: Post payload
            protected: Whether to use the route behind the protected prefix
            auth: Session whose bearer token is sent, if any

        Returns:
            Wrapped response
        """
        endpoint = "/posts"
        if protected:
            endpoint = f"/{self.settings.protected_prefix}/posts"

        return self.request("POST", endpoint, auth=auth, json=post.payload())

    def update_post(self, post_id: PostId, update: PostUpdate) -> ApiResponse:
        """Update a post with ``PUT``."""
        return self.request("PUT", f"/posts/{post_id}", json=update.payload())

    def delete_post(self, post_id: PostId) -> ApiResponse:
        """Delete a post."""
        return self.request("DELETE", f"/posts/{post_id}")

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "PostsClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
