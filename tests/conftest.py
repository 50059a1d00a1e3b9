"""Shared fixtures for postcheck tests.

FakeApiSession is a requests.Session that answers in-process the way a
json-server-auth instance seeded with 100 posts does. Flags on the fake
switch on specific misbehaviours so tests can check that the scenarios
catch them.
"""

import json as jsonlib
import random
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode, urlsplit

import jwt
import pytest
import requests
from requests.structures import CaseInsensitiveDict

from postcheck.client import PostsClient
from postcheck.config import Settings

BASE_URL = "http://api.test:3000"
TOKEN_SECRET = "fake-json-server-auth-signing-secret"


def make_response(
    method: str,
    url: str,
    status_code: int,
    body: Any = None,
    content_type: str = "application/json; charset=utf-8",
) -> requests.Response:
    """Build a requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response.headers = CaseInsensitiveDict({"Content-Type": content_type})
    if isinstance(body, (bytes, str)):
        response._content = body.encode() if isinstance(body, str) else body
    else:
        response._content = jsonlib.dumps(body if body is not None else {}).encode()
    prepared = requests.PreparedRequest()
    prepared.method = method
    prepared.url = url
    response.request = prepared
    return response


class FakeApiSession(requests.Session):
    """In-process stand-in for a json-server-auth server."""

    def __init__(self, seed_posts: int = 100) -> None:
        super().__init__()
        self.posts: Dict[int, Dict[str, Any]] = {
            i: {"userId": (i - 1) // 10 + 1, "id": i, "title": f"title {i}", "body": f"body {i}"}
            for i in range(1, seed_posts + 1)
        }
        self.users: Dict[str, Dict[str, Any]] = {}
        self.calls: List[Dict[str, Any]] = []

        self.reject_register = False
        self.omit_token = False
        self.ignore_limit = False
        self.allow_anonymous_writes = False
        self.add_field_on_create = False
        self.ignore_updates = False
        self.keep_deleted = False
        self.json_content_type = True

    # Request dispatch

    def request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        data: Any = None,
        headers: Optional[Dict[str, str]] = None,
        json: Any = None,
        timeout: Any = None,
        **kwargs: Any,
    ) -> requests.Response:
        headers = headers or {}
        self.calls.append(
            {"method": method, "url": url, "params": params, "headers": dict(headers), "json": json, "timeout": timeout}
        )

        full_url = url
        if params:
            full_url = f"{url}?{urlencode(params, doseq=True)}"

        path = urlsplit(url).path.rstrip("/")
        parts = [p for p in path.split("/") if p]

        status, body = self._dispatch(method, parts, params or {}, headers, json)
        content_type = "application/json; charset=utf-8" if self.json_content_type else "text/plain"
        return make_response(method, full_url, status, body, content_type)

    def _dispatch(self, method, parts, params, headers, body):
        if parts == ["register"] and method == "POST":
            return self._register(body)
        if parts == ["login"] and method == "POST":
            return self._login(body)

        if parts and parts[0] == "664":
            if method != "GET" and not self._authorized(headers) and not self.allow_anonymous_writes:
                return 401, "Missing authorization header"
            parts = parts[1:]

        if parts == ["posts"]:
            if method == "GET":
                return 200, self._list(params)
            if method == "POST":
                return self._create(body)
        if len(parts) == 2 and parts[0] == "posts":
            post_id = int(parts[1]) if parts[1].isdigit() else parts[1]
            if method == "GET":
                return (200, self.posts[post_id]) if post_id in self.posts else (404, {})
            if method == "PUT":
                return self._replace(post_id, body)
            if method == "DELETE":
                return self._delete(post_id)

        return 404, {}

    # Auth

    def _token(self, user: Dict[str, Any]) -> str:
        return jwt.encode({"email": user["email"], "sub": str(user["id"])}, TOKEN_SECRET, algorithm="HS256")

    def _register(self, body):
        if self.reject_register:
            return 500, {"error": "database unavailable"}
        email = body.get("email")
        if email in self.users:
            return 400, "Email already exists"
        user = {"email": email, "password": body.get("password"), "id": len(self.users) + 1}
        self.users[email] = user
        public = {"email": email, "id": user["id"]}
        return 201, {"accessToken": self._token(user), "user": public}

    def _login(self, body):
        user = self.users.get(body.get("email"))
        if user is None:
            return 400, "Cannot find user"
        if user["password"] != body.get("password"):
            return 400, "Incorrect password"
        public = {"email": user["email"], "id": user["id"]}
        if self.omit_token:
            return 200, {"user": public}
        return 200, {"accessToken": self._token(user), "user": public}

    def _authorized(self, headers) -> bool:
        value = headers.get("Authorization", "")
        if not value.startswith("Bearer "):
            return False
        try:
            jwt.decode(value[len("Bearer "):], TOKEN_SECRET, algorithms=["HS256"])
        except jwt.InvalidTokenError:
            return False
        return True

    # Posts

    def _list(self, params):
        posts = list(self.posts.values())
        ids = params.get("id")
        if ids is not None:
            wanted = {str(i) for i in (ids if isinstance(ids, (list, tuple)) else [ids])}
            posts = [p for p in posts if str(p["id"]) in wanted]
        limit = params.get("_limit")
        if limit is not None and not self.ignore_limit:
            posts = posts[: int(limit)]
        return posts

    def _create(self, body):
        post_id = max(self.posts, default=0) + 1
        post = dict(body, id=post_id)
        self.posts[post_id] = post
        echoed = dict(post)
        if self.add_field_on_create:
            echoed["createdAt"] = "2024-01-01T00:00:00Z"
        return 201, echoed

    def _replace(self, post_id, body):
        if post_id not in self.posts:
            return 404, {}
        if not self.ignore_updates:
            self.posts[post_id] = dict(body, id=post_id)
        return 200, self.posts[post_id]

    def _delete(self, post_id):
        if post_id not in self.posts:
            return 404, {}
        if not self.keep_deleted:
            del self.posts[post_id]
        return 200, {}


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep POSTCHECK_* variables from the developer's shell out of tests."""
    for name in (
        "POSTCHECK_BASE_URL",
        "POSTCHECK_TIMEOUT",
        "POSTCHECK_PROTECTED_PREFIX",
        "POSTCHECK_DEBUG",
        "POSTCHECK_OUTPUT_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings():
    """Settings pointing at the fake server."""
    return Settings(base_url=BASE_URL, timeout=5)


@pytest.fixture
def fake_api():
    """A fresh fake server."""
    return FakeApiSession()


@pytest.fixture
def client(settings, fake_api):
    """A client wired to the fake server."""
    return PostsClient(settings, session=fake_api)


@pytest.fixture
def rng():
    """Deterministic random source."""
    return random.Random(1234)
