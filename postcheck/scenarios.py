"""Contract scenarios for the posts resource.

Each scenario is a plain function taking a ScenarioContext. It issues its
requests in order and raises ExpectationError on the first unmet
expectation. Scenarios do not share posts; the only shared state is the
read-only session produced during setup.
"""

import random
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .client import PostsClient
from .exceptions import ConfigError, SetupError
from .models import NewPost, PostUpdate, Session
from .utils.expect import (
    expect_at_most,
    expect_field,
    expect_header_contains,
    expect_includes,
    expect_list,
    expect_object,
    expect_payload_echo,
    expect_status,
)

PAGE_LIMIT = 10
FILTER_IDS = (55, 60)
NON_EXISTING_POST_ID = 9999999999
INVALID_POST_ID = "NON_EXISTING_ID"
UPDATED_TITLE = "Updated Title"


@dataclass
class ScenarioContext:
    """What a scenario needs to run."""

    client: PostsClient
    session: Optional[Session] = None
    rng: Optional[random.Random] = None

    def new_post(self) -> NewPost:
        return NewPost.generate(self.rng)

    def require_session(self) -> Session:
        if self.session is None:
            raise SetupError("Scenario requires an authenticated session", step="login")
        return self.session


@dataclass(frozen=True)
class Scenario:
    """A numbered, independently reported contract check."""

    number: int
    title: str
    run: Callable[[ScenarioContext], None] = field(compare=False)
    requires_session: bool = False

    @property
    def name(self) -> str:
        return self.run.__name__


_REGISTRY: Dict[int, Scenario] = {}


def scenario(number: int, title: str, requires_session: bool = False):
    """Register a function as a numbered scenario."""
    def decorator(func: Callable[[ScenarioContext], None]) -> Callable[[ScenarioContext], None]:
        if number in _REGISTRY:
            raise ValueError(f"Scenario {number} is already registered")
        _REGISTRY[number] = Scenario(number, title, func, requires_session)
        return func
    return decorator


def all_scenarios() -> List[Scenario]:
    """All registered scenarios in run order."""
    return [_REGISTRY[number] for number in sorted(_REGISTRY)]


def select_scenarios(numbers: Optional[List[int]] = None) -> List[Scenario]:
    """Select scenarios by number, keeping run order.

    Raises:
        ConfigError: If a number does not name a scenario
    """
    if not numbers:
        return all_scenarios()

    unknown = sorted(set(numbers) - set(_REGISTRY))
    if unknown:
        raise ConfigError(f"Unknown scenario number(s): {', '.join(str(n) for n in unknown)}")

    wanted = set(numbers)
    return [s for s in all_scenarios() if s.number in wanted]


def _create_post(ctx: ScenarioContext) -> int:
    """Create a fresh post on the unprotected route and return its id."""
    new_post = ctx.new_post()
    response = ctx.client.create_post(new_post)
    expect_status(response, 201)
    return expect_payload_echo(response.body, new_post.payload())


# Read scenarios

@scenario(1, "Get all posts: status code and content type")
def list_all_posts(ctx: ScenarioContext) -> None:
    response = ctx.client.list_posts()
    expect_status(response, 200)
    expect_header_contains(response, "content-type", "application/json")


@scenario(2, "Get only the first 10 posts")
def list_first_page(ctx: ScenarioContext) -> None:
    response = ctx.client.list_posts(limit=PAGE_LIMIT)
    expect_status(response, 200)
    expect_at_most(expect_list(response), PAGE_LIMIT)


@scenario(3, "Get posts with id 55 and id 60")
def filter_posts_by_id(ctx: ScenarioContext) -> None:
    response = ctx.client.list_posts(ids=list(FILTER_IDS))
    expect_status(response, 200)
    posts = expect_list(response)
    expect_includes([post.get("id") for post in posts if isinstance(post, dict)], FILTER_IDS)


# Authorization boundary

@scenario(4, "Create a post on the protected route without a token")
def create_protected_without_token(ctx: ScenarioContext) -> None:
    response = ctx.client.create_post(ctx.new_post(), protected=True)
    expect_status(response, 401)


@scenario(5, "Create a post on the protected route with a bearer token", requires_session=True)
def create_protected_with_token(ctx: ScenarioContext) -> None:
    session = ctx.require_session()
    new_post = ctx.new_post()
    response = ctx.client.create_post(new_post, protected=True, auth=session)
    expect_status(response, 201)
    expect_payload_echo(response.body, new_post.payload())


# Unprotected CRUD lifecycle

@scenario(6, "Create a post and verify the entity is created")
def create_post(ctx: ScenarioContext) -> None:
    _create_post(ctx)


@scenario(7, "Update a non-existing post")
def update_missing_post(ctx: ScenarioContext) -> None:
    response = ctx.client.update_post(NON_EXISTING_POST_ID, PostUpdate(title=UPDATED_TITLE))
    expect_status(response, 404)


@scenario(8, "Create a post, update it, and verify the update")
def create_and_update_post(ctx: ScenarioContext) -> None:
    post_id = _create_post(ctx)

    response = ctx.client.update_post(post_id, PostUpdate(title=UPDATED_TITLE))
    expect_status(response, 200)

    response = ctx.client.get_post(post_id)
    expect_status(response, 200)
    expect_field(expect_object(response), "title", UPDATED_TITLE)


@scenario(9, "Delete a non-existing post")
def delete_missing_post(ctx: ScenarioContext) -> None:
    response = ctx.client.delete_post(INVALID_POST_ID)
    expect_status(response, 404)


@scenario(10, "Create, update and delete a post, then verify it is gone")
def post_lifecycle(ctx: ScenarioContext) -> None:
    post_id = _create_post(ctx)

    response = ctx.client.update_post(post_id, PostUpdate(title=UPDATED_TITLE))
    expect_status(response, 200)

    response = ctx.client.delete_post(post_id)
    expect_status(response, 200)

    response = ctx.client.get_post(post_id)
    expect_status(response, 404)
