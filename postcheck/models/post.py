"""Post models for the posts resource."""

import random
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class NewPost(BaseModel):
    """Client-side payload for creating a post."""

    title: str
    body: str
    userId: int = Field(..., ge=1)

    @classmethod
    def generate(cls, rng: Optional[random.Random] = None) -> "NewPost":
        """Generate a random post payload.

        Title and body get 4-digit suffixes, userId is drawn from 1 to 10.
        """
        rng = rng or random
        return cls(
            title=f"New Post Title {rng.randint(1000, 9999)}",
            body=f"New Post Body {rng.randint(1000, 9999)}",
            userId=rng.randint(1, 10),
        )

    def payload(self) -> Dict[str, Any]:
        """JSON body sent to the server."""
        return self.model_dump()


class Post(NewPost):
    """A post as stored by the server."""

    id: int

    model_config = {"extra": "allow"}


class PostUpdate(BaseModel):
    """Partial update for a post."""

    title: Optional[str] = None
    body: Optional[str] = None
    userId: Optional[int] = None

    def payload(self) -> Dict[str, Any]:
        """JSON body with only the fields being changed."""
        return self.model_dump(exclude_none=True)
