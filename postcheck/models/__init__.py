"""Pydantic models for accounts, sessions and posts."""

from .account import Account, Session
from .post import NewPost, Post, PostUpdate

__all__ = [
    "Account",
    "Session",
    "NewPost",
    "Post",
    "PostUpdate",
]
