"""Pydantic schemas for request/response validation."""

from .auth import GitHubProfile, Principal
from .task import TaskResponse

__all__ = [
    # Auth schemas
    "GitHubProfile",
    "Principal",
    # Task schemas
    "TaskResponse",
]
