"""
FastAPI dependency injection module.

Provides centralized dependencies for:
- Database sessions
- The authenticated user
- The GitHub client
"""

from fastapi import Request

from core.api.github_api import GitHubReposClient
from core.db import get_db

from ..auth.dependencies import get_current_user


def get_github_client(request: Request) -> GitHubReposClient:
    """GitHub client built once at startup (see main.create_app)."""
    return request.app.state.github_client


__all__ = [
    "get_current_user",
    "get_db",
    "get_github_client",
]
