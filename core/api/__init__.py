# GitHub API integration module

from .github_api import GitHubAPIError, GitHubProfileNotFound, GitHubReposClient

__all__ = [
    "GitHubAPIError",
    "GitHubProfileNotFound",
    "GitHubReposClient",
]
