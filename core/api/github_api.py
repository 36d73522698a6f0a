"""GitHub REST client for the public repository listing of a user."""

from typing import Any

import httpx

from core.config import Settings, get_settings
from core.logging import github_logger as logger

USER_AGENT = "DevConnectorProfiles/1.0"


class GitHubAPIError(Exception):
    """GitHub could not be reached or returned an unreadable body."""


class GitHubProfileNotFound(GitHubAPIError):
    """GitHub answered with a non-200 status for the requested user."""

    def __init__(self, username: str, status_code: int):
        super().__init__(f"GitHub returned {status_code} for user {username!r}")
        self.username = username
        self.status_code = status_code


def _get_headers(token: str | None) -> dict[str, str]:
    headers = {
        "Accept": "application/vnd.github.v3+json",
        "User-Agent": USER_AGENT,
    }
    if token:
        headers["Authorization"] = f"token {token}"
    return headers


class GitHubReposClient:
    """
    Async client for `GET /users/{username}/repos`.

    Credentials and limits are read once from settings when the client is
    built. Pass `transport` to route requests elsewhere (tests use
    `httpx.MockTransport`).

    Example:
        async with GitHubReposClient.from_settings() as client:
            repos = await client.fetch_user_repos("octocat")
    """

    def __init__(
        self,
        base_url: str = "https://api.github.com",
        token: str | None = None,
        repo_count: int = 5,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.repo_count = repo_count
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=_get_headers(token),
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "GitHubReposClient":
        settings = settings or get_settings()
        if not settings.pat_token:
            logger.warning("no_token", message="PAT_TOKEN not set, using unauthenticated requests")
        return cls(
            base_url=settings.github_api_base,
            token=settings.pat_token,
            repo_count=settings.github_repo_count,
            timeout=settings.github_timeout,
            transport=transport,
        )

    async def fetch_user_repos(self, username: str) -> Any:
        """
        Fetch the user's most recently created repositories.

        Returns:
            The decoded JSON body, unchanged.

        Raises:
            GitHubProfileNotFound: GitHub answered with anything but 200.
            GitHubAPIError: Transport failure or undecodable body.
        """
        params = {
            "per_page": self.repo_count,
            "sort": "created",
            "direction": "desc",
        }
        try:
            response = await self._client.get(f"/users/{username}/repos", params=params)
        except httpx.HTTPError as e:
            logger.error("request_exception", error=str(e), username=username)
            raise GitHubAPIError(str(e)) from e

        if response.status_code != 200:
            logger.info("github_user_not_found", username=username, status=response.status_code)
            raise GitHubProfileNotFound(username, response.status_code)

        try:
            return response.json()
        except ValueError as e:
            logger.error("invalid_json_response", username=username, error=str(e))
            raise GitHubAPIError("GitHub returned an invalid JSON body") from e

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "GitHubReposClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


__all__ = [
    "GitHubAPIError",
    "GitHubProfileNotFound",
    "GitHubReposClient",
]
