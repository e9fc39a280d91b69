"""
GitHub access provider for managing repository collaborators.
"""

from typing import Protocol

import httpx
from loguru import logger

from ..models.responses import CollaboratorResult, HttpError, NoResponse, RequestSetupError
from ..utils.exceptions import ProviderException

GITHUB_ACCEPT = "application/vnd.github.v3+json"


class AccessProvider(Protocol):
    """Manages collaborator membership on hosted repositories."""

    async def add_collaborator(self, owner: str, repo: str, username: str) -> CollaboratorResult:
        """Ensure ``username`` is a collaborator on ``owner/repo``."""
        ...

    async def close(self) -> None:
        """Release any held resources."""
        ...


class GitHubAccessProvider:
    """Access provider backed by the GitHub REST API."""

    def __init__(
        self,
        token: str,
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the GitHub access provider.

        Args:
            token: Token with admin rights on the target repositories
            api_url: GitHub API base URL
            timeout: Request timeout in seconds
            http_client: Preconfigured client, mainly for tests
        """
        self.api_url = api_url.rstrip("/")
        self._token = token
        self._client = http_client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def add_collaborator(self, owner: str, repo: str, username: str) -> CollaboratorResult:
        """
        Add a collaborator to a repository.

        GitHub answers 201 when an invitation is created and 204 when the user
        already has access, so repeating the call is harmless.

        Args:
            owner: Repository owner or organisation
            repo: Repository name
            username: GitHub username to add

        Returns:
            Collaborator result with the provider status.

        Raises:
            ProviderException: Carrying an HttpError, NoResponse or RequestSetupError
        """
        url = f"{self.api_url}/repos/{owner}/{repo}/collaborators/{username}"
        headers = {"Authorization": f"Bearer {self._token}", "Accept": GITHUB_ACCEPT}

        logger.debug("Adding collaborator", owner=owner, repo=repo, username=username)

        try:
            response = await self._client.put(url, json={}, headers=headers)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol, httpx.LocalProtocolError) as e:
            raise ProviderException(RequestSetupError(message=str(e) or e.__class__.__name__)) from e
        except httpx.TransportError as e:
            raise ProviderException(NoResponse(message=str(e) or e.__class__.__name__)) from e
        except (TypeError, ValueError) as e:
            raise ProviderException(RequestSetupError(message=str(e))) from e

        if not response.is_success:
            raise ProviderException(HttpError(status=response.status_code, body=_response_body(response)))

        return CollaboratorResult(
            owner=owner,
            repo=repo,
            username=username,
            status_code=response.status_code,
            invited=response.status_code == 201,
        )


def _response_body(response: httpx.Response):
    try:
        return response.json()
    except ValueError:
        return response.text
