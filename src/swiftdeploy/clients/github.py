"""GitHub API client using httpx."""

from typing import Any

import httpx

from swiftdeploy.config import GitHubConfig
from swiftdeploy.core.exceptions import (
    AuthenticationError,
    GitHubError,
    UnexpectedResponseError,
)
from swiftdeploy.core.logging import StructuredLogger
from swiftdeploy.deploy.manifest import GITHUB_API_URL
from swiftdeploy.deploy.models import FileUpsertRequest

logger = StructuredLogger(__name__)


class GitHubClient:
    """Async client for the GitHub REST API."""

    def __init__(
        self,
        config: GitHubConfig,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._config = config
        self._token = token
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            token = self._token or self._config.get_token()

            if not token:
                raise AuthenticationError("GitHub token not configured")

            headers = {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }

            self._client = httpx.AsyncClient(
                base_url=GITHUB_API_URL,
                headers=headers,
                timeout=self._config.timeout,
                follow_redirects=True,
                transport=self._transport,
            )

            logger.debug("Created GitHub client", base_url=GITHUB_API_URL)

        return self._client

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request and return the raw response."""
        try:
            return await self.client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            raise GitHubError(f"Request failed: {e}")

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return

        try:
            message = response.json().get("message", response.reason_phrase)
        except (ValueError, AttributeError):
            message = response.text or response.reason_phrase

        raise GitHubError(message, status_code=response.status_code)

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    # Contents operations
    async def get_file_sha(self, owner: str, repo: str, path: str) -> str | None:
        """Get the blob SHA of a file, or None if the file does not exist."""
        response = await self._send("GET", f"/repos/{owner}/{repo}/contents/{path}")

        if response.status_code == 404:
            logger.debug("File not found", repo=f"{owner}/{repo}", path=path)
            return None

        self._raise_for_status(response)

        try:
            data = response.json()
        except ValueError:
            raise UnexpectedResponseError(f"Response for {path} is not JSON", step=path)

        if not isinstance(data, dict):
            raise UnexpectedResponseError(f"{path} is not a file", step=path)

        sha = data.get("sha")
        if isinstance(sha, str) and sha:
            return sha
        return None

    async def put_file(
        self,
        owner: str,
        repo: str,
        request: FileUpsertRequest,
    ) -> dict[str, Any]:
        """Create or update a file.

        Returns:
            The decoded response body, or an empty dict if it is not a JSON object
        """
        response = await self._send(
            "PUT",
            f"/repos/{owner}/{repo}/contents/{request.path}",
            json=request.to_payload(),
        )
        self._raise_for_status(response)

        # Any 2xx is a successful write, whatever the body holds
        try:
            result = response.json()
        except ValueError:
            logger.debug("Upload answered without JSON", path=request.path, status=response.status_code)
            return {}
        return result if isinstance(result, dict) else {}

    # Actions operations
    async def trigger_workflow(
        self,
        owner: str,
        repo: str,
        workflow_id: int | str,
        ref: str = "main",
        inputs: dict[str, Any] | None = None,
    ) -> int:
        """Trigger a workflow dispatch event.

        Returns:
            HTTP status code of the dispatch call; GitHub answers 204 on success
        """
        payload: dict[str, Any] = {"ref": ref}
        if inputs:
            payload["inputs"] = inputs

        response = await self._send(
            "POST",
            f"/repos/{owner}/{repo}/actions/workflows/{workflow_id}/dispatches",
            json=payload,
        )
        logger.debug("Workflow dispatch answered", workflow=workflow_id, status=response.status_code)
        return response.status_code
