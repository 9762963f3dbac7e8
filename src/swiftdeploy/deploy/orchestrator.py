"""Upload sources to GitHub and dispatch the build workflow."""

from collections.abc import Callable

from swiftdeploy.clients.github import GitHubClient
from swiftdeploy.config import GitHubConfig
from swiftdeploy.core.exceptions import (
    DeploymentError,
    DeploymentInProgressError,
    GitHubError,
    MissingCredentialsError,
    SwiftDeployError,
)
from swiftdeploy.core.logging import StructuredLogger
from swiftdeploy.deploy.manifest import (
    MANIFEST_PATH,
    SOURCE_PATH,
    WORKFLOW_FILE,
    WORKFLOW_REF,
    commit_message,
    render_manifest,
)
from swiftdeploy.deploy.models import (
    Credentials,
    Deployment,
    DeploymentStatus,
    FileUpsertRequest,
)
from swiftdeploy.deploy.state import DeploymentState

logger = StructuredLogger(__name__)

StatusCallback = Callable[[DeploymentStatus], None]

TRIGGER_FAILED = "failed to trigger automation"


class DeploymentOrchestrator:
    """Runs one deployment at a time against a single repository.

    A deployment upserts ``Package.swift``, then ``main.swift``, then
    dispatches the build workflow. Every step must finish before the next one
    starts and the first failure ends the attempt. Files already uploaded are
    left in place.

    Progress is exposed through :attr:`status` and :attr:`busy`, and pushed to
    callbacks registered with :meth:`subscribe`.
    """

    def __init__(
        self,
        credentials: Credentials,
        client: GitHubClient | None = None,
        state: DeploymentState | None = None,
        timeout: int = 30,
    ):
        """Initialize the orchestrator.

        Args:
            credentials: Repository owner, name and access token
            client: GitHub client to use; one is created per deployment if omitted
            state: Where to record finished deployments, if anywhere
            timeout: Request timeout for clients created by the orchestrator
        """
        self._credentials = credentials
        self._client = client
        self._state = state
        self._timeout = timeout

        self._status = DeploymentStatus.idle()
        self._busy = False
        self._subscribers: list[StatusCallback] = []
        self._deployment: Deployment | None = None

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @credentials.setter
    def credentials(self, credentials: Credentials) -> None:
        if self._busy:
            raise DeploymentInProgressError("Cannot change credentials during a deployment")
        self._credentials = credentials

    @property
    def status(self) -> DeploymentStatus:
        """Current status."""
        return self._status

    @property
    def message(self) -> str:
        """Current status as a single line of text."""
        return self._status.message

    @property
    def busy(self) -> bool:
        """True while a deployment is in flight."""
        return self._busy

    @property
    def last_deployment(self) -> Deployment | None:
        """Record of the most recent attempt that reached the network.

        Attempts rejected for missing credentials leave it as None.
        """
        return self._deployment

    def subscribe(self, callback: StatusCallback) -> Callable[[], None]:
        """Register a callback for status changes.

        Returns:
            A function that removes the callback again
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _set_status(self, status: DeploymentStatus) -> None:
        self._status = status
        if self._deployment is not None:
            self._deployment.record(status)

        logger.debug("Deployment status changed", phase=status.phase.value, status=status.message)

        for callback in list(self._subscribers):
            try:
                callback(status)
            except Exception:
                logger.exception("Status subscriber failed", callback=repr(callback))

    async def deploy(self, content: str) -> DeploymentStatus:
        """Upload ``content`` as the main source file and start a build.

        Returns:
            The terminal status of the attempt

        Raises:
            DeploymentInProgressError: If a deployment is already running
        """
        if self._busy:
            raise DeploymentInProgressError(
                "A deployment is already in progress",
                details={"status": self._status.message},
            )

        credentials = self._credentials

        if not credentials.is_complete:
            self._deployment = None
            self._set_status(DeploymentStatus.failed(MissingCredentialsError().message))
            return self._status

        self._deployment = Deployment(
            owner=credentials.owner,
            repository=credentials.repository,
            source_path=SOURCE_PATH,
        )

        log = logger.bind(repo=credentials.full_name, id=self._deployment.id)
        log.info("Starting deployment")

        self._busy = True
        client = self._client or GitHubClient(
            GitHubConfig(timeout=self._timeout),
            token=credentials.access_token,
        )
        final = DeploymentStatus.failed("deployment interrupted")

        try:
            final = await self._run(client, credentials, content)
        except Exception as e:
            log.exception("Deployment aborted by unexpected error")
            final = DeploymentStatus.failed(f"unexpected error: {e}")
        finally:
            if self._client is None:
                await client.aclose()
            self._busy = False
            self._set_status(final)
            self._save()

            if final.reason:
                log.warning("Deployment failed", reason=final.reason)
            else:
                log.info("Deployment finished")

        return final

    async def _run(
        self,
        client: GitHubClient,
        credentials: Credentials,
        content: str,
    ) -> DeploymentStatus:
        try:
            await self._upsert(client, credentials, MANIFEST_PATH, render_manifest().encode("utf-8"))
            await self._upsert(client, credentials, SOURCE_PATH, content.encode("utf-8"))
        except SwiftDeployError as e:
            return DeploymentStatus.failed(e.message)

        self._set_status(DeploymentStatus.triggering_workflow())

        try:
            status_code = await client.trigger_workflow(
                credentials.owner,
                credentials.repository,
                WORKFLOW_FILE,
                ref=WORKFLOW_REF,
            )
        except GitHubError as e:
            logger.debug("Workflow dispatch failed", error=e.message)
            return DeploymentStatus.failed(TRIGGER_FAILED)

        if status_code != 204:
            logger.debug("Unexpected dispatch response", status=status_code)
            return DeploymentStatus.failed(TRIGGER_FAILED)

        return DeploymentStatus.succeeded()

    async def _upsert(
        self,
        client: GitHubClient,
        credentials: Credentials,
        path: str,
        content: bytes,
    ) -> None:
        """Fetch the current SHA of ``path`` and overwrite it with ``content``."""
        self._set_status(DeploymentStatus.fetching_hash(path))

        try:
            sha = await client.get_file_sha(credentials.owner, credentials.repository, path)
        except GitHubError as e:
            raise DeploymentError(f"failed to read {path}: {e.message}", step=path)

        self._set_status(DeploymentStatus.uploading(path))

        request = FileUpsertRequest(
            path=path,
            content=content,
            prior_content_hash=sha,
            message=commit_message(path),
        )

        try:
            await client.put_file(credentials.owner, credentials.repository, request)
        except GitHubError as e:
            raise DeploymentError(f"failed to upload {path}: {e.message}", step=path)

    def _save(self) -> None:
        if self._state is None or self._deployment is None:
            return
        try:
            self._state.save(self._deployment)
        except DeploymentError as e:
            logger.warning("Could not record deployment", error=e.message)
