"""Deployment history persistence."""

import json
from pathlib import Path

from swiftdeploy.core.exceptions import DeploymentError
from swiftdeploy.core.logging import StructuredLogger
from swiftdeploy.deploy.models import Deployment, DeploymentPhase

logger = StructuredLogger(__name__)


class DeploymentState:
    """Store finished deployments as one JSON file each."""

    def __init__(self, state_dir: str | Path | None = None):
        """Initialize deployment state manager.

        Args:
            state_dir: Directory to store deployment records
        """
        if state_dir:
            self._state_dir = Path(state_dir)
        else:
            self._state_dir = Path.home() / ".swiftdeploy" / "deployments"

    @property
    def state_dir(self) -> Path:
        return self._state_dir

    def save(self, deployment: Deployment) -> None:
        """Save a deployment record.

        Args:
            deployment: Deployment to save
        """
        state_file = self._state_dir / f"{deployment.id}.json"

        try:
            self._state_dir.mkdir(parents=True, exist_ok=True)
            with open(state_file, "w") as f:
                json.dump(deployment.to_dict(), f, indent=2)
        except OSError as e:
            raise DeploymentError(
                f"Failed to save deployment state: {e}",
                details={"deployment_id": deployment.id},
            )

        logger.debug("Saved deployment state", id=deployment.id)

    def load(self, deployment_id: str) -> Deployment:
        """Load a deployment record.

        Args:
            deployment_id: Deployment ID

        Returns:
            Loaded Deployment
        """
        state_file = self._state_dir / f"{deployment_id}.json"

        if not state_file.exists():
            raise DeploymentError(
                f"Deployment not found: {deployment_id}",
                details={"deployment_id": deployment_id},
            )

        try:
            with open(state_file) as f:
                data = json.load(f)
            return Deployment.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            raise DeploymentError(
                f"Failed to load deployment state: {e}",
                details={"deployment_id": deployment_id},
            )

    def list(
        self,
        phase: DeploymentPhase | None = None,
        limit: int = 50,
    ) -> list[Deployment]:
        """List deployments, newest first.

        Args:
            phase: Only return deployments that ended in this phase
            limit: Maximum deployments to return

        Returns:
            List of Deployments
        """
        deployments: list[Deployment] = []

        if not self._state_dir.exists():
            return deployments

        for state_file in self._state_dir.glob("*.json"):
            try:
                with open(state_file) as f:
                    deployment = Deployment.from_dict(json.load(f))
            except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
                logger.warning("Skipping unreadable deployment record", file=state_file.name, error=e)
                continue

            if phase and deployment.status.phase != phase:
                continue

            deployments.append(deployment)

        deployments.sort(key=lambda d: d.created_at, reverse=True)

        return deployments[:limit]
