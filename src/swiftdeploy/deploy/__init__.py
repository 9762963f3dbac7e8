"""Deployment orchestration module."""

from swiftdeploy.deploy.models import (
    Credentials,
    Deployment,
    DeploymentEvent,
    DeploymentPhase,
    DeploymentStatus,
    FileUpsertRequest,
)
from swiftdeploy.deploy.state import DeploymentState

__all__ = [
    "Credentials",
    "Deployment",
    "DeploymentEvent",
    "DeploymentPhase",
    "DeploymentStatus",
    "DeploymentState",
    "FileUpsertRequest",
]
