"""Deployment data models."""

import base64
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Credentials:
    """Repository coordinates and access token for one deployment."""

    owner: str
    repository: str
    access_token: str = field(repr=False)

    @property
    def is_complete(self) -> bool:
        """All three fields are present and non-blank."""
        return all(
            value and value.strip()
            for value in (self.owner, self.repository, self.access_token)
        )

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repository}"


@dataclass
class FileUpsertRequest:
    """Create-or-update request for a single repository file."""

    path: str
    content: bytes
    prior_content_hash: str | None = None
    message: str = ""

    def to_payload(self) -> dict[str, Any]:
        """Build the JSON body for the contents API.

        The ``sha`` key is only sent when overwriting an existing file.
        """
        payload: dict[str, Any] = {
            "message": self.message or f"Update {self.path}",
            "content": base64.b64encode(self.content).decode("ascii"),
        }
        if self.prior_content_hash:
            payload["sha"] = self.prior_content_hash
        return payload


class DeploymentPhase(str, Enum):
    """Deployment phases."""

    IDLE = "idle"
    FETCHING_HASH = "fetching_hash"
    UPLOADING = "uploading"
    TRIGGERING_WORKFLOW = "triggering_workflow"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TERMINAL_PHASES = (DeploymentPhase.SUCCEEDED, DeploymentPhase.FAILED)


@dataclass(frozen=True)
class DeploymentStatus:
    """The single active status of an orchestrator."""

    phase: DeploymentPhase = DeploymentPhase.IDLE
    path: str | None = None
    reason: str | None = None

    @classmethod
    def idle(cls) -> "DeploymentStatus":
        return cls(DeploymentPhase.IDLE)

    @classmethod
    def fetching_hash(cls, path: str) -> "DeploymentStatus":
        return cls(DeploymentPhase.FETCHING_HASH, path=path)

    @classmethod
    def uploading(cls, path: str) -> "DeploymentStatus":
        return cls(DeploymentPhase.UPLOADING, path=path)

    @classmethod
    def triggering_workflow(cls) -> "DeploymentStatus":
        return cls(DeploymentPhase.TRIGGERING_WORKFLOW)

    @classmethod
    def succeeded(cls) -> "DeploymentStatus":
        return cls(DeploymentPhase.SUCCEEDED)

    @classmethod
    def failed(cls, reason: str) -> "DeploymentStatus":
        return cls(DeploymentPhase.FAILED, reason=reason)

    @property
    def is_terminal(self) -> bool:
        return self.phase in TERMINAL_PHASES

    @property
    def message(self) -> str:
        """Human-readable status line."""
        if self.phase == DeploymentPhase.IDLE:
            return "Idle"
        if self.phase == DeploymentPhase.FETCHING_HASH:
            return f"Checking {self.path}..."
        if self.phase == DeploymentPhase.UPLOADING:
            return f"Uploading {self.path}..."
        if self.phase == DeploymentPhase.TRIGGERING_WORKFLOW:
            return "Triggering build workflow..."
        if self.phase == DeploymentPhase.SUCCEEDED:
            return "Success! Build started on GitHub Actions"
        return f"Error: {self.reason}"

    def __str__(self) -> str:
        return self.message


@dataclass
class DeploymentEvent:
    """Status transition recorded for the audit trail."""

    timestamp: datetime
    phase: DeploymentPhase
    message: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "phase": self.phase.value,
            "message": self.message,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeploymentEvent":
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            phase=DeploymentPhase(data["phase"]),
            message=data.get("message", ""),
        )


@dataclass
class Deployment:
    """Record of a single deployment attempt."""

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    owner: str = ""
    repository: str = ""
    source_path: str = ""

    status: DeploymentStatus = field(default_factory=DeploymentStatus.idle)

    created_at: datetime = field(default_factory=_utcnow)
    completed_at: datetime | None = None

    events: list[DeploymentEvent] = field(default_factory=list)

    def record(self, status: DeploymentStatus) -> None:
        """Apply a status transition and append it to the event history."""
        self.status = status
        self.events.append(
            DeploymentEvent(timestamp=_utcnow(), phase=status.phase, message=status.message)
        )
        if status.is_terminal:
            self.completed_at = _utcnow()

    @property
    def duration_seconds(self) -> float | None:
        """Get deployment duration in seconds."""
        end = self.completed_at or _utcnow()
        return (end - self.created_at).total_seconds()

    @property
    def is_complete(self) -> bool:
        return self.status.is_terminal

    @property
    def succeeded(self) -> bool:
        return self.status.phase == DeploymentPhase.SUCCEEDED

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "owner": self.owner,
            "repository": self.repository,
            "source_path": self.source_path,
            "phase": self.status.phase.value,
            "path": self.status.path,
            "reason": self.status.reason,
            "message": self.status.message,
            "created_at": self.created_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
            "events": [e.to_dict() for e in self.events],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Deployment":
        """Create from dictionary."""
        deployment = cls(
            id=data.get("id", str(uuid.uuid4())[:8]),
            owner=data.get("owner", ""),
            repository=data.get("repository", ""),
            source_path=data.get("source_path", ""),
            status=DeploymentStatus(
                phase=DeploymentPhase(data.get("phase", "idle")),
                path=data.get("path"),
                reason=data.get("reason"),
            ),
            events=[DeploymentEvent.from_dict(e) for e in data.get("events", [])],
        )

        if data.get("created_at"):
            deployment.created_at = datetime.fromisoformat(data["created_at"])
        if data.get("completed_at"):
            deployment.completed_at = datetime.fromisoformat(data["completed_at"])

        return deployment
