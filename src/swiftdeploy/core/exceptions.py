"""Custom exceptions for swiftdeploy."""

from typing import Any


class SwiftDeployError(Exception):
    """Base exception for all swiftdeploy errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ConfigError(SwiftDeployError):
    """Configuration-related errors."""

    pass


class AuthenticationError(SwiftDeployError):
    """Authentication/authorization errors."""

    pass


class GitHubError(SwiftDeployError):
    """GitHub API errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.status_code = status_code


class DeploymentError(SwiftDeployError):
    """Deployment step errors."""

    def __init__(
        self,
        message: str,
        step: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.step = step


class MissingCredentialsError(DeploymentError):
    """Owner, repository or token was not supplied."""

    def __init__(self, message: str = "missing repo info or token"):
        super().__init__(message, step="validate")


class UnexpectedResponseError(DeploymentError):
    """The API answered with a body of the wrong shape."""

    pass


class DeploymentInProgressError(DeploymentError):
    """A deployment was requested while another one is running."""

    pass
