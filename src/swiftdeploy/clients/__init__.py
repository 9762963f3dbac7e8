"""API clients for external services."""

from swiftdeploy.clients.github import GitHubClient

__all__ = ["GitHubClient"]
