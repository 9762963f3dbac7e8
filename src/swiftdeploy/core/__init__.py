"""Core utilities and shared components for swiftdeploy."""

# Note: Import context lazily to avoid circular imports
# Use: from swiftdeploy.core.context import SwiftDeployContext, pass_context
from swiftdeploy.core.exceptions import (
    SwiftDeployError,
    ConfigError,
    GitHubError,
    DeploymentError,
)
from swiftdeploy.core.output import OutputFormatter, console

__all__ = [
    "SwiftDeployError",
    "ConfigError",
    "GitHubError",
    "DeploymentError",
    "OutputFormatter",
    "console",
]
