"""Click context object for sharing state across commands."""

from __future__ import annotations

import click

from swiftdeploy.config import SwiftDeployConfig, ProfileConfig, get_default_config
from swiftdeploy.core.output import OutputFormat, OutputFormatter
from swiftdeploy.core.logging import resolve_level, setup_logging
from swiftdeploy.deploy.state import DeploymentState


class SwiftDeployContext:
    """Shared context object for swiftdeploy commands.

    This object is passed through Click's context mechanism and provides
    access to configuration, deployment history, and output utilities.
    """

    def __init__(
        self,
        config: SwiftDeployConfig | None = None,
        profile: str | None = None,
        output_format: OutputFormat | None = None,
        verbose: int = 0,
        quiet: bool = False,
        color: bool = True,
    ):
        self._config = config or get_default_config()
        self._profile_name = profile or "default"

        self._output_format = output_format or self._config.global_settings.output_format
        self._verbose = verbose
        self._color = color and self._config.global_settings.color != "never"

        setup_logging(
            resolve_level(verbose, quiet, self._config.global_settings.verbosity),
            color=self._color,
        )

        self._output = OutputFormatter(
            format=self._output_format,
            color=self._color,
            quiet=quiet,
        )

        self._state: DeploymentState | None = None

    @property
    def config(self) -> SwiftDeployConfig:
        """Get the loaded configuration."""
        return self._config

    @property
    def profile(self) -> ProfileConfig:
        """Get the current profile configuration."""
        return self._config.get_profile(self._profile_name)

    @property
    def profile_name(self) -> str:
        return self._profile_name

    @property
    def output(self) -> OutputFormatter:
        return self._output

    @property
    def output_format(self) -> OutputFormat:
        return self._output_format

    @property
    def verbose(self) -> int:
        return self._verbose

    @property
    def state(self) -> DeploymentState:
        """Get or create the deployment history store."""
        if self._state is None:
            self._state = DeploymentState(self.profile.deploy.get_state_dir())
        return self._state


pass_context = click.make_pass_decorator(SwiftDeployContext, ensure=True)
