"""Configuration management for swiftdeploy using Pydantic."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from swiftdeploy.core.exceptions import ConfigError
from swiftdeploy.core.output import OutputFormat
from swiftdeploy.core.logging import LogLevel
from swiftdeploy.deploy.models import Credentials


class GitHubConfig(BaseModel):
    """GitHub repository and credential configuration."""

    owner: str | None = None
    repository: str | None = None
    token: str | None = None
    timeout: int = 30

    def get_owner(self) -> str | None:
        """Get repository owner from config or environment."""
        return os.environ.get("SWIFTDEPLOY_GITHUB_OWNER") or self.owner

    def get_repository(self) -> str | None:
        """Get repository name from config or environment."""
        return os.environ.get("SWIFTDEPLOY_GITHUB_REPO") or self.repository

    def get_token(self) -> str | None:
        """Get GitHub token from config or environment."""
        token = self.token
        if token == "from_env" or token is None:
            token = (
                os.environ.get("SWIFTDEPLOY_GITHUB_TOKEN")
                or os.environ.get("GITHUB_TOKEN")
                or os.environ.get("GH_TOKEN")
            )
        return token

    def credentials(
        self,
        owner: str | None = None,
        repository: str | None = None,
        token: str | None = None,
    ) -> Credentials:
        """Build deployment credentials, letting explicit values win."""
        return Credentials(
            owner=owner or self.get_owner() or "",
            repository=repository or self.get_repository() or "",
            access_token=token or self.get_token() or "",
        )


class DeployConfig(BaseModel):
    """Deployment history settings."""

    state_dir: str | None = None
    record_history: bool = True

    def get_state_dir(self) -> Path:
        """Get the directory deployment records are written to."""
        state_dir = os.environ.get("SWIFTDEPLOY_STATE_DIR") or self.state_dir
        if state_dir:
            return Path(state_dir).expanduser()
        return Path.home() / ".swiftdeploy" / "deployments"


class ProfileConfig(BaseModel):
    """Profile configuration grouping all service settings."""

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    deploy: DeployConfig = Field(default_factory=DeployConfig)


class GlobalConfig(BaseModel):
    """Global settings."""

    output_format: OutputFormat = OutputFormat.TABLE
    color: str = "auto"  # auto, always, never
    verbosity: LogLevel = LogLevel.WARNING

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        if v not in ("auto", "always", "never"):
            raise ValueError("color must be 'auto', 'always', or 'never'")
        return v


class SwiftDeployConfig(BaseModel):
    """Main configuration model."""

    model_config = {"populate_by_name": True}

    version: str = "1"
    global_settings: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    profiles: dict[str, ProfileConfig] = Field(default_factory=lambda: {"default": ProfileConfig()})

    def get_profile(self, name: str | None = None) -> ProfileConfig:
        """Get a profile by name, defaulting to 'default'."""
        profile_name = name or "default"
        if profile_name not in self.profiles:
            raise ConfigError(f"Profile '{profile_name}' not found")
        return self.profiles[profile_name]


class ConfigLoader:
    """Loads and merges configuration from multiple sources."""

    CONFIG_FILENAMES = ["swiftdeploy.yaml", "swiftdeploy.yml", ".swiftdeploy.yaml", ".swiftdeploy.yml"]

    def __init__(self):
        self._config: SwiftDeployConfig | None = None

    def load(self, config_file: str | Path | None = None) -> SwiftDeployConfig:
        """Load configuration from files.

        Priority (highest to lowest):
        1. Explicitly specified config file
        2. Project config (./swiftdeploy.yaml)
        3. User config (~/.swiftdeploy/config.yaml)

        Args:
            config_file: Optional explicit config file path

        Returns:
            Merged configuration
        """
        configs: list[dict[str, Any]] = []

        user_config_path = Path.home() / ".swiftdeploy" / "config.yaml"
        if user_config_path.exists():
            configs.append(self._load_yaml_file(user_config_path))

        project_config = self._find_project_config()
        if project_config:
            configs.append(self._load_yaml_file(project_config))

        if config_file:
            config_path = Path(config_file)
            if not config_path.exists():
                raise ConfigError(f"Config file not found: {config_file}")
            configs.append(self._load_yaml_file(config_path))

        merged = self._merge_configs(configs)

        try:
            self._config = SwiftDeployConfig(**merged)
        except ValueError as e:
            raise ConfigError(f"Invalid configuration: {e}")
        return self._config

    def _find_project_config(self) -> Path | None:
        """Find project config file in current or parent directories."""
        current = Path.cwd()

        while current != current.parent:
            for filename in self.CONFIG_FILENAMES:
                config_path = current / filename
                if config_path.exists():
                    return config_path
            current = current.parent

        return None

    def _load_yaml_file(self, path: Path) -> dict[str, Any]:
        """Load a YAML config file."""
        try:
            with open(path) as f:
                content = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}")
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}")

        if not isinstance(content, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        return content

    def _merge_configs(self, configs: list[dict[str, Any]]) -> dict[str, Any]:
        """Deep merge multiple configuration dictionaries."""
        result: dict[str, Any] = {}
        for config in configs:
            result = self._deep_merge(result, config)
        return result

    def _deep_merge(
        self,
        base: dict[str, Any],
        override: dict[str, Any],
    ) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result


_config_loader = ConfigLoader()


def load_config(config_file: str | Path | None = None) -> SwiftDeployConfig:
    """Load swiftdeploy configuration.

    Args:
        config_file: Optional explicit config file path

    Returns:
        Loaded configuration
    """
    return _config_loader.load(config_file)


def get_default_config() -> SwiftDeployConfig:
    """Get default configuration without loading from files."""
    return SwiftDeployConfig()
