"""Tests for configuration management."""

import os
from pathlib import Path

import pytest

from swiftdeploy.config import (
    SwiftDeployConfig,
    ProfileConfig,
    GitHubConfig,
    DeployConfig,
    GlobalConfig,
    ConfigLoader,
    load_config,
    get_default_config,
)
from swiftdeploy.core.exceptions import ConfigError
from swiftdeploy.core.output import OutputFormat


class TestGitHubConfig:
    """Tests for GitHubConfig."""

    def test_default_values(self):
        config = GitHubConfig()
        assert config.owner is None
        assert config.repository is None
        assert config.token is None
        assert config.timeout == 30

    def test_get_token_from_config(self):
        config = GitHubConfig(token="ghp_test")
        assert config.get_token() == "ghp_test"

    def test_get_token_from_env(self):
        os.environ["GITHUB_TOKEN"] = "env-token"
        config = GitHubConfig(token="from_env")
        assert config.get_token() == "env-token"

    def test_swiftdeploy_token_env_takes_priority(self):
        os.environ["GH_TOKEN"] = "gh-token"
        os.environ["SWIFTDEPLOY_GITHUB_TOKEN"] = "sd-token"
        assert GitHubConfig().get_token() == "sd-token"

    def test_explicit_token_beats_env(self):
        os.environ["GITHUB_TOKEN"] = "env-token"
        assert GitHubConfig(token="cfg").get_token() == "cfg"

    def test_owner_and_repo_from_env(self):
        os.environ["SWIFTDEPLOY_GITHUB_OWNER"] = "env-owner"
        os.environ["SWIFTDEPLOY_GITHUB_REPO"] = "env-repo"
        config = GitHubConfig(owner="cfg-owner", repository="cfg-repo")
        assert config.get_owner() == "env-owner"
        assert config.get_repository() == "env-repo"

    def test_credentials_overrides(self):
        config = GitHubConfig(owner="u", repository="r", token="t")
        creds = config.credentials(repository="other")
        assert (creds.owner, creds.repository, creds.access_token) == ("u", "other", "t")

    def test_credentials_incomplete(self):
        creds = GitHubConfig().credentials()
        assert creds.owner == ""
        assert not creds.is_complete


class TestDeployConfig:
    """Tests for DeployConfig."""

    def test_default_state_dir(self):
        assert DeployConfig().get_state_dir() == Path.home() / ".swiftdeploy" / "deployments"

    def test_state_dir_from_env(self, tmp_path):
        os.environ["SWIFTDEPLOY_STATE_DIR"] = str(tmp_path)
        assert DeployConfig(state_dir="/elsewhere").get_state_dir() == tmp_path


class TestGlobalConfig:
    """Tests for GlobalConfig."""

    def test_default_values(self):
        config = GlobalConfig()
        assert config.output_format == OutputFormat.TABLE
        assert config.color == "auto"

    def test_valid_color_values(self):
        for color in ("auto", "always", "never"):
            assert GlobalConfig(color=color).color == color

    def test_invalid_color_value(self):
        with pytest.raises(ValueError):
            GlobalConfig(color="invalid")


class TestSwiftDeployConfig:
    """Tests for SwiftDeployConfig."""

    def test_default_config(self):
        config = SwiftDeployConfig()
        assert config.version == "1"
        assert "default" in config.profiles

    def test_get_default_profile(self):
        assert isinstance(get_default_config().get_profile(), ProfileConfig)

    def test_get_nonexistent_profile(self):
        with pytest.raises(ConfigError, match="not found"):
            SwiftDeployConfig().get_profile("missing")

    def test_global_alias(self):
        config = SwiftDeployConfig(**{"global": {"output_format": "json"}})
        assert config.global_settings.output_format == OutputFormat.JSON


class TestConfigLoader:
    """Tests for ConfigLoader."""

    def test_load_explicit_file(self, temp_config_file):
        config = ConfigLoader().load(temp_config_file)
        github = config.get_profile().github
        assert github.owner == "u"
        assert github.repository == "r"

    def test_missing_file(self):
        with pytest.raises(ConfigError, match="not found"):
            ConfigLoader().load("/nonexistent/config.yaml")

    def test_invalid_yaml(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("profiles: [unclosed")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            ConfigLoader().load(bad)

    def test_non_mapping(self, tmp_path):
        bad = tmp_path / "list.yaml"
        bad.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            ConfigLoader().load(bad)

    def test_invalid_values(self, tmp_path):
        bad = tmp_path / "bad-values.yaml"
        bad.write_text("global:\n  color: purple\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            ConfigLoader().load(bad)

    def test_project_config_is_found(self, tmp_path):
        (tmp_path / "swiftdeploy.yaml").write_text(
            "profiles:\n  default:\n    github:\n      owner: project-owner\n"
        )
        config = load_config()
        assert config.get_profile().github.owner == "project-owner"

    def test_explicit_file_overrides_user_config(self, tmp_path):
        user_dir = Path.home() / ".swiftdeploy"
        user_dir.mkdir()
        (user_dir / "config.yaml").write_text(
            "profiles:\n  default:\n    github:\n      owner: user-owner\n      repository: user-repo\n"
        )
        explicit = tmp_path / "explicit.yaml"
        explicit.write_text("profiles:\n  default:\n    github:\n      owner: explicit-owner\n")

        github = load_config(explicit).get_profile().github

        assert github.owner == "explicit-owner"
        assert github.repository == "user-repo"

    def test_deep_merge(self):
        loader = ConfigLoader()
        merged = loader._deep_merge(
            {"a": {"b": 1, "c": 2}, "d": 3},
            {"a": {"b": 10}, "e": 5},
        )
        assert merged == {"a": {"b": 10, "c": 2}, "d": 3, "e": 5}
