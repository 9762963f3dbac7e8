"""Pytest fixtures for swiftdeploy tests."""

import json
import os
from typing import Any, Generator

import httpx
import pytest
from click.testing import CliRunner

from swiftdeploy.clients.github import GitHubClient
from swiftdeploy.config import (
    SwiftDeployConfig,
    ProfileConfig,
    GitHubConfig,
    DeployConfig,
)
from swiftdeploy.core.context import SwiftDeployContext
from swiftdeploy.core.output import OutputFormat
from swiftdeploy.deploy.models import Credentials


class FakeGitHub:
    """In-memory stand-in for the contents and actions endpoints."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.files: dict[str, str] = {}
        self.get_status: dict[str, int] = {}
        self.put_status: dict[str, int] = {}
        self.dispatch_status = 204
        # Canned answers that bypass the normal file behaviour
        self.get_bodies: dict[str, Any] = {}
        self.put_text: dict[str, str] = {}
        self.unreachable: set[str] = set()

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        for target in self.unreachable:
            if path.endswith(target):
                raise httpx.ConnectError("connection refused", request=request)

        if "/contents/" in path:
            name = path.split("/contents/", 1)[1]

            if request.method == "GET":
                if name in self.get_bodies:
                    return httpx.Response(200, json=self.get_bodies[name])
                if name in self.get_status:
                    return httpx.Response(self.get_status[name], json={"message": "Server Error"})
                if name in self.files:
                    return httpx.Response(200, json={"path": name, "sha": self.files[name]})
                return httpx.Response(404, json={"message": "Not Found"})

            if request.method == "PUT":
                status = self.put_status.get(name, 200 if name in self.files else 201)
                if status >= 300:
                    return httpx.Response(status, json={"message": "Invalid request"})
                sha = f"sha-{len(self.requests)}"
                self.files[name] = sha
                if name in self.put_text:
                    return httpx.Response(status, text=self.put_text[name])
                return httpx.Response(status, json={"content": {"path": name, "sha": sha}})

        if path.endswith("/dispatches") and request.method == "POST":
            return httpx.Response(self.dispatch_status)

        return httpx.Response(404, json={"message": "Not Found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, method: str | None = None) -> list[httpx.Request]:
        return [r for r in self.requests if method is None or r.method == method]

    @staticmethod
    def body(request: httpx.Request) -> dict[str, Any]:
        return json.loads(request.content)


@pytest.fixture
def fake_github() -> FakeGitHub:
    """Fake GitHub API backend."""
    return FakeGitHub()


@pytest.fixture
def github_client(fake_github: FakeGitHub) -> GitHubClient:
    """GitHub client wired to the fake backend."""
    return GitHubClient(GitHubConfig(), token="t", transport=fake_github.transport)


@pytest.fixture
def patch_client_transport(monkeypatch: pytest.MonkeyPatch, fake_github: FakeGitHub) -> FakeGitHub:
    """Make clients created by the orchestrator talk to the fake backend."""

    def factory(config: GitHubConfig, token: str | None = None) -> GitHubClient:
        return GitHubClient(config, token=token, transport=fake_github.transport)

    monkeypatch.setattr("swiftdeploy.deploy.orchestrator.GitHubClient", factory)
    return fake_github


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(owner="u", repository="r", access_token="t")


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI runner."""
    return CliRunner()


@pytest.fixture
def mock_config(tmp_path) -> SwiftDeployConfig:
    """Create a mock configuration."""
    return SwiftDeployConfig(
        profiles={
            "default": ProfileConfig(
                github=GitHubConfig(owner="u", repository="r", token="t"),
                deploy=DeployConfig(state_dir=str(tmp_path / "deployments")),
            )
        }
    )


@pytest.fixture
def mock_context(mock_config: SwiftDeployConfig) -> SwiftDeployContext:
    """Create a mock swiftdeploy context."""
    return SwiftDeployContext(
        config=mock_config,
        profile="default",
        output_format=OutputFormat.TABLE,
        verbose=0,
        quiet=False,
        color=False,
    )


@pytest.fixture(autouse=True)
def clean_env() -> Generator[None, None, None]:
    """Clean environment variables before each test."""
    env_vars = [
        "SWIFTDEPLOY_PROFILE",
        "SWIFTDEPLOY_CONFIG",
        "SWIFTDEPLOY_GITHUB_OWNER",
        "SWIFTDEPLOY_GITHUB_REPO",
        "SWIFTDEPLOY_GITHUB_TOKEN",
        "SWIFTDEPLOY_STATE_DIR",
        "GITHUB_TOKEN",
        "GH_TOKEN",
    ]

    original = {k: os.environ.get(k) for k in env_vars}

    for k in env_vars:
        os.environ.pop(k, None)

    yield

    for k, v in original.items():
        if v is not None:
            os.environ[k] = v
        else:
            os.environ.pop(k, None)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep user and project config files out of tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def temp_config_file(tmp_path) -> str:
    """Create a temporary config file."""
    config_content = f"""
version: "1"
global:
  output_format: table
profiles:
  default:
    github:
      owner: u
      repository: r
      token: t
    deploy:
      state_dir: {tmp_path / "deployments"}
"""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(config_content)
    return str(config_file)
