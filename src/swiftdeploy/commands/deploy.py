"""Deploy, status and history commands."""

from typing import IO

import click
from rich.markup import escape

from swiftdeploy.core.async_utils import run_sync
from swiftdeploy.core.context import pass_context, SwiftDeployContext
from swiftdeploy.core.exceptions import DeploymentError
from swiftdeploy.deploy import DeploymentPhase
from swiftdeploy.deploy.orchestrator import DeploymentOrchestrator


@click.command("deploy")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--owner", help="Repository owner (overrides config)")
@click.option("--repo", "repository", help="Repository name (overrides config)")
@click.option("--token", help="GitHub access token (overrides config)")
@click.option("--no-history", is_flag=True, help="Do not record this deployment")
@pass_context
def deploy(
    ctx: SwiftDeployContext,
    source: IO[str],
    owner: str | None,
    repository: str | None,
    token: str | None,
    no_history: bool,
) -> None:
    """Upload a Swift source file and start a cloud build.

    SOURCE is uploaded as main.swift next to a generated Package.swift,
    then the repository's build workflow is dispatched. Reads stdin when
    SOURCE is omitted or '-'.

    \b
    Examples:
        swiftdeploy deploy ContentView.swift
        swiftdeploy deploy --owner me --repo my-app main.swift
        cat main.swift | swiftdeploy deploy
    """
    content = source.read()

    github_config = ctx.profile.github
    deploy_config = ctx.profile.deploy
    credentials = github_config.credentials(owner, repository, token)

    state = None
    if deploy_config.record_history and not no_history:
        state = ctx.state

    orchestrator = DeploymentOrchestrator(
        credentials,
        state=state,
        timeout=github_config.timeout,
    )

    orchestrator.subscribe(ctx.output.print_status)

    final = run_sync(orchestrator.deploy(content))
    ctx.output.print_outcome(final, orchestrator.last_deployment)

    if final.phase != DeploymentPhase.SUCCEEDED:
        raise click.Abort()


@click.command("status")
@click.argument("deployment_id")
@pass_context
def status(ctx: SwiftDeployContext, deployment_id: str) -> None:
    """Show a recorded deployment.

    \b
    Examples:
        swiftdeploy status 1a2b3c4d
    """
    try:
        deployment = ctx.state.load(deployment_id)
    except DeploymentError as e:
        ctx.output.print_error(escape(e.message))
        raise click.Abort()

    ctx.output.print_deployment(deployment)


@click.command("history")
@click.option("--limit", type=int, default=20, help="Maximum deployments to show")
@click.option(
    "--phase",
    type=click.Choice([DeploymentPhase.SUCCEEDED.value, DeploymentPhase.FAILED.value]),
    help="Only show deployments that ended this way",
)
@pass_context
def history(ctx: SwiftDeployContext, limit: int, phase: str | None) -> None:
    """List recorded deployments, newest first."""
    deployments = ctx.state.list(
        phase=DeploymentPhase(phase) if phase else None,
        limit=limit,
    )
    ctx.output.print_history(deployments)
