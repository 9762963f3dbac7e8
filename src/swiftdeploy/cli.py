"""Main CLI entry point for swiftdeploy."""

import sys
from typing import Any

import click

from swiftdeploy import __version__
from swiftdeploy.config import load_config
from swiftdeploy.core.context import SwiftDeployContext
from swiftdeploy.core.output import OutputFormat, console, error_console
from swiftdeploy.core.exceptions import SwiftDeployError, ConfigError
from swiftdeploy.deploy.manifest import MANIFEST_PATH, SOURCE_PATH, WORKFLOW_FILE, WORKFLOW_REF


CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 120,
}


class OutputFormatType(click.ParamType):
    """Custom Click parameter type for output format."""

    name = "format"

    def convert(
        self,
        value: Any,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> OutputFormat:
        if isinstance(value, OutputFormat):
            return value
        try:
            return OutputFormat(value.lower())
        except ValueError:
            self.fail(
                f"Invalid format '{value}'. Choose from: table, json, yaml, raw",
                param,
                ctx,
            )


OUTPUT_FORMAT = OutputFormatType()


def print_version(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    console.print(f"swiftdeploy version {__version__}")
    ctx.exit()


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option(
    "-p",
    "--profile",
    metavar="NAME",
    envvar="SWIFTDEPLOY_PROFILE",
    help="Configuration profile to use",
)
@click.option(
    "-o",
    "--output",
    "output_format",
    type=OUTPUT_FORMAT,
    metavar="FORMAT",
    help="Output format: table, json, yaml, raw",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v for info, -vv for debug)",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="Suppress non-essential output",
)
@click.option(
    "--no-color",
    is_flag=True,
    help="Disable colored output",
)
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=True),
    metavar="FILE",
    envvar="SWIFTDEPLOY_CONFIG",
    help="Path to config file",
)
@click.option(
    "--version",
    is_flag=True,
    callback=print_version,
    expose_value=False,
    is_eager=True,
    help="Show version and exit",
)
@click.pass_context
def cli(
    ctx: click.Context,
    profile: str | None,
    output_format: OutputFormat | None,
    verbose: int,
    quiet: bool,
    no_color: bool,
    config_file: str | None,
) -> None:
    """SwiftDeploy - build Swift apps in the cloud with GitHub Actions.

    Uploads a Swift source file and its Package.swift to a GitHub
    repository, then dispatches the repository's build workflow.

    \b
    Examples:
        swiftdeploy deploy main.swift
        swiftdeploy history
        swiftdeploy status 1a2b3c4d

    \b
    Configuration:
        ~/.swiftdeploy/config.yaml    User configuration
        ./swiftdeploy.yaml            Project configuration
        SWIFTDEPLOY_*                 Environment variables
    """
    try:
        config = load_config(config_file)
        config.get_profile(profile)

        ctx.obj = SwiftDeployContext(
            config=config,
            profile=profile,
            output_format=output_format,
            verbose=verbose,
            quiet=quiet,
            color=not no_color,
        )

    except ConfigError as e:
        error_console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)


def register_commands() -> None:
    """Register all commands."""
    from swiftdeploy.commands.deploy import deploy, status, history

    cli.add_command(deploy)
    cli.add_command(status)
    cli.add_command(history)


register_commands()


@cli.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration."""
    sd_ctx: SwiftDeployContext = ctx.obj
    github = sd_ctx.profile.github
    config_data = {
        "profile": sd_ctx.profile_name,
        "output_format": sd_ctx.output_format.value,
        "verbose": sd_ctx.verbose,
        "github": {
            "owner": github.get_owner(),
            "repository": github.get_repository(),
            "has_token": bool(github.get_token()),
            "timeout": github.timeout,
        },
        "deploy": {
            "manifest": MANIFEST_PATH,
            "source": SOURCE_PATH,
            "workflow": WORKFLOW_FILE,
            "branch": WORKFLOW_REF,
            "state_dir": str(sd_ctx.profile.deploy.get_state_dir()),
            "record_history": sd_ctx.profile.deploy.record_history,
        },
    }
    sd_ctx.output.print_data(config_data, title="Current Configuration")


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except SwiftDeployError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        error_console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
