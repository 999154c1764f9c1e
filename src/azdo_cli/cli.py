"""Command line entry point for azdo."""

from typing import Annotated

import typer

from azdo_cli import __version__
from azdo_cli.commands import (
    checkout,
    list_organizations,
    remotes,
    set_default,
    set_default_org,
    url,
    view,
)
from azdo_cli.console import console
from azdo_cli.logging_config import setup_logging

app = typer.Typer(
    name="azdo",
    help="Work with Azure DevOps pull requests and repositories from the command line.",
    no_args_is_help=True,
)

pr_app = typer.Typer(help="Work with pull requests.", no_args_is_help=True)
pr_app.command("view")(view)
pr_app.command("checkout")(checkout)

repo_app = typer.Typer(help="Work with repositories and their git remotes.", no_args_is_help=True)
repo_app.command("remotes")(remotes)
repo_app.command("url")(url)
repo_app.command("set-default")(set_default)

config_app = typer.Typer(help="Show and change azdo configuration.", no_args_is_help=True)
config_app.command("list")(list_organizations)
config_app.command("set-default-org")(set_default_org)

app.add_typer(pr_app, name="pr")
app.add_typer(repo_app, name="repo")
app.add_typer(config_app, name="config")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"azdo {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log debug output (git commands, REST calls) to stderr"),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit",
        ),
    ] = None,
) -> None:
    """azdo: Azure DevOps from the command line."""
    setup_logging(verbose)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
