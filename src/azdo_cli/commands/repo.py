"""Repository commands - inspect remotes and choose the default repository."""

from typing import Annotated

import typer

from azdo_cli.console import (
    console,
    print_error,
    print_exception,
    print_info,
    print_remotes,
    print_success,
)
from azdo_cli.context import RepoContext
from azdo_cli.exceptions import AzdoError, NoResultsError
from azdo_cli.models.remote import Remote, Remotes
from azdo_cli.models.repository import repository_from_name

PROTOCOLS = ("https", "ssh")
DEFAULT_RESOLUTION = "default"


def remotes() -> None:
    """List the git remotes that point to Azure DevOps repositories.

    Remotes are listed in the order they are tried when no repository is
    given: the default repository first, then upstream, azdo and origin.
    """
    context = RepoContext.create()
    try:
        remote_list = context.remotes()
    except AzdoError as e:
        print_exception(e)
        raise typer.Exit(1) from e

    if not remote_list:
        print_info("No Azure DevOps remotes found.")
        return

    print_remotes(remote_list)


def url(
    repository: Annotated[
        str | None,
        typer.Argument(
            help="Repository in the [ORGANIZATION/]PROJECT/REPO format "
            "(defaults to the current repository)",
        ),
    ] = None,
    protocol: Annotated[
        str | None,
        typer.Option(
            "--protocol",
            "-p",
            help="Git protocol of the URL: https or ssh (defaults to the organization setting)",
        ),
    ] = None,
) -> None:
    """Print the git remote URL of a repository."""
    if protocol is not None and protocol.lower() not in PROTOCOLS:
        raise typer.BadParameter(
            f"expected one of {', '.join(PROTOCOLS)}, got {protocol!r}",
            param_hint="--protocol",
        )

    context = RepoContext.create(repository)
    try:
        repo = context.repo()
    except AzdoError as e:
        print_exception(e)
        raise typer.Exit(1) from e

    protocol = protocol or context.config.get_git_protocol(repo.organization)
    console.print(repo.remote_url(protocol), highlight=False, soft_wrap=True)


def set_default(
    repository: Annotated[
        str | None,
        typer.Argument(help="Repository in the [ORGANIZATION/]PROJECT/REPO format"),
    ] = None,
    view: Annotated[
        bool,
        typer.Option("--view", "-v", help="View the current default repository"),
    ] = False,
    unset: Annotated[
        bool,
        typer.Option("--unset", "-u", help="Unset the current default repository"),
    ] = False,
) -> None:
    """Set the default repository for commands run in this git repository.

    The choice is stored as ``remote.<name>.azdo-resolved`` in the local
    git config. Without an argument, you are prompted to pick one of the
    remotes.

    Examples:
        azdo repo set-default                     # Interactively pick a remote
        azdo repo set-default myproject/myrepo    # Use the remote pointing to myrepo
        azdo repo set-default --view              # Show the current default
    """
    if view and unset:
        raise typer.BadParameter("--view and --unset are mutually exclusive")

    context = RepoContext.create()
    git = context.git

    try:
        git.ensure_dependencies()
        if not git.is_local_git_repo():
            print_error("must be run from inside a git repository")
            raise typer.Exit(1)

        remote_list = context.remotes()

        if view:
            _view_default(remote_list)
            return

        if unset:
            _unset_default(context, remote_list)
            print_success("Unset the default repository")
            return

        if not remote_list:
            raise NoResultsError("none of the git remotes correspond to an Azure DevOps repository")

        remote = _select_remote(context, remote_list, repository)
        _unset_default(context, remote_list)
        git.set_remote_resolution(remote.name, DEFAULT_RESOLUTION)
    except AzdoError as e:
        print_exception(e)
        raise typer.Exit(1) from e

    print_success(
        f"Set [cyan]{remote.repository.full_name}[/cyan] as the default repository "
        "for the current directory"
    )


def _view_default(remote_list: Remotes) -> None:
    try:
        remote = remote_list.resolved_remote()
    except NoResultsError:
        print_info("No default repository has been set; use `azdo repo set-default` to pick one.")
        return
    console.print(remote.repository.full_name, highlight=False)


def _unset_default(context: RepoContext, remote_list: Remotes) -> None:
    for remote in remote_list:
        if remote.resolved:
            context.git.unset_remote_resolution(remote.name)


def _select_remote(context: RepoContext, remote_list: Remotes, repository: str | None) -> Remote:
    """Pick the remote to mark as default."""
    if repository:
        wanted = repository_from_name(repository, context.config)
        for remote in remote_list:
            if remote.repository == wanted:
                return remote
        raise NoResultsError(f"{wanted.full_name} does not correspond to any git remote")

    if len(remote_list) == 1:
        return remote_list[0]

    console.print("[bold]Which repository should be the default?[/bold]\n")
    for index, remote in enumerate(remote_list, start=1):
        console.print(
            f"  {index}. [cyan]{remote.repository.full_name}[/cyan] [dim]({remote.name})[/dim]"
        )
    console.print()

    choice = typer.prompt("Repository number", type=int, default=1)
    if not 1 <= choice <= len(remote_list):
        raise typer.BadParameter(f"choose a number between 1 and {len(remote_list)}")
    return remote_list[choice - 1]
