"""Pull request commands - view and check out pull requests."""

from typing import Annotated, Any

import typer

from azdo_cli.console import (
    console,
    err_console,
    print_exception,
    print_pull_request,
    print_success,
)
from azdo_cli.context import RepoContext
from azdo_cli.exceptions import AzdoError, NoResultsError, with_context
from azdo_cli.logging_config import get_logger
from azdo_cli.models.repository import Repository
from azdo_cli.services.finder import FindOptions, PRFinder

logger = get_logger("azdo_cli.commands.pr")

RepoOption = Annotated[
    str | None,
    typer.Option(
        "--repo",
        "-R",
        envvar="AZDO_REPO",
        help="Select another repository using the [ORGANIZATION/]PROJECT/REPO format or a URL",
    ),
]


def view(
    selector: Annotated[
        str | None,
        typer.Argument(
            help="Pull request number, optionally qualified as [[ORG/][PROJECT/]REPO:]ID "
            "(defaults to the pull request of the current branch)",
        ),
    ] = None,
    base: Annotated[
        str,
        typer.Option("--base", "-B", help="Require the pull request to come from this branch"),
    ] = "",
    state: Annotated[
        list[str] | None,
        typer.Option(
            "--state", "-s", help="Require one of these states (active, completed, abandoned)"
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Print the pull request as JSON"),
    ] = False,
    repo: RepoOption = None,
) -> None:
    """Display the title, body, and other information about a pull request.

    Without an argument, the pull request that belongs to the current
    branch is displayed.

    Examples:
        azdo pr view              # PR of the current branch
        azdo pr view 42           # PR 42 of the current repository
        azdo pr view myrepo:#42   # PR 42 of another repository in the project
    """
    context = RepoContext.create(repo)
    options = FindOptions(selector=selector or "", base_branch=base, states=state or [])

    try:
        with err_console.status("Finding pull request..."):
            result = PRFinder(context).find(options)
    except AzdoError as e:
        print_exception(e)
        raise typer.Exit(1) from e

    if json_output:
        console.print_json(data=result.pull_request.as_dict(), default=str)
        return

    print_pull_request(result.pull_request, result.repository)


def checkout(
    selector: Annotated[
        str,
        typer.Argument(help="Pull request number, optionally qualified as [[ORG/][PROJECT/]REPO:]ID"),
    ],
    repo: RepoOption = None,
) -> None:
    """Check out a pull request in git.

    An existing local branch of the same name is checked out as is;
    otherwise the source branch is fetched from the remote pointing to
    the pull request's repository and tracked by a new local branch.
    """
    context = RepoContext.create(repo)

    try:
        context.git.ensure_dependencies()
        with err_console.status("Finding pull request..."):
            result = PRFinder(context).find(FindOptions(selector=selector))
        branch = _checkout(context, result.pull_request, result.repository)
    except AzdoError as e:
        print_exception(e)
        raise typer.Exit(1) from e

    print_success(f"Switched to branch {branch}")


def _checkout(context: RepoContext, pr: Any, repository: Repository) -> str:
    """Check out the source branch of ``pr`` and return its name."""
    branch = (pr.source_ref_name or "").removeprefix("refs/heads/")
    if not branch:
        raise NoResultsError(f"pull request #{pr.pull_request_id} has no source branch")

    git = context.git
    if git.has_local_branch(branch):
        git.checkout_branch(branch)
        return branch

    try:
        remote = context.remotes().find_by_repo(repository.project, repository.name)
    except NoResultsError as e:
        raise with_context(e, f"no git remote points to {repository.full_name}") from e

    logger.debug(f"Fetching {branch} from remote {remote.name}")
    git.fetch(remote.name, f"+refs/heads/{branch}:refs/remotes/{remote.name}/{branch}")
    if not git.has_remote_branch(remote.name, branch):
        raise NoResultsError(f"branch {branch} not found on remote {remote.name}")

    git.checkout_new_branch(remote.name, branch)
    return branch
