"""Rich console singletons and helpers for terminal output."""

from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from azdo_cli.exceptions import NoResultsError, ValidationError

if TYPE_CHECKING:
    from azdo_cli.models.remote import Remotes
    from azdo_cli.models.repository import Repository

# Global console instances
console = Console()
err_console = Console(stderr=True)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[red]Error: {message}[/red]", highlight=False)


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def _branch(ref: str | None) -> str:
    if not ref:
        return ""
    return ref.removeprefix("refs/heads/")


def print_pull_request(pr: Any, repo: "Repository") -> None:
    """Print a formatted summary of a pull request.

    Args:
        pr: The GitPullRequest returned by the REST API
        repo: The repository the pull request was resolved against
    """
    author = getattr(getattr(pr, "created_by", None), "display_name", None) or "unknown"
    status = str(pr.status or "unknown")
    draft = " [dim](draft)[/dim]" if getattr(pr, "is_draft", False) else ""

    console.print()
    console.print(
        Panel(
            f"[bold]{escape(pr.title or '')}[/bold] [dim]#{pr.pull_request_id}[/dim]{draft}",
            subtitle=repo.full_name,
            style="cyan",
        )
    )

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_row("Status", status)
    table.add_row("Author", author)
    table.add_row(
        "Branches",
        f"[green]{_branch(pr.source_ref_name)}[/green] -> "
        f"[green]{_branch(pr.target_ref_name)}[/green]",
    )

    reviewers = getattr(pr, "reviewers", None) or []
    if reviewers:
        names = ", ".join(r.display_name for r in reviewers if getattr(r, "display_name", None))
        table.add_row("Reviewers", names)

    console.print(table)

    description = getattr(pr, "description", None)
    if description:
        console.print()
        # Truncate description if too long
        text = description[:500] + "..." if len(description) > 500 else description
        console.print(f"  {escape(text)}")
    console.print()


def print_remotes(remotes: "Remotes") -> None:
    """Print a table of remotes and the repositories they map to."""
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Remote", style="cyan")
    table.add_column("Repository", style="green")
    table.add_column("Host")
    table.add_column("Default", style="dim")

    for remote in remotes:
        table.add_row(
            remote.name,
            remote.repository.full_name,
            remote.repository.hostname,
            remote.resolved or "",
        )

    console.print(table)


def print_exception(err: BaseException) -> None:
    """Print an error for the user.

    Validation and no-result errors are a single line; other failures
    are followed by the chain of errors that caused them.
    """
    message = str(err)
    print_error(escape(message))
    if isinstance(err, (ValidationError, NoResultsError)):
        return

    cause = err.__cause__
    while cause is not None:
        cause_message = str(cause)
        if cause_message and cause_message not in message:
            err_console.print(f"  [dim]caused by: {escape(cause_message)}[/dim]", highlight=False)
            message = f"{message}\n{cause_message}"
        cause = cause.__cause__
