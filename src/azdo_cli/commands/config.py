"""Config commands - show organizations and pick the default one."""

from typing import Annotated

import typer
from rich.table import Table

from azdo_cli.console import console, print_error, print_info, print_success
from azdo_cli.exceptions import ConfigError
from azdo_cli.models.names import is_valid_organization
from azdo_cli.services.config_loader import (
    get_config_file,
    load_config,
    save_default_organization,
)


def list_organizations() -> None:
    """List the configured organizations."""
    config = load_config()
    organizations = config.get_organizations()

    if not organizations:
        print_info(f"No organizations configured in {get_config_file()}")
        return

    try:
        default = config.get_default_organization().lower()
    except ConfigError:
        default = ""

    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Organization", style="cyan")
    table.add_column("URL")
    table.add_column("Git protocol")
    table.add_column("Token", style="dim")

    for organization in organizations:
        org_config = config.organizations[organization]
        name = f"{organization} [green](default)[/green]" if organization == default else organization
        table.add_row(
            name,
            org_config.url,
            config.get_git_protocol(organization),
            "set" if org_config.token else "not set",
        )

    console.print(table)


def set_default_org(
    organization: Annotated[
        str,
        typer.Argument(help="Name of a configured organization"),
    ],
) -> None:
    """Set the organization used when a name or selector does not include one."""
    if not is_valid_organization(organization):
        print_error(f"not a valid organization name: {organization!r}")
        raise typer.Exit(1)

    if not save_default_organization(organization):
        print_error(
            f"Failed to set default organization; is {organization} configured in "
            f"{get_config_file()}?"
        )
        raise typer.Exit(1)

    print_success(f"Default organization set to [cyan]{organization}[/cyan]")
