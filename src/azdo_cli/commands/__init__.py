"""CLI commands for azdo."""

from azdo_cli.commands.config import list_organizations, set_default_org
from azdo_cli.commands.pr import checkout, view
from azdo_cli.commands.repo import remotes, set_default, url

__all__ = [
    "checkout",
    "list_organizations",
    "remotes",
    "set_default",
    "set_default_org",
    "url",
    "view",
]
