"""Parsing of pull request selectors."""

import re
from dataclasses import dataclass

from azdo_cli.exceptions import InvalidSelectorError

_SEGMENT = r"[\w\-.\s]+"

_SELECTOR_RE = re.compile(
    rf"^(((?P<org>{_SEGMENT})/)?((?P<project>{_SEGMENT})/)?(?P<repo>{_SEGMENT}):)?#?(?P<id>\d+)$",
    re.ASCII,
)


@dataclass(frozen=True)
class ByID:
    """Select a pull request by number, optionally in another repository."""

    number: int
    organization: str = ""
    project: str = ""
    repository: str = ""

    @property
    def is_qualified(self) -> bool:
        """True if the selector names an organization of its own."""
        return bool(self.organization)


@dataclass(frozen=True)
class ByBranch:
    """Select the pull request whose source is a branch.

    ``owner`` is the full name of the repository the branch is pushed to,
    set only when that differs from the current repository.
    """

    branch: str
    owner: str = ""

    @property
    def qualified_name(self) -> str:
        if self.owner:
            return f"{self.owner}:{self.branch}"
        return self.branch


Selector = ByID | ByBranch


def parse_selector(selector: str) -> ByID:
    """Parse a pull request selector.

    Accepts ``[[ORG/][PROJECT/]REPO:]#ID`` or ``[[ORG/][PROJECT/]REPO:]ID``,
    e.g. ``42``, ``#42``, ``myrepo:42`` or ``myorg/myproject/myrepo:42``.

    Args:
        selector: The selector as typed by the user

    Returns:
        A ByID selector

    Raises:
        InvalidSelectorError: If the selector does not match the grammar
    """
    match = _SELECTOR_RE.fullmatch(selector)
    if match is None:
        raise InvalidSelectorError(f"not a valid pull request selector: {selector!r}")

    return ByID(
        number=int(match.group("id")),
        organization=match.group("org") or "",
        project=match.group("project") or "",
        repository=match.group("repo") or "",
    )
