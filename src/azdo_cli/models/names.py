"""Organization, project and repository names.

Names come in three nested flavors. A ``RepositoryName`` is a
``ProjectName`` is an ``OrganizationName``, and ``full_name`` joins the
non-empty parts with ``/``.
"""

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from azdo_cli.exceptions import InvalidNameError

if TYPE_CHECKING:
    from azdo_cli.services.config_loader import AzdoConfig

MAX_ORGANIZATION_LENGTH = 50
MAX_PROJECT_LENGTH = 64
MAX_REPOSITORY_LENGTH = 64

_ORGANIZATION_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?$")
_SEGMENT_RE = re.compile(r"^[A-Za-z0-9_ .-]+$")


@dataclass(frozen=True)
class OrganizationName:
    organization: str

    @property
    def full_name(self) -> str:
        return self.organization

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True)
class ProjectName(OrganizationName):
    project: str

    @property
    def full_name(self) -> str:
        if self.organization:
            return f"{self.organization}/{self.project}"
        return self.project


@dataclass(frozen=True)
class RepositoryName(ProjectName):
    name: str

    @property
    def full_name(self) -> str:
        project = super().full_name
        if project:
            return f"{project}/{self.name}"
        return self.name


def is_valid_organization(value: str) -> bool:
    return len(value) <= MAX_ORGANIZATION_LENGTH and bool(_ORGANIZATION_RE.fullmatch(value))


def _is_valid_segment(value: str, max_length: int) -> bool:
    if not value or len(value) > max_length:
        return False
    if value[0] in "_." or value.endswith("."):
        return False
    return bool(_SEGMENT_RE.fullmatch(value))


def is_valid_project(value: str) -> bool:
    return _is_valid_segment(value, MAX_PROJECT_LENGTH)


def is_valid_repository(value: str) -> bool:
    return _is_valid_segment(value, MAX_REPOSITORY_LENGTH)


def _default_organization(config: "AzdoConfig | None") -> str:
    if config is None:
        return ""
    return config.get_default_organization()


def parse_organization_name(value: str) -> OrganizationName:
    """Parse an organization name.

    Raises:
        InvalidNameError: If the name is malformed
    """
    if not is_valid_organization(value):
        raise InvalidNameError(
            f'not a valid organization name, expected the "ORGANIZATION" format, got {value!r}'
        )
    return OrganizationName(organization=value)


def parse_project_name(value: str, config: "AzdoConfig | None" = None) -> ProjectName:
    """Parse ``[ORGANIZATION/]PROJECT``.

    Args:
        value: The name to parse
        config: Supplies the default organization when none is given

    Raises:
        InvalidNameError: If the name is malformed
    """
    parts = value.split("/")
    error = InvalidNameError(
        f'not a valid project name, expected the "[ORGANIZATION/]PROJECT" format, got {value!r}'
    )
    if len(parts) == 1:
        organization, project = "", parts[0]
    elif len(parts) == 2:
        organization, project = parts
        if not is_valid_organization(organization):
            raise error
    else:
        raise error
    if not is_valid_project(project):
        raise error

    if not organization:
        organization = _default_organization(config)
    return ProjectName(organization=organization, project=project)


def parse_repository_name(value: str, config: "AzdoConfig | None" = None) -> RepositoryName:
    """Parse ``[ORGANIZATION/]PROJECT/REPO``.

    Args:
        value: The name to parse
        config: Supplies the default organization when none is given

    Raises:
        InvalidNameError: If the name is malformed
    """
    parts = value.split("/")
    error = InvalidNameError(
        f'not a valid repository name, expected the "[ORGANIZATION/]PROJECT/REPO" format, '
        f"got {value!r}"
    )
    if len(parts) == 2:
        organization, project, name = "", parts[0], parts[1]
    elif len(parts) == 3:
        organization, project, name = parts
        if not is_valid_organization(organization):
            raise error
    else:
        raise error
    if not is_valid_project(project) or not is_valid_repository(name):
        raise error

    if not organization:
        organization = _default_organization(config)
    return RepositoryName(organization=organization, project=project, name=name)
