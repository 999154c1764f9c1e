"""Azure DevOps git repository identity and its resolution from names and URLs."""

import re
from dataclasses import dataclass, field
from typing import Any

from msrest.exceptions import ClientException

from azdo_cli.exceptions import (
    AzureDevOpsClientError,
    ConfigError,
    CrossOrganizationMismatchError,
    InvalidURLError,
    NoResultsError,
)
from azdo_cli.logging_config import get_logger
from azdo_cli.models.names import (
    OrganizationName,
    ProjectName,
    RepositoryName,
    parse_repository_name,
)
from azdo_cli.services.config_loader import AzdoConfig
from azdo_cli.utils.git_url import (
    RemoteURL,
    hostname_from_url,
    is_supported_protocol,
    is_url,
    normalize_hostname,
    parse_url,
)

logger = get_logger("azdo_cli.models.repository")

_AZDO_HOST_RE = re.compile(r"^(ssh\.)?dev\.azure\.com$|\.visualstudio\.com$", re.IGNORECASE)
_SSH_VERSION_RE = re.compile(r"^v[3-9]+$")
_DEFAULT_COLLECTION = "defaultcollection"


@dataclass(eq=False)
class Repository:
    """A remote Azure DevOps git repository.

    Identity fields are fixed at construction. The REST repository record
    is fetched on first use and kept for the lifetime of the instance.
    """

    organization: str
    project: str
    name: str
    hostname: str
    _git_repository: Any = field(default=None, init=False, repr=False)

    @property
    def full_name(self) -> str:
        return f"{self.organization}/{self.project}/{self.name}"

    def __str__(self) -> str:
        return self.full_name

    def _key(self) -> tuple[str, str, str, str]:
        return (
            normalize_hostname(self.hostname),
            self.organization.lower(),
            self.project.lower(),
            self.name.lower(),
        )

    def equals(self, other: "Repository") -> bool:
        """Case-insensitive comparison of host, organization, project and name."""
        return self._key() == other._key()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Repository):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash(self._key())

    def remote_url(self, protocol: str) -> str:
        """Clone URL of the repository for the given git protocol."""
        if protocol.lower() == "ssh":
            return f"git@ssh.{self.hostname}:v3/{self.organization}/{self.project}/{self.name}"
        return f"https://{self.hostname}/{self.organization}/{self.project}/_git/{self.name}"

    @property
    def organization_url(self) -> str:
        return f"https://{self.hostname}/{self.organization}"

    @property
    def project_url(self) -> str:
        return f"{self.organization_url}/{self.project}"

    def git_repository(self, client: Any) -> Any:
        """Fetch the REST repository record (with its id) for this repository.

        Args:
            client: An Azure DevOps git client

        Returns:
            The GitRepository; cached after the first successful lookup

        Raises:
            NoResultsError: If the project has no repository with this name
            AzureDevOpsClientError: If the REST call fails
        """
        if self._git_repository is not None:
            return self._git_repository

        logger.debug(f"Listing repositories of project {self.project} in {self.organization}")
        try:
            repositories = client.get_repositories(project=self.project, include_hidden=True)
        except ClientException as e:
            raise AzureDevOpsClientError(
                f"failed to list repositories of project {self.project!r}: {e}"
            ) from e

        if not repositories:
            raise NoResultsError(
                f"project {self.project} at organization {self.organization} contains no repositories"
            )

        for repository in repositories:
            if (repository.name or "").lower() == self.name.lower():
                self._git_repository = repository
                return repository

        raise NoResultsError(
            f"repository {self.name} not found in project {self.project} "
            f"at organization {self.organization}"
        )


def hostname_for_organization(organization: str, config: AzdoConfig) -> str:
    """Normalized hostname of the configured URL of an organization."""
    try:
        url = config.get_url(organization)
    except ConfigError as e:
        raise ConfigError(f"failed to get hostname for organization {organization!r}: {e}") from e
    return hostname_from_url(url)


def new_repository(
    organization: str,
    project: str,
    name: str,
    config: AzdoConfig,
) -> Repository:
    """Create a Repository, using the default organization when none is given."""
    if not organization:
        organization = config.get_default_organization()
    return Repository(
        organization=organization,
        project=project,
        name=name,
        hostname=hostname_for_organization(organization, config),
    )


def is_azdo_remote_url(url: RemoteURL, config: AzdoConfig | None = None) -> bool:
    """Check whether a URL points to an Azure DevOps host.

    Besides dev.azure.com and *.visualstudio.com, hosts of configured
    organizations (e.g. Azure DevOps Server) are accepted.

    Raises:
        InvalidURLError: If the URL has no host or an unsupported scheme
    """
    if not url.hostname:
        raise InvalidURLError(f"no hostname detected in {str(url)!r}")
    if not is_supported_protocol(url.scheme):
        raise InvalidURLError(f"unsupported protocol {url.scheme!r}")
    if _AZDO_HOST_RE.search(url.hostname):
        return True
    return config is not None and normalize_hostname(url.hostname) in config.hostnames()


def _is_visualstudio_host(hostname: str) -> bool:
    return hostname.lower().endswith(".visualstudio.com") and not hostname.lower().startswith(
        "vs-ssh."
    )


def _split_path(url: RemoteURL, max_parts: int) -> list[str]:
    parts = url.path.strip("/").split("/")
    if len(parts) > max_parts:
        raise InvalidURLError(f"invalid path {url.path!r}")
    for part in parts:
        if not part.strip():
            raise InvalidURLError(f"invalid path {url.path!r}")
    return parts


def _path_segments(url: RemoteURL, config: AzdoConfig) -> list[str]:
    """Split an Azure DevOps URL into ``[organization, project, (repository)]``."""
    if not is_azdo_remote_url(url, config):
        raise InvalidURLError(f"url {str(url)!r} is not a valid Azure DevOps remote URL")

    parts = _split_path(url, 5)
    has_git_marker = any(part.lower() == "_git" for part in parts)

    if url.scheme in ("http", "https"):
        if _is_visualstudio_host(url.hostname):
            if parts[0].lower() == _DEFAULT_COLLECTION:
                parts = parts[1:]
            parts = [url.hostname.split(".", 1)[0], *parts]
        if has_git_marker:
            if len(parts) != 4 or parts[2].lower() != "_git":
                raise InvalidURLError(f"invalid path {url.path!r}")
            return [parts[0], parts[1], parts[3]]
        if len(parts) == 2:
            return parts
        raise InvalidURLError(f"invalid path {url.path!r} expecting /_git")

    if url.scheme == "ssh":
        if has_git_marker:
            raise InvalidURLError(f"invalid path {url.path!r} expecting no /_git")
        if not _SSH_VERSION_RE.fullmatch(parts[0]):
            raise InvalidURLError(
                f"invalid ssh url, expecting protocol version, not {parts[0]!r}"
            )
        parts = parts[1:]
        if len(parts) not in (2, 3):
            raise InvalidURLError(f"invalid path {url.path!r}")
        return parts

    raise InvalidURLError(f"unsupported scheme {url.scheme!r}")


def _check_hostname(url: RemoteURL, organization: str, config: AzdoConfig) -> str:
    hostname = hostname_for_organization(organization, config)
    url_hostname = normalize_hostname(url.hostname).removeprefix("ssh.")
    if hostname != url_hostname:
        raise CrossOrganizationMismatchError(url.hostname, hostname, organization)
    return hostname


def organization_from_url(url: RemoteURL, config: AzdoConfig) -> OrganizationName:
    """Extract the organization from an Azure DevOps URL."""
    if _is_visualstudio_host(url.hostname) and url.scheme in ("http", "https"):
        organization = url.hostname.split(".", 1)[0]
    else:
        parts = _split_path(url, 5)
        if url.scheme == "ssh" and _SSH_VERSION_RE.fullmatch(parts[0]):
            parts = parts[1:]
        if not parts:
            raise InvalidURLError(f"invalid path {url.path!r}")
        organization = parts[0]
    _check_hostname(url, organization, config)
    return OrganizationName(organization=organization)


def project_from_url(url: RemoteURL, config: AzdoConfig) -> ProjectName:
    """Extract organization and project from an Azure DevOps project or repository URL."""
    parts = _path_segments(url, config)
    _check_hostname(url, parts[0], config)
    return ProjectName(organization=parts[0], project=parts[1])


def repository_from_url(url: RemoteURL, config: AzdoConfig) -> Repository:
    """Extract the repository a git remote URL points to.

    Raises:
        InvalidURLError: If the URL is not an Azure DevOps repository URL
        CrossOrganizationMismatchError: If the URL host is not the organization's host
    """
    parts = _path_segments(url, config)
    if len(parts) != 3:
        raise InvalidURLError(f"invalid path {url.path!r}")
    organization, project, name = parts
    hostname = _check_hostname(url, organization, config)
    return Repository(
        organization=organization,
        project=project,
        name=name.removesuffix(".git"),
        hostname=hostname,
    )


def repository_from_name(value: str, config: AzdoConfig) -> Repository:
    """Resolve ``[ORGANIZATION/]PROJECT/REPO`` or a remote URL to a Repository."""
    if is_url(value):
        return repository_from_url(parse_url(value), config)

    name: RepositoryName = parse_repository_name(value, config)
    return new_repository(name.organization, name.project, name.name, config)
