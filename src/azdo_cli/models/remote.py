"""Git remotes mapped to Azure DevOps repositories."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from azdo_cli.exceptions import AzdoError, NoResultsError
from azdo_cli.logging_config import get_logger
from azdo_cli.models.repository import Repository, repository_from_url
from azdo_cli.services.config_loader import AzdoConfig
from azdo_cli.utils.git_url import RemoteURL

logger = get_logger("azdo_cli.models.remote")

_REMOTE_PRIORITY = {"upstream": 3, "azdo": 2, "origin": 1}


def remote_name_sort_score(name: str) -> int:
    """Rank remote names: upstream > azdo > origin > anything else."""
    return _REMOTE_PRIORITY.get(name.lower(), 0)


@dataclass
class GitRemote:
    """A remote as configured in the local git repository."""

    name: str
    fetch_url: RemoteURL | None = None
    push_url: RemoteURL | None = None
    # value of remote.<name>.azdo-resolved
    resolved: str = ""

    def __str__(self) -> str:
        return self.name


@dataclass
class Remote:
    """A git remote together with the Azure DevOps repository it points to."""

    git_remote: GitRemote
    repository: Repository

    @property
    def name(self) -> str:
        return self.git_remote.name

    @property
    def fetch_url(self) -> RemoteURL | None:
        return self.git_remote.fetch_url

    @property
    def push_url(self) -> RemoteURL | None:
        return self.git_remote.push_url

    @property
    def resolved(self) -> str:
        return self.git_remote.resolved

    def __str__(self) -> str:
        return self.name


class Remotes(list[Remote]):
    """An ordered set of remotes."""

    def find_by_name(self, *names: str) -> Remote:
        """Return the first remote matching the candidate names.

        Candidates are tried in order; ``*`` matches the first remote.

        Raises:
            NoResultsError: If no candidate matches
        """
        for name in names:
            for remote in self:
                if name == "*" or remote.name == name:
                    return remote
        raise NoResultsError("no matching remote found")

    def find_by_repo(self, project: str, name: str) -> Remote:
        """Return the first remote pointing to the given project and repository."""
        for remote in self:
            if (
                remote.repository.project.lower() == project.lower()
                and remote.repository.name.lower() == name.lower()
            ):
                return remote
        raise NoResultsError("no matching remote found")

    def filter_by_organization(self, organizations: Iterable[str]) -> "Remotes":
        """Keep remotes of the given organizations, preserving order."""
        wanted = {organization.lower() for organization in organizations}
        return Remotes(r for r in self if r.repository.organization.lower() in wanted)

    def resolved_remote(self) -> Remote:
        """Return the remote marked as default via ``azdo-resolved``."""
        for remote in self:
            if remote.resolved:
                return remote
        raise NoResultsError("no resolved remote found")

    def default_remote(self) -> Remote:
        """Return the remote to use when no repository is given explicitly.

        The explicitly resolved remote wins; otherwise the first remote.
        """
        if not self:
            raise NoResultsError("no Azure DevOps remotes found")
        try:
            return self.resolved_remote()
        except NoResultsError:
            return self[0]

    def sorted_by_priority(self) -> "Remotes":
        """Stable sort by remote name priority."""
        return Remotes(sorted(self, key=lambda r: remote_name_sort_score(r.name), reverse=True))


class Translator(Protocol):
    def translate(self, url: RemoteURL) -> RemoteURL: ...


class IdentityTranslator:
    """Translator that leaves URLs unchanged."""

    def translate(self, url: RemoteURL) -> RemoteURL:
        return url


def _resolve(url: RemoteURL | None, translator: Translator, config: AzdoConfig) -> Repository | None:
    if url is None:
        return None
    try:
        return repository_from_url(translator.translate(url), config)
    except AzdoError as e:
        logger.debug(f"URL {url} does not resolve to an Azure DevOps repository: {e}")
        return None


def translate_remotes(
    git_remotes: Iterable[GitRemote],
    translator: Translator,
    config: AzdoConfig,
) -> Remotes:
    """Map git remotes to Azure DevOps repositories.

    The fetch URL is tried first, then the push URL. Remotes pointing
    elsewhere (e.g. GitHub) are dropped.
    """
    remotes = Remotes()
    for git_remote in git_remotes:
        repository = _resolve(git_remote.fetch_url, translator, config)
        if repository is None:
            repository = _resolve(git_remote.push_url, translator, config)
        if repository is None:
            logger.debug(f"Skipping remote {git_remote.name}")
            continue
        remotes.append(Remote(git_remote=git_remote, repository=repository))
    return remotes
