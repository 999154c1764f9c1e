"""Per-invocation access to configuration, git and the REST API."""

from dataclasses import dataclass, field
from typing import Any

from azdo_cli.exceptions import NoResultsError
from azdo_cli.models.remote import IdentityTranslator, Remotes, translate_remotes
from azdo_cli.models.repository import Repository, repository_from_name
from azdo_cli.services.azure_devops import ClientFactory
from azdo_cli.services.config_loader import AzdoConfig, load_config
from azdo_cli.services.git import GitService


@dataclass
class RepoContext:
    """Resolves the repository a command operates on.

    ``repo_override`` holds the ``--repo`` flag (or ``AZDO_REPO``) value.
    """

    config: AzdoConfig
    git: GitService
    clients: ClientFactory
    repo_override: str | None = None
    _remotes: Remotes | None = field(default=None, init=False, repr=False)
    _override_repo: Repository | None = field(default=None, init=False, repr=False)

    @classmethod
    def create(cls, repo_override: str | None = None) -> "RepoContext":
        config = load_config()
        return cls(
            config=config,
            git=GitService(),
            clients=ClientFactory(config),
            repo_override=repo_override or None,
        )

    def remotes(self) -> Remotes:
        """Local git remotes that point to Azure DevOps, most preferred first."""
        if self._remotes is None:
            git_remotes = self.git.remotes()
            translated = translate_remotes(git_remotes, IdentityTranslator(), self.config)
            self._remotes = translated.sorted_by_priority()
        return self._remotes

    def repo(self, override: Repository | None = None) -> Repository:
        """The repository to operate on.

        Precedence: ``override``, then ``repo_override``, then the default
        remote of the local git repository.
        """
        if override is not None:
            return override
        if self.repo_override:
            if self._override_repo is None:
                self._override_repo = repository_from_name(self.repo_override, self.config)
            return self._override_repo
        try:
            return self.remotes().default_remote().repository
        except NoResultsError as e:
            raise NoResultsError(
                "no Azure DevOps remote found; use --repo to select a repository"
            ) from e

    def git_client(self, repo: Repository) -> Any:
        return self.clients.git_client(repo.organization)

    def git_repository(self, repo: Repository) -> Any:
        """REST repository record of ``repo``."""
        return repo.git_repository(self.git_client(repo))
