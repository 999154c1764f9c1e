"""Resolve pull request selectors to pull requests."""

import re
from dataclasses import dataclass, field
from typing import Any

from msrest.exceptions import ClientException
from azure.devops.v7_1.git.models import GitPullRequestSearchCriteria

from azdo_cli.context import RepoContext
from azdo_cli.exceptions import (
    AzdoError,
    AzureDevOpsClientError,
    GitError,
    NoResultsError,
    with_context,
)
from azdo_cli.logging_config import get_logger
from azdo_cli.models.repository import Repository, new_repository, repository_from_url
from azdo_cli.utils.parsing import ByBranch, ByID, Selector, parse_selector

logger = get_logger("azdo_cli.services.finder")

_PR_HEAD_RE = re.compile(r"^refs/pull/(\d+)/head$")


@dataclass
class FindOptions:
    """What to look for.

    Attributes:
        selector: ``[[ORG/][PROJECT/]REPO:]#ID``; empty means the current branch
        base_branch: Branch the pull request must have as its source
        states: Statuses the pull request must be in (any of)
    """

    selector: str = ""
    base_branch: str = ""
    states: list[str] = field(default_factory=list)


@dataclass
class FindResult:
    pull_request: Any
    repository: Repository


@dataclass
class PRFinder:
    """Finds a single pull request from a selector or the checked-out branch."""

    context: RepoContext

    def find(self, options: FindOptions) -> FindResult:
        """Resolve ``options`` to a pull request and its repository.

        Raises:
            InvalidSelectorError: If the selector is malformed
            NoResultsError: If no pull request matches
            GitError: If the current branch cannot be inspected
            AzureDevOpsClientError: If a REST call fails
        """
        override: Repository | None = None
        if options.selector:
            selector: Selector = parse_selector(options.selector)
            if selector.is_qualified:
                # fully qualified selectors target their own organization
                try:
                    override = new_repository(
                        selector.organization,
                        selector.project,
                        selector.repository,
                        self.context.config,
                    )
                except AzdoError as e:
                    raise with_context(e, "failed to get repo") from e
        else:
            selector = self.parse_current_branch()

        try:
            repo = self.context.repo(override)
        except AzdoError as e:
            raise with_context(e, "failed to get repo") from e

        try:
            git_client = self.context.git_client(repo)
        except AzdoError as e:
            raise with_context(e, "failed to get git client") from e

        match selector:
            case ByBranch():
                pr = self._find_by_branch(selector, repo, git_client)
            case ByID():
                pr = self._find_by_id(selector, options, repo, git_client)

        if options.states and not any(
            str(pr.status).lower() == state.lower() for state in options.states
        ):
            raise NoResultsError(
                f"pull request {options.selector!r} is not in any of the specified states "
                f"{options.states}"
            )

        return FindResult(pull_request=pr, repository=repo)

    def _find_by_branch(self, selector: ByBranch, repo: Repository, git_client: Any) -> Any:
        git_repository = self.context.git_repository(repo)

        # The owner qualifier is informational; the search is scoped to repo.
        logger.debug(f"Searching pull request for branch {selector.qualified_name} in {repo}")
        criteria = GitPullRequestSearchCriteria(source_ref_name=f"refs/heads/{selector.branch}")
        try:
            pull_requests = git_client.get_pull_requests(
                repository_id=str(git_repository.id),
                search_criteria=criteria,
                project=repo.project,
                top=1,
            )
        except ClientException as e:
            raise AzureDevOpsClientError(f"failed to get PR list from git repo: {e}") from e

        if not pull_requests:
            raise NoResultsError("pull request not found")
        return pull_requests[0]

    def _find_by_id(
        self,
        selector: ByID,
        options: FindOptions,
        repo: Repository,
        git_client: Any,
    ) -> Any:
        logger.debug(f"Getting pull request {selector.number} in project {repo.project}")
        try:
            pr = git_client.get_pull_request_by_id(
                pull_request_id=selector.number,
                project=repo.project,
            )
        except ClientException as e:
            raise AzureDevOpsClientError(f"failed to get PR by ID: {e}") from e

        if pr is None:
            raise NoResultsError("pull request not found")

        if options.base_branch:
            source_branch = f"refs/heads/{options.base_branch}"
            if (pr.source_ref_name or "").lower() != source_branch.lower():
                raise NoResultsError(
                    f"pull request {options.selector!r} does not have base branch "
                    f"{options.base_branch!r}"
                )
        return pr

    def parse_current_branch(self) -> Selector:
        """Derive a selector from the checked-out branch and its git config.

        A branch merging ``refs/pull/<N>/head`` selects pull request N.
        Otherwise the branch is selected by name, qualified with the
        repository it is pushed to when that is not the current one.
        """
        git = self.context.git
        try:
            branch = git.current_branch()
        except GitError as e:
            raise with_context(e, "failed to get current branch") from e

        branch_config = git.read_branch_config(branch)

        match = _PR_HEAD_RE.fullmatch(branch_config.merge_ref)
        if match:
            return ByID(number=int(match.group(1)))

        owner = ""
        if branch_config.remote_url is not None:
            try:
                owner = repository_from_url(branch_config.remote_url, self.context.config).full_name
            except AzdoError as e:
                logger.debug(f"Branch remote URL does not resolve to a repository: {e}")
        elif branch_config.remote_name:
            try:
                remote = self.context.remotes().find_by_name(branch_config.remote_name)
                owner = remote.repository.full_name
            except AzdoError as e:
                logger.debug(f"Branch remote {branch_config.remote_name} not usable: {e}")

        if not owner:
            return ByBranch(branch=branch)

        if branch_config.merge_ref.startswith("refs/heads/"):
            branch = branch_config.merge_ref.removeprefix("refs/heads/")

        try:
            current = self.context.repo()
        except AzdoError as e:
            raise with_context(e, "failed to get repo") from e

        if owner.lower() == current.full_name.lower():
            return ByBranch(branch=branch)
        return ByBranch(branch=branch, owner=owner)
