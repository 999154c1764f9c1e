"""Shared fixtures."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from azdo_cli.context import RepoContext
from azdo_cli.models.remote import GitRemote
from azdo_cli.services.azure_devops import ClientFactory
from azdo_cli.services.config_loader import AzdoConfig, OrganizationConfig
from azdo_cli.services.git import BranchConfig, GitService
from azdo_cli.utils.git_url import parse_url


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep the user's environment and config file out of the tests."""
    monkeypatch.delenv("AZDO_ORGANIZATION", raising=False)
    monkeypatch.delenv("AZDO_TOKEN", raising=False)
    monkeypatch.delenv("AZDO_REPO", raising=False)
    monkeypatch.setenv("AZDO_CONFIG_DIR", str(tmp_path / "azdo"))


@pytest.fixture
def config() -> AzdoConfig:
    return AzdoConfig(
        organizations={
            "myorg": OrganizationConfig(url="https://dev.azure.com/myorg", token="secret"),
            "otherorg": OrganizationConfig(
                url="https://dev.azure.com/otherorg", git_protocol="ssh", token="secret"
            ),
            "fabrikam": OrganizationConfig(url="https://fabrikam.visualstudio.com"),
            "onprem": OrganizationConfig(url="https://azdo.example.com/onprem"),
        },
        default_organization="myorg",
    )


def make_pr(**overrides):
    values = {
        "pull_request_id": 42,
        "title": "Add widgets",
        "status": "active",
        "source_ref_name": "refs/heads/feature",
        "target_ref_name": "refs/heads/main",
        "created_by": SimpleNamespace(display_name="Mona Lisa"),
        "reviewers": [SimpleNamespace(display_name="Hubot")],
        "description": "Adds the widgets.",
        "is_draft": False,
    }
    values.update(overrides)
    pr = SimpleNamespace(**values)
    pr.as_dict = lambda: {k: v for k, v in values.items() if isinstance(v, (str, int, bool))}
    return pr


@pytest.fixture
def git() -> MagicMock:
    git = MagicMock(spec=GitService)
    git.remotes.return_value = [
        GitRemote(
            name="origin",
            fetch_url=parse_url("https://dev.azure.com/myorg/proj/_git/repo"),
            push_url=parse_url("https://dev.azure.com/myorg/proj/_git/repo"),
        ),
    ]
    git.current_branch.return_value = "feature"
    git.read_branch_config.return_value = BranchConfig()
    return git


@pytest.fixture
def git_client() -> MagicMock:
    client = MagicMock()
    client.get_pull_request_by_id.return_value = make_pr()
    client.get_pull_requests.return_value = [make_pr()]
    client.get_repositories.return_value = [SimpleNamespace(name="repo", id="repo-id")]
    return client


@pytest.fixture
def context(config, git, git_client) -> RepoContext:
    clients = MagicMock(spec=ClientFactory)
    clients.git_client.return_value = git_client
    return RepoContext(config=config, git=git, clients=clients)


@pytest.fixture
def pull_request():
    """Factory for REST pull request records."""
    return make_pr
