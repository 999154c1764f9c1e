"""Tests for the azdo command line."""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from azdo_cli import __version__
from azdo_cli.cli import app
from azdo_cli.models.remote import GitRemote
from azdo_cli.services.config_loader import get_config_file
from azdo_cli.utils.git_url import parse_url

runner = CliRunner()


@pytest.fixture
def use_context(context):
    """Make every command run against the mocked context."""
    with patch("azdo_cli.context.RepoContext.create", return_value=context) as create:
        yield create


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


class TestPRView:
    def test_view(self, use_context):
        result = runner.invoke(app, ["pr", "view", "42"])

        assert result.exit_code == 0, result.output
        assert "Add widgets" in result.output
        assert "#42" in result.output
        assert "Mona Lisa" in result.output
        assert "feature" in result.output

    def test_view_json(self, use_context):
        result = runner.invoke(app, ["pr", "view", "42", "--json"])

        assert result.exit_code == 0, result.output
        assert '"pull_request_id": 42' in result.output
        assert '"title": "Add widgets"' in result.output

    def test_repo_option(self, use_context):
        runner.invoke(app, ["pr", "view", "42", "-R", "otherorg/proj/repo"])

        use_context.assert_called_once_with("otherorg/proj/repo")

    def test_repo_from_environment(self, use_context):
        runner.invoke(app, ["pr", "view", "42"], env={"AZDO_REPO": "otherorg/proj/repo"})

        use_context.assert_called_once_with("otherorg/proj/repo")

    def test_not_found(self, use_context, git_client):
        git_client.get_pull_request_by_id.return_value = None

        result = runner.invoke(app, ["pr", "view", "99"])

        assert result.exit_code == 1
        assert "pull request not found" in result.output

    def test_state_filter(self, use_context):
        result = runner.invoke(app, ["pr", "view", "42", "--state", "completed"])

        assert result.exit_code == 1
        assert "not in any of the specified states" in result.output

    def test_invalid_selector(self, use_context):
        result = runner.invoke(app, ["pr", "view", "nope"])

        assert result.exit_code == 1
        assert "not a valid pull request selector" in result.output


class TestPRCheckout:
    def test_existing_local_branch(self, use_context, git):
        git.has_local_branch.return_value = True

        result = runner.invoke(app, ["pr", "checkout", "42"])

        assert result.exit_code == 0, result.output
        git.checkout_branch.assert_called_once_with("feature")
        git.fetch.assert_not_called()

    def test_fetches_remote_branch(self, use_context, git):
        git.has_local_branch.return_value = False
        git.has_remote_branch.return_value = True

        result = runner.invoke(app, ["pr", "checkout", "42"])

        assert result.exit_code == 0, result.output
        git.fetch.assert_called_once_with(
            "origin", "+refs/heads/feature:refs/remotes/origin/feature"
        )
        git.checkout_new_branch.assert_called_once_with("origin", "feature")
        assert "Switched to branch feature" in result.output

    def test_remote_branch_missing(self, use_context, git):
        git.has_local_branch.return_value = False
        git.has_remote_branch.return_value = False

        result = runner.invoke(app, ["pr", "checkout", "42"])

        assert result.exit_code == 1
        git.checkout_new_branch.assert_not_called()

    def test_no_remote_for_repository(self, use_context, git):
        git.has_local_branch.return_value = False

        result = runner.invoke(app, ["pr", "checkout", "otherorg/proj2/repo2:42"])

        assert result.exit_code == 1
        assert "no git remote points to otherorg/proj2/repo2" in result.output


class TestRepo:
    def test_remotes(self, use_context):
        result = runner.invoke(app, ["repo", "remotes"])

        assert result.exit_code == 0, result.output
        assert "origin" in result.output
        assert "myorg/proj/repo" in result.output

    def test_url(self, use_context):
        result = runner.invoke(app, ["repo", "url"])

        assert result.exit_code == 0, result.output
        assert result.output.strip() == "https://dev.azure.com/myorg/proj/_git/repo"

    def test_url_ssh(self, use_context):
        result = runner.invoke(app, ["repo", "url", "--protocol", "ssh"])

        assert result.output.strip() == "git@ssh.dev.azure.com:v3/myorg/proj/repo"

    def test_url_invalid_protocol(self, use_context):
        result = runner.invoke(app, ["repo", "url", "--protocol", "ftp"])

        assert result.exit_code == 2

    def test_url_without_remotes(self, use_context, git):
        git.remotes.return_value = []

        result = runner.invoke(app, ["repo", "url"])

        assert result.exit_code == 1
        assert "use --repo" in result.output

    def test_set_default_by_name(self, use_context, git):
        git.is_local_git_repo.return_value = True

        result = runner.invoke(app, ["repo", "set-default", "myorg/proj/repo"])

        assert result.exit_code == 0, result.output
        git.set_remote_resolution.assert_called_once_with("origin", "default")

    def test_set_default_prompts(self, use_context, git):
        git.is_local_git_repo.return_value = True
        git.remotes.return_value = [
            GitRemote(
                name="origin",
                fetch_url=parse_url("https://dev.azure.com/myorg/proj/_git/repo"),
                resolved="default",
            ),
            GitRemote(
                name="upstream",
                fetch_url=parse_url("https://dev.azure.com/myorg/proj/_git/main"),
            ),
        ]

        result = runner.invoke(app, ["repo", "set-default"], input="2\n")

        assert result.exit_code == 0, result.output
        git.unset_remote_resolution.assert_called_once_with("origin")
        git.set_remote_resolution.assert_called_once_with("origin", "default")

    def test_set_default_unknown_repository(self, use_context, git):
        git.is_local_git_repo.return_value = True

        result = runner.invoke(app, ["repo", "set-default", "myorg/proj/other"])

        assert result.exit_code == 1
        git.set_remote_resolution.assert_not_called()

    def test_set_default_view(self, use_context, git):
        git.is_local_git_repo.return_value = True
        git.remotes.return_value[0].resolved = "default"

        result = runner.invoke(app, ["repo", "set-default", "--view"])

        assert result.exit_code == 0, result.output
        assert "myorg/proj/repo" in result.output

    def test_set_default_outside_git_repository(self, use_context, git):
        git.is_local_git_repo.return_value = False

        result = runner.invoke(app, ["repo", "set-default", "myorg/proj/repo"])

        assert result.exit_code == 1
        assert "inside a git repository" in result.output


class TestConfig:
    @pytest.fixture
    def config_file(self):
        config_file = get_config_file()
        config_file.parent.mkdir(parents=True, exist_ok=True)
        config_file.write_text(
            json.dumps(
                {
                    "organizations": {
                        "myorg": {"url": "https://dev.azure.com/myorg", "token": "t"},
                        "other": {"url": "https://dev.azure.com/other"},
                    }
                }
            )
        )
        return config_file

    def test_list(self, config_file):
        result = runner.invoke(app, ["config", "list"])

        assert result.exit_code == 0, result.output
        assert "myorg" in result.output
        assert "https://dev.azure.com/other" in result.output

    def test_list_empty(self):
        result = runner.invoke(app, ["config", "list"])

        assert result.exit_code == 0
        assert "No organizations configured" in result.output

    def test_set_default_org(self, config_file):
        result = runner.invoke(app, ["config", "set-default-org", "other"])

        assert result.exit_code == 0, result.output
        assert json.loads(config_file.read_text())["default_organization"] == "other"

    def test_set_unknown_default_org(self, config_file):
        result = runner.invoke(app, ["config", "set-default-org", "missing"])

        assert result.exit_code == 1
        assert "default_organization" not in json.loads(config_file.read_text())
