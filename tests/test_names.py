"""Tests for organization, project and repository names."""

import pytest

from azdo_cli.exceptions import ConfigError, InvalidNameError
from azdo_cli.models.names import (
    OrganizationName,
    ProjectName,
    RepositoryName,
    is_valid_organization,
    is_valid_project,
    is_valid_repository,
    parse_organization_name,
    parse_project_name,
    parse_repository_name,
)
from azdo_cli.services.config_loader import AzdoConfig


class TestValidation:
    def test_organization_length_limit(self):
        assert is_valid_organization("o" * 50)
        assert not is_valid_organization("o" * 51)

    @pytest.mark.parametrize("value", ["myorg", "my-org", "Org1", "a"])
    def test_valid_organizations(self, value):
        assert is_valid_organization(value)

    @pytest.mark.parametrize(
        "value", ["", "-org", "org-", "my org", "my_org", "org.name", "myorg\n"]
    )
    def test_invalid_organizations(self, value):
        assert not is_valid_organization(value)

    def test_project_and_repository_length_limit(self):
        assert is_valid_project("p" * 64)
        assert not is_valid_project("p" * 65)
        assert is_valid_repository("r" * 64)
        assert not is_valid_repository("r" * 65)

    @pytest.mark.parametrize("value", ["My Project", "proj.v2", "proj_1", "a-b"])
    def test_valid_segments(self, value):
        assert is_valid_project(value)
        assert is_valid_repository(value)

    @pytest.mark.parametrize(
        "value", ["", "_proj", ".proj", "proj.", "proj/x", "proj#1", "proj\n"]
    )
    def test_invalid_segments(self, value):
        assert not is_valid_project(value)
        assert not is_valid_repository(value)


class TestFullName:
    def test_nested_names(self):
        assert OrganizationName("myorg").full_name == "myorg"
        assert ProjectName("myorg", "proj").full_name == "myorg/proj"
        assert RepositoryName("myorg", "proj", "repo").full_name == "myorg/proj/repo"

    def test_empty_organization_is_omitted(self):
        assert ProjectName("", "proj").full_name == "proj"
        assert RepositoryName("", "proj", "repo").full_name == "proj/repo"

    def test_repository_name_is_a_project_name(self):
        assert isinstance(RepositoryName("myorg", "proj", "repo"), ProjectName)


class TestParse:
    def test_organization(self):
        assert parse_organization_name("myorg") == OrganizationName("myorg")

    def test_invalid_organization(self):
        with pytest.raises(InvalidNameError, match="ORGANIZATION"):
            parse_organization_name("not/valid")

    def test_project_with_organization(self):
        name = parse_project_name("myorg/My Project")

        assert name.organization == "myorg"
        assert name.project == "My Project"

    def test_project_without_organization_or_config(self):
        assert parse_project_name("proj") == ProjectName("", "proj")

    def test_project_uses_default_organization(self, config):
        assert parse_project_name("proj", config).organization == "myorg"

    def test_repository_full_name_round_trip(self):
        name = parse_repository_name("myorg/proj/repo")

        assert name == RepositoryName("myorg", "proj", "repo")
        assert parse_repository_name(name.full_name) == name

    def test_repository_uses_default_organization(self, config):
        name = parse_repository_name("proj/repo", config)

        assert name.full_name == "myorg/proj/repo"

    def test_repository_without_default_organization(self):
        empty = AzdoConfig()

        with pytest.raises(ConfigError, match="no default organization"):
            parse_repository_name("proj/repo", empty)

    def test_repository_default_from_environment(self, config, monkeypatch):
        monkeypatch.setenv("AZDO_ORGANIZATION", "otherorg")

        assert parse_repository_name("proj/repo", config).organization == "otherorg"

    @pytest.mark.parametrize(
        "value",
        [
            "repo",
            "a/b/c/d",
            "myorg/_proj/repo",
            "myorg/proj/repo.",
            "-org/proj/repo",
            "proj/",
            "myorg/proj/repo\n",
        ],
    )
    def test_invalid_repository(self, value):
        with pytest.raises(InvalidNameError, match=r"\[ORGANIZATION/\]PROJECT/REPO"):
            parse_repository_name(value)
