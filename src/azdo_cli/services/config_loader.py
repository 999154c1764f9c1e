"""Configuration file loader for azdo-cli."""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from azdo_cli.exceptions import ConfigError
from azdo_cli.logging_config import get_logger
from azdo_cli.utils.git_url import hostname_from_url

logger = get_logger("azdo_cli.services.config_loader")

CONFIG_DIR_ENV = "AZDO_CONFIG_DIR"
ORGANIZATION_ENV = "AZDO_ORGANIZATION"
TOKEN_ENV = "AZDO_TOKEN"

DEFAULT_GIT_PROTOCOL = "https"


def get_config_file() -> Path:
    """Location of the config file, honoring AZDO_CONFIG_DIR."""
    config_dir = os.environ.get(CONFIG_DIR_ENV)
    if config_dir:
        return Path(config_dir) / "config.json"
    return Path.home() / ".azdo" / "config.json"


@dataclass
class OrganizationConfig:
    """Settings for a single Azure DevOps organization."""

    url: str
    git_protocol: str = DEFAULT_GIT_PROTOCOL
    token: str | None = None


@dataclass
class AzdoConfig:
    """azdo-cli configuration.

    Organization names are stored lower-cased; every lookup is
    case-insensitive.
    """

    organizations: dict[str, OrganizationConfig] = field(default_factory=dict)
    default_organization: str | None = None

    def get_organizations(self) -> list[str]:
        return sorted(self.organizations)

    def _organization(self, organization: str) -> OrganizationConfig:
        org_config = self.organizations.get(organization.lower())
        if org_config is None:
            raise ConfigError(f"organization {organization!r} is not configured")
        return org_config

    def get_url(self, organization: str) -> str:
        """Base URL of an organization, e.g. https://dev.azure.com/myorg."""
        return self._organization(organization).url

    def get_git_protocol(self, organization: str) -> str:
        org_config = self.organizations.get(organization.lower())
        if org_config is None or not org_config.git_protocol:
            return DEFAULT_GIT_PROTOCOL
        return org_config.git_protocol

    def get_token(self, organization: str) -> str:
        """Personal access token for an organization.

        AZDO_TOKEN takes precedence over the config file.
        """
        env_token = os.environ.get(TOKEN_ENV)
        if env_token:
            return env_token
        token = self._organization(organization).token
        if not token:
            raise ConfigError(
                f"no token configured for organization {organization!r}; set {TOKEN_ENV}"
            )
        return token

    def get_default_organization(self) -> str:
        """Resolve the default organization.

        Order: AZDO_ORGANIZATION, the only configured organization, then
        the ``default_organization`` setting.

        Raises:
            ConfigError: If no default organization is defined
        """
        organization = os.environ.get(ORGANIZATION_ENV)
        if organization is None:
            if len(self.organizations) == 1:
                organization = next(iter(self.organizations))
            else:
                organization = self.default_organization or ""
        organization = organization.strip()
        if not organization:
            raise ConfigError("no default organization defined")
        return organization

    def hostnames(self) -> set[str]:
        """Normalized hostnames of all configured organization URLs."""
        return {hostname_from_url(org.url) for org in self.organizations.values()}


def load_config() -> AzdoConfig:
    """Load configuration from the config file.

    Returns:
        AzdoConfig with values from file or defaults.
    """
    config_file = get_config_file()
    if not config_file.exists():
        logger.debug(f"Config file not found: {config_file}")
        return AzdoConfig()

    try:
        with config_file.open() as f:
            data = json.load(f)
        return _from_dict(data)
    except (json.JSONDecodeError, OSError, AttributeError, TypeError, KeyError) as e:
        logger.warning(f"Failed to load config file: {e}")
        return AzdoConfig()


def _from_dict(data: dict[str, Any]) -> AzdoConfig:
    organizations = {
        name.lower(): OrganizationConfig(
            url=values["url"],
            git_protocol=values.get("git_protocol", DEFAULT_GIT_PROTOCOL),
            token=values.get("token"),
        )
        for name, values in data.get("organizations", {}).items()
    }
    default_organization = data.get("default_organization")
    return AzdoConfig(
        organizations=organizations,
        default_organization=default_organization.lower() if default_organization else None,
    )


def save_default_organization(organization: str) -> bool:
    """Persist the default organization to the config file.

    The organization must already be configured.

    Returns:
        True if saved, False otherwise.
    """
    config_file = get_config_file()
    data: dict[str, Any] = {}
    if config_file.exists():
        try:
            with config_file.open() as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to read config file: {e}")
            return False

    known = {name.lower() for name in data.get("organizations", {})}
    if organization.lower() not in known:
        logger.warning(f"Organization not configured: {organization}")
        return False

    data["default_organization"] = organization.lower()
    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        with config_file.open("w") as f:
            json.dump(data, f, indent=2)
        logger.info(f"Saved default organization: {organization}")
        return True
    except OSError as e:
        logger.warning(f"Failed to write config file: {e}")
        return False
