"""Azure DevOps REST connections and clients."""

from dataclasses import dataclass, field

from azure.devops.connection import Connection
from azure.devops.v7_1.git.git_client import GitClient
from msrest.authentication import BasicAuthentication

from azdo_cli.exceptions import AzureDevOpsClientError, ConfigError
from azdo_cli.logging_config import get_logger
from azdo_cli.services.config_loader import AzdoConfig

logger = get_logger("azdo_cli.services.azure_devops")


@dataclass
class ClientFactory:
    """Creates REST clients, keeping one connection per organization."""

    config: AzdoConfig
    _connections: dict[str, Connection] = field(default_factory=dict, repr=False)

    def connection(self, organization: str) -> Connection:
        """
        Get the connection for an organization.

        Raises:
            AzureDevOpsClientError: If the organization URL or token is missing
        """
        key = organization.lower()
        if key in self._connections:
            return self._connections[key]

        try:
            url = self.config.get_url(organization)
            token = self.config.get_token(organization)
        except ConfigError as e:
            raise AzureDevOpsClientError(
                f"failed to connect to organization {organization!r}: {e}"
            ) from e

        logger.debug(f"Connecting to {url}")
        credentials = BasicAuthentication("", token)
        connection = Connection(base_url=url, creds=credentials)
        self._connections[key] = connection
        return connection

    def git_client(self, organization: str) -> GitClient:
        """
        Get the git client for an organization.

        Raises:
            AzureDevOpsClientError: If connection or client creation fails
        """
        git_client = self.connection(organization).clients_v7_1.get_git_client()

        if git_client is None:
            raise AzureDevOpsClientError("Failed to get git client.")

        return git_client
