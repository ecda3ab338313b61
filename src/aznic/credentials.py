"""Credential and client factory for Azure authentication.

Bridges AzureEnvironment (read from the environment) and the Azure SDK:
- ClientSecretCredential for the service principal
- One management client per resource provider the sample touches

Security:
- No token storage - delegates to Azure Identity SDK
- Client secret from environment variables only
- Log sanitization for all error messages
"""

import logging

from azure.core.exceptions import AzureError
from azure.identity import ClientSecretCredential
from azure.mgmt.compute import ComputeManagementClient
from azure.mgmt.network import NetworkManagementClient
from azure.mgmt.resource import ResourceManagementClient
from azure.mgmt.storage import StorageManagementClient

from aznic import __version__
from aznic.config import AzureEnvironment
from aznic.context import AzureClients
from aznic.exceptions import AuthenticationError
from aznic.log_sanitizer import LogSanitizer

logger = logging.getLogger(__name__)

MANAGEMENT_SCOPE = "https://management.azure.com/.default"
USER_AGENT = f"aznic/{__version__}"


class CredentialFactory:
    """Factory for the service principal credential used by every client.

    Philosophy:
    - Ruthless simplicity: delegate to Azure SDK, don't reinvent
    - Fail-fast: acquire a token up front so a bad secret is reported before
      any resource is created
    """

    @staticmethod
    def create_credential(env: AzureEnvironment) -> ClientSecretCredential:
        """Create the service principal credential.

        Raises:
            AuthenticationError: If the credential cannot be constructed
        """
        try:
            return ClientSecretCredential(
                tenant_id=env.tenant_id,
                client_id=env.client_id,
                client_secret=env.client_secret,
            )
        except (AzureError, ValueError) as e:
            safe_error = LogSanitizer.sanitize_exception(e)
            raise AuthenticationError(
                "Failed to create service principal credential", safe_error
            ) from e

    @classmethod
    def authenticate(cls, env: AzureEnvironment) -> ClientSecretCredential:
        """Create the credential and prove it works by fetching a token.

        Raises:
            AuthenticationError: If token acquisition fails
        """
        credential = cls.create_credential(env)
        logger.debug(
            f"Requesting management token for client {LogSanitizer.mask_uuids(env.client_id)}"
        )
        try:
            credential.get_token(MANAGEMENT_SCOPE)
        except AzureError as e:
            safe_error = LogSanitizer.sanitize_exception(e)
            raise AuthenticationError("Authentication failed", safe_error) from e
        return credential


def build_clients(env: AzureEnvironment, credential) -> AzureClients:
    """Create the four management clients sharing one credential.

    Args:
        env: Subscription to target
        credential: Any azure-core TokenCredential

    Returns:
        AzureClients with resources, network, storage and compute clients
    """
    subscription_id = env.subscription_id
    return AzureClients(
        resources=ResourceManagementClient(credential, subscription_id, user_agent=USER_AGENT),
        network=NetworkManagementClient(credential, subscription_id, user_agent=USER_AGENT),
        storage=StorageManagementClient(credential, subscription_id, user_agent=USER_AGENT),
        compute=ComputeManagementClient(credential, subscription_id, user_agent=USER_AGENT),
    )
