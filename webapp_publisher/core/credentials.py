# webapp_publisher/core/credentials.py
"""Credential acquisition and management client construction"""

import logging
from typing import Optional, Tuple
from urllib.parse import urlparse

from azure.core.credentials import AccessToken
from azure.core.exceptions import AzureError
from azure.identity import UsernamePasswordCredential
from azure.mgmt.resource.resources.aio import ResourceManagementClient
from azure.mgmt.web.aio import WebSiteManagementClient

from ..api.exceptions import AuthenticationError, ConfigurationError
from ..constants import DEFAULT_TENANT
from ..models.config import AUTH_FIELDS, PublishConfig
from ..models.remote import Credentials
from ..utils.async_utils import run_blocking

logger = logging.getLogger(__name__)


class StaticTokenCredential:
    """Async token credential that hands out an already acquired token"""

    def __init__(self, credentials: Credentials):
        self._credentials = credentials

    async def get_token(self, *scopes, claims: Optional[str] = None,
                        tenant_id: Optional[str] = None, **kwargs) -> AccessToken:
        return AccessToken(self._credentials.token, self._credentials.expires_on)

    async def close(self) -> None:
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


class AzureSession:
    """Credentials plus the management clients bound to them

    Owned by a single publish or cleanup run; closing it closes both clients.
    """

    def __init__(self,
                 credentials: Credentials,
                 credential: StaticTokenCredential,
                 resource_client: ResourceManagementClient,
                 web_client: WebSiteManagementClient):
        self.credentials = credentials
        self.credential = credential
        self.resource_client = resource_client
        self.web_client = web_client

    @property
    def subscription_id(self) -> str:
        return self.credentials.subscription_id

    async def close(self) -> None:
        """Close management clients"""
        await self.resource_client.close()
        await self.web_client.close()
        await self.credential.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


def split_authority(authority_url: str) -> Tuple[str, str]:
    """
    Split an authority URL into authority host and tenant

    ``https://login.microsoftonline.com/contoso.onmicrosoft.com`` becomes
    ``("login.microsoftonline.com", "contoso.onmicrosoft.com")``.

    Raises:
        ConfigurationError: If the URL has no scheme or host
    """
    parsed = urlparse(authority_url)
    if not parsed.scheme or not parsed.netloc:
        raise ConfigurationError(f"Invalid authority URL: {authority_url}")

    tenant = parsed.path.strip("/").split("/")[0] or DEFAULT_TENANT
    return parsed.netloc, tenant


async def acquire_token(config: PublishConfig) -> Credentials:
    """
    Exchange username/password for a management bearer token

    Args:
        config: Publish configuration holding the identity fields

    Returns:
        Credentials bound to the configured subscription

    Raises:
        ConfigurationError: If an identity field is missing
        AuthenticationError: If the identity provider rejects the request
    """
    config.validate(AUTH_FIELDS)
    authority, tenant = split_authority(config.authority_url)

    identity = UsernamePasswordCredential(
        client_id=config.client_id,
        username=config.username,
        password=config.password,
        authority=authority,
        tenant_id=tenant,
    )

    logger.debug(f"Requesting token from {authority} for tenant '{tenant}'")
    try:
        token = await run_blocking(identity.get_token, config.management_scope)
    except AzureError as e:
        raise AuthenticationError(f"Failed to acquire Azure token: {e}") from e
    finally:
        identity.close()

    return Credentials(
        token=token.token,
        expires_on=token.expires_on,
        subscription_id=config.subscription_id,
    )


async def create_session(config: PublishConfig) -> AzureSession:
    """
    Acquire a token and build the management clients for one run

    Args:
        config: Publish configuration

    Returns:
        AzureSession with resource and web management clients
    """
    logger.info("Setting token...")
    credentials = await acquire_token(config)

    credential = StaticTokenCredential(credentials)
    resource_client = ResourceManagementClient(credential, credentials.subscription_id)
    web_client = WebSiteManagementClient(credential, credentials.subscription_id)

    logger.info("Token set")
    return AzureSession(credentials, credential, resource_client, web_client)
