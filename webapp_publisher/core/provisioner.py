# webapp_publisher/core/provisioner.py
"""Resource group provisioning and template deployment"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import aiofiles
from azure.core.exceptions import HttpResponseError
from azure.mgmt.resource.resources.models import (
    Deployment,
    DeploymentMode,
    DeploymentProperties,
    ResourceGroup as ResourceGroupModel,
)

from ..api.exceptions import (
    ConfigurationError,
    DeploymentFailedError,
    DeploymentTimeoutError,
    FileSystemError,
    PublishCancelledError,
    RemoteOperationError,
)
from ..constants import (
    RESOURCE_GROUP_NOT_FOUND_CODES,
    TERMINAL_FAILURE_STATES,
    TERMINAL_SUCCESS_STATES,
)
from ..models.config import PublishConfig
from ..models.remote import DeploymentStatus, ResourceGroup
from ..utils.async_utils import poll_until
from .azure_errors import is_not_found, translate
from .credentials import AzureSession

logger = logging.getLogger(__name__)

TERMINAL_STATES = TERMINAL_SUCCESS_STATES + TERMINAL_FAILURE_STATES


def _state_name(state: Any) -> Optional[str]:
    return getattr(state, "value", state)


class Provisioner:
    """Creates the resource group if needed and applies the deployment template"""

    def __init__(self,
                 session: AzureSession,
                 config: PublishConfig,
                 cancel_event: Optional[asyncio.Event] = None):
        self.session = session
        self.config = config
        self.cancel_event = cancel_event

    @property
    def _client(self):
        return self.session.resource_client

    async def provision(self) -> DeploymentStatus:
        """
        Provision the hosting infrastructure

        Creates the resource group when it does not exist, deploys the
        template and waits for the deployment to finish.

        Returns:
            Final deployment status

        Raises:
            DeploymentFailedError: If the deployment ends in a failed state
        """
        if not await self.resource_group_exists():
            await self.create_resource_group()

        await self.deploy_template()
        return await self.wait_for_deployment()

    async def resource_group_exists(self) -> bool:
        """
        Check existence of the resource group

        A 404 with a resource-group "not found" code is reported as False
        rather than an error; any other failure propagates.
        """
        rg_name = self.config.rg_name
        logger.info(f"Checking existence of Resource Group '{rg_name}'")

        try:
            exists = await self._client.resource_groups.check_existence(rg_name)
        except HttpResponseError as e:
            if is_not_found(e, RESOURCE_GROUP_NOT_FOUND_CODES):
                exists = False
            else:
                raise translate(f"Resource Group '{rg_name}' existence check", e) from e

        if exists:
            logger.info(f"Resource Group '{rg_name}' exists")
        else:
            logger.info(f"Resource Group '{rg_name}' does not exist")
        return bool(exists)

    async def create_resource_group(self) -> ResourceGroup:
        """Create the resource group in the configured region"""
        rg_name = self.config.rg_name
        logger.info(f"Creating Resource Group '{rg_name}' in '{self.config.region}'")

        try:
            result = await self._client.resource_groups.create_or_update(
                rg_name,
                ResourceGroupModel(location=self.config.region)
            )
        except HttpResponseError as e:
            raise translate(f"Resource Group '{rg_name}' creation", e) from e

        logger.info(f"Resource Group '{rg_name}' created successfully")
        return ResourceGroup(rg_name, getattr(result, "location", None) or self.config.region)

    async def load_template(self) -> Dict[str, Any]:
        """Read and parse the deployment template"""
        path = self.config.rg_template_path
        try:
            async with aiofiles.open(path, 'r', encoding='utf-8') as f:
                content = await f.read()
        except OSError as e:
            raise FileSystemError(f"Cannot read deployment template {path}: {e}", path) from e

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Deployment template {path} is not valid JSON: {e}") from e

    def build_deployment(self, template: Dict[str, Any]) -> Deployment:
        """Bind the template parameters for an incremental deployment"""
        return Deployment(
            properties=DeploymentProperties(
                mode=DeploymentMode.INCREMENTAL,
                template=template,
                parameters={
                    "siteName": {"value": self.config.web_app_name},
                    "hostingPlanName": {"value": self.config.app_hosting_plan_name},
                    "siteLocation": {"value": self.config.region},
                },
            )
        )

    async def deploy_template(self):
        """Submit the template deployment to the resource group"""
        rg_name = self.config.rg_name
        deployment_name = self.config.rg_deployment_name
        deployment = self.build_deployment(await self.load_template())

        logger.info(f"Deploying Template to Resource Group '{rg_name}'")
        try:
            poller = await self._client.deployments.begin_create_or_update(
                rg_name,
                deployment_name,
                deployment
            )
        except HttpResponseError as e:
            raise translate(f"Template deployment '{deployment_name}'", e) from e

        logger.info("Resource Group Template deployment initiated")
        return poller

    async def get_deployment_status(self) -> DeploymentStatus:
        """Read the current provisioning state of the deployment"""
        rg_name = self.config.rg_name
        deployment_name = self.config.rg_deployment_name

        try:
            deployment = await self._client.deployments.get(rg_name, deployment_name)
        except HttpResponseError as e:
            raise translate(f"Status check for deployment '{deployment_name}'", e) from e

        properties = getattr(deployment, "properties", None)
        state = _state_name(getattr(properties, "provisioning_state", None))
        return DeploymentStatus(rg_name, deployment_name, state)

    async def wait_for_deployment(self) -> DeploymentStatus:
        """
        Poll the deployment until it reaches a terminal state

        Polls every ``poll_interval`` seconds, at most ``max_poll_attempts``
        times. Polling stops at the first terminal state or error.

        Raises:
            DeploymentFailedError: On a Failed or Canceled deployment
            DeploymentTimeoutError: If the attempt bound is reached
            PublishCancelledError: If the cancel event is set
        """
        deployment_name = self.config.rg_deployment_name
        logger.info(
            f"Getting status for template deployment '{deployment_name}' "
            f"to Resource Group '{self.config.rg_name}'"
        )

        def on_pending(attempt: int, status: DeploymentStatus) -> None:
            logger.info(
                f"Template deployment incomplete ({status.provisioning_state})..."
                f"waiting {self.config.poll_interval:g} seconds for status update"
            )

        finished, status, attempts = await poll_until(
            self.get_deployment_status,
            lambda s: s.provisioning_state in TERMINAL_STATES,
            interval=self.config.poll_interval,
            max_attempts=self.config.max_poll_attempts,
            cancel_event=self.cancel_event,
            on_pending=on_pending,
        )

        if not finished:
            if self.cancel_event is not None and self.cancel_event.is_set():
                raise PublishCancelledError(
                    f"Stopped waiting for template deployment '{deployment_name}'"
                )
            last_state = status.provisioning_state if status else None
            raise DeploymentTimeoutError(deployment_name, attempts, last_state)

        status = DeploymentStatus(
            status.resource_group,
            status.deployment_name,
            status.provisioning_state,
            attempts
        )
        if status.provisioning_state in TERMINAL_FAILURE_STATES:
            logger.error(f"Template deployment {status.provisioning_state.lower()}")
            raise DeploymentFailedError(deployment_name, status.provisioning_state)

        logger.info("Template deployment succeeded")
        return status

    async def delete_resource_group(self) -> None:
        """Delete the resource group and wait for completion"""
        rg_name = self.config.rg_name
        logger.info(f"Deleting Resource Group '{rg_name}'")

        try:
            poller = await self._client.resource_groups.begin_delete(rg_name)
            await poller.result()
        except HttpResponseError as e:
            raise RemoteOperationError.from_exception(
                f"Resource Group '{rg_name}' deletion", e
            ) from e

        logger.info(f"Resource Group '{rg_name}' successfully purged")
