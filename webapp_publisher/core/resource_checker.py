# webapp_publisher/core/resource_checker.py
"""Existence checks for the hosting namespace and application"""

import logging
from typing import Optional

from azure.core.exceptions import HttpResponseError

from ..api.exceptions import NotFoundError
from ..models.config import PublishConfig
from .azure_errors import is_not_found, translate
from .credentials import AzureSession
from .provisioner import Provisioner

logger = logging.getLogger(__name__)


class ResourceChecker:
    """Decides whether the hosting infrastructure must be provisioned

    Probes the App Service plan first and the Web App second. A "not found"
    from either probe hands over to the provisioner; any other failure is
    fatal.
    """

    def __init__(self,
                 session: AzureSession,
                 config: PublishConfig,
                 provisioner: Optional[Provisioner] = None):
        self.session = session
        self.config = config
        self.provisioner = provisioner or Provisioner(session, config)

    async def probe_hosting_namespace(self):
        """Fetch the App Service plan, raising NotFoundError if absent"""
        plan_name = self.config.hosting_namespace
        try:
            plan = await self.session.web_client.app_service_plans.get(
                self.config.rg_name, plan_name
            )
        except HttpResponseError as e:
            if is_not_found(e):
                raise NotFoundError("App Service plan", plan_name) from e
            raise translate(f"App Service plan '{plan_name}' lookup", e) from e

        # Some API versions answer 404 with an empty body instead of raising
        if plan is None:
            raise NotFoundError("App Service plan", plan_name)

        logger.info(f"App Service plan '{plan_name}' already exists")
        return plan

    async def probe_web_app(self):
        """Fetch the Web App, raising NotFoundError if absent"""
        site_name = self.config.web_app_name
        try:
            site = await self.session.web_client.web_apps.get(self.config.rg_name, site_name)
        except HttpResponseError as e:
            if is_not_found(e):
                raise NotFoundError("Web App", site_name) from e
            raise translate(f"Web App '{site_name}' lookup", e) from e

        if site is None:
            raise NotFoundError("Web App", site_name)

        logger.info(f"Web App '{site_name}' already exists")
        return site

    async def check(self) -> bool:
        """
        Ensure the hosting infrastructure exists

        Returns:
            True if provisioning ran, False if everything already existed
        """
        site_name = self.config.web_app_name
        logger.info(f"Determining whether or not Web App '{site_name}' already exists")

        try:
            await self.probe_hosting_namespace()
            await self.probe_web_app()
        except NotFoundError as e:
            logger.info(f"{e}; provisioning Web App '{site_name}'")
            await self.provisioner.provision()
            return True

        return False
