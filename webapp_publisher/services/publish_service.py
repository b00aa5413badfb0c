# webapp_publisher/services/publish_service.py
"""Publish pipeline implementation"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Optional

from ..api.exceptions import WebAppPublisherError
from ..constants import (
    STAGE_CLEANUP,
    STAGE_CONFIG,
    STAGE_CREDENTIALS,
    STAGE_PUBLISHING_CREDENTIALS,
    STAGE_RESOURCES,
    STAGE_TRANSFER,
)
from ..core import (
    AzureSession,
    Provisioner,
    ResourceChecker,
    create_session,
    fetch_publish_profile,
)
from ..core.azure_errors import translate
from ..models.config import AUTH_FIELDS, PublishConfig
from ..models.remote import PublishProfile
from ..models.result import OperationStatus, PublishResult, Result
from .transfer_service import TransferService

logger = logging.getLogger(__name__)


@dataclass
class PublishContext:
    """State of one publish run, passed explicitly between stages"""

    config: PublishConfig
    result: PublishResult
    session: Optional[AzureSession] = None
    profile: Optional[PublishProfile] = None


@asynccontextmanager
async def _stage(name: str):
    """Tag errors escaping a stage with its name and chain the original"""
    logger.debug(f"Entering stage '{name}'")
    try:
        yield
    except WebAppPublisherError as e:
        raise e.with_stage(name)
    except Exception as e:
        raise translate(f"Stage '{name}'", e).with_stage(name) from e


class PublishService:
    """Drives credentials, resources, publishing credentials and transfer in sequence"""

    def __init__(self,
                 transfer_service_class=TransferService,
                 cancel_event: Optional[asyncio.Event] = None):
        """
        Initialize publish service

        Args:
            transfer_service_class: Transfer service factory (config -> service)
            cancel_event: Set to abort the deployment poll
        """
        self.transfer_service_class = transfer_service_class
        self.cancel_event = cancel_event

    async def publish(self, config: PublishConfig) -> PublishResult:
        """
        Publish workflow

        Args:
            config: Merged publish configuration

        Returns:
            PublishResult describing the completed run

        Raises:
            WebAppPublisherError: Tagged with the stage that failed
        """
        async with _stage(STAGE_CONFIG):
            config.validate()

        context = PublishContext(
            config=config,
            result=PublishResult(
                status=OperationStatus.IN_PROGRESS,
                web_app_name=config.web_app_name,
                resource_group=config.rg_name,
            ),
        )

        try:
            await self._acquire_credentials(context)
            await self._ensure_resources(context)
            await self._fetch_publishing_credentials(context)
            await self._transfer(context)
        finally:
            if context.session is not None:
                await context.session.close()

        result = context.result
        result.message = f"Published {result.files_uploaded} file(s) to '{config.web_app_name}'"
        result.complete(OperationStatus.SUCCESS)
        return result

    async def _acquire_credentials(self, context: PublishContext) -> None:
        async with _stage(STAGE_CREDENTIALS):
            context.session = await create_session(context.config)
        context.result.mark_stage(STAGE_CREDENTIALS)

    async def _ensure_resources(self, context: PublishContext) -> None:
        async with _stage(STAGE_RESOURCES):
            provisioner = Provisioner(context.session, context.config, self.cancel_event)
            checker = ResourceChecker(context.session, context.config, provisioner)
            context.result.provisioned = await checker.check()
        context.result.mark_stage(STAGE_RESOURCES)

    async def _fetch_publishing_credentials(self, context: PublishContext) -> None:
        async with _stage(STAGE_PUBLISHING_CREDENTIALS):
            context.profile = await fetch_publish_profile(context.session, context.config)
            if context.profile.fallback_used:
                context.result.add_warning(
                    "Publish profile carried no transfer credentials, "
                    "configured deployment credentials were used"
                )
        context.result.mark_stage(STAGE_PUBLISHING_CREDENTIALS)

    async def _transfer(self, context: PublishContext) -> None:
        async with _stage(STAGE_TRANSFER):
            transfer_service = self.transfer_service_class(context.config)
            context.result.transfer = await transfer_service.transfer(context.profile)
            # Profile secrets are only needed while the session is open
            context.profile = None
        context.result.mark_stage(STAGE_TRANSFER)

    async def cleanup(self, rg_name: str, config: PublishConfig) -> Result:
        """
        Delete a resource group

        Args:
            rg_name: Resource group to delete
            config: Configuration holding the identity fields

        Returns:
            Result of the delete

        Raises:
            WebAppPublisherError: Tagged with the stage that failed
        """
        async with _stage(STAGE_CONFIG):
            config.validate(AUTH_FIELDS)
        config = config.merged({"rg_name": rg_name})

        async with _stage(STAGE_CREDENTIALS):
            session = await create_session(config)

        async with session:
            async with _stage(STAGE_CLEANUP):
                await Provisioner(session, config).delete_resource_group()

        result = Result(
            status=OperationStatus.SUCCESS,
            message=f"Resource Group '{rg_name}' deleted",
            metadata={"resource_group": rg_name},
        )
        result.complete()
        return result
