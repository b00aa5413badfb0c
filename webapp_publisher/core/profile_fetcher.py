# webapp_publisher/core/profile_fetcher.py
"""Retrieval of Web App publish profiles"""

import logging
import xml.etree.ElementTree as ET
from typing import List

from azure.core.exceptions import HttpResponseError
from azure.mgmt.web.models import CsmPublishingProfileOptions

from ..api.exceptions import PublishProfileNotFoundError, RemoteOperationError
from ..models.config import PublishConfig
from ..models.remote import PublishProfile
from .azure_errors import translate
from .credentials import AzureSession

logger = logging.getLogger(__name__)


def parse_publish_profiles(xml_data: bytes) -> List[PublishProfile]:
    """
    Parse the publish settings XML issued by App Service

    Args:
        xml_data: ``<publishData>`` document

    Returns:
        One PublishProfile per ``publishProfile`` element

    Raises:
        RemoteOperationError: If the document is not well-formed XML
    """
    try:
        root = ET.fromstring(xml_data)
    except ET.ParseError as e:
        raise RemoteOperationError(f"Malformed publish profile document: {e}") from e

    profiles = []
    for element in root.iter("publishProfile"):
        profiles.append(PublishProfile(
            publish_method=element.get("publishMethod", ""),
            publish_url=element.get("publishUrl", ""),
            username=element.get("userName"),
            password=element.get("userPWD"),
            profile_name=element.get("profileName"),
        ))
    return profiles


def select_profile(profiles: List[PublishProfile], publish_method: str) -> PublishProfile:
    """Return the first profile whose method matches publish_method"""
    for profile in profiles:
        if profile.publish_method.upper() == publish_method.upper() and profile.publish_url:
            return profile
    raise LookupError(publish_method)


async def fetch_publish_profile(session: AzureSession, config: PublishConfig) -> PublishProfile:
    """
    Get the Web App publish profile for the configured transfer protocol

    Missing username/password fall back to the configured deployment
    credentials.

    Raises:
        PublishProfileNotFoundError: If no profile matches the protocol
        RemoteOperationError: If the profiles cannot be retrieved
    """
    site_name = config.web_app_name
    logger.info("Getting Web App publishing credentials")

    try:
        stream = await session.web_client.web_apps.list_publishing_profile_xml_with_secrets(
            config.rg_name,
            site_name,
            CsmPublishingProfileOptions()
        )
        xml_data = b"".join([chunk async for chunk in stream])
    except HttpResponseError as e:
        raise translate(f"Publish profile retrieval for '{site_name}'", e) from e

    profiles = parse_publish_profiles(xml_data)
    try:
        profile = select_profile(profiles, config.transfer_protocol)
    except LookupError:
        raise PublishProfileNotFoundError(site_name, config.transfer_protocol) from None

    profile = profile.with_fallback_credentials(
        config.deployment_user,
        config.deployment_password
    )
    logger.info(f"{config.transfer_protocol} publish profile retrieved for host {profile.host}")
    return profile
