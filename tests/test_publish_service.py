"""Tests for the publish pipeline and cleanup."""

from dataclasses import replace
from unittest.mock import AsyncMock, Mock, patch

import pytest

from webapp_publisher.api.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DeploymentFailedError,
    PublishProfileNotFoundError,
    RemoteOperationError,
    TransferError,
)
from webapp_publisher.constants import PIPELINE_STAGES
from webapp_publisher.services.publish_service import PublishService
from webapp_publisher.services.transfer_service import TransferService

from conftest import ByteStream, RecordingSession, make_deployment, make_http_error

CREATE_SESSION = "webapp_publisher.services.publish_service.create_session"


def transfer_with(session):
    """Transfer service class whose sessions are the given double."""
    factory = Mock()
    factory.create_for_profile.return_value = session
    return lambda config: TransferService(config, session_factory=factory)


@pytest.fixture
def service(recording_session):
    return PublishService(transfer_service_class=transfer_with(recording_session))


class TestPublish:
    """Test cases for PublishService.publish."""

    @pytest.mark.asyncio
    async def test_existing_infrastructure(self, service, config, azure_session,
                                           resource_client, recording_session):
        with patch(CREATE_SESSION, AsyncMock(return_value=azure_session)):
            result = await service.publish(config)

        assert result.is_success
        assert result.completed_stages == list(PIPELINE_STAGES)
        assert result.provisioned is False
        assert result.files_uploaded == 4
        assert result.directories_created == 3
        resource_client.resource_groups.create_or_update.assert_not_awaited()
        resource_client.close.assert_awaited_once()
        assert recording_session.closed

    @pytest.mark.asyncio
    async def test_provisions_missing_app(self, service, config, azure_session,
                                          resource_client, web_client):
        web_client.web_apps.get.side_effect = make_http_error(404, "ResourceNotFound")
        resource_client.resource_groups.check_existence.return_value = False
        resource_client.deployments.get.side_effect = [
            make_deployment("Running"),
            make_deployment("Succeeded"),
        ]

        with patch(CREATE_SESSION, AsyncMock(return_value=azure_session)):
            result = await service.publish(config)

        assert result.provisioned is True
        resource_client.resource_groups.create_or_update.assert_awaited_once()
        assert resource_client.deployments.get.await_count == 2

    @pytest.mark.asyncio
    async def test_invalid_config_makes_no_calls(self, service, config):
        create_session = AsyncMock()

        with patch(CREATE_SESSION, create_session):
            with pytest.raises(ConfigurationError) as exc_info:
                await service.publish(replace(config, web_app_name=None, directory=None))

        assert exc_info.value.stage == "config"
        assert set(exc_info.value.missing_fields) == {"web_app_name", "directory"}
        create_session.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_credentials_stage_failure(self, service, config):
        with patch(CREATE_SESSION, AsyncMock(side_effect=AuthenticationError("rejected"))):
            with pytest.raises(AuthenticationError) as exc_info:
                await service.publish(config)

        assert exc_info.value.stage == "credentials"

    @pytest.mark.asyncio
    async def test_deployment_failure_aborts(self, service, config, azure_session,
                                             resource_client, web_client, recording_session):
        web_client.app_service_plans.get.side_effect = make_http_error(404, "NotFound")
        resource_client.deployments.get.return_value = make_deployment("Failed")

        with patch(CREATE_SESSION, AsyncMock(return_value=azure_session)):
            with pytest.raises(DeploymentFailedError) as exc_info:
                await service.publish(config)

        assert exc_info.value.stage == "resources"
        web_client.web_apps.list_publishing_profile_xml_with_secrets.assert_not_awaited()
        assert recording_session.calls == []
        resource_client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_publish_profile(self, service, config, azure_session,
                                           web_client, recording_session):
        web_client.web_apps.list_publishing_profile_xml_with_secrets.side_effect = (
            lambda *args: ByteStream(b"<publishData/>")
        )

        with patch(CREATE_SESSION, AsyncMock(return_value=azure_session)):
            with pytest.raises(PublishProfileNotFoundError) as exc_info:
                await service.publish(config)

        assert exc_info.value.stage == "publishing_credentials"
        assert recording_session.calls == []

    @pytest.mark.asyncio
    async def test_fallback_credentials_recorded_as_warning(self, service, config, azure_session,
                                                            web_client):
        xml = (
            b'<publishData><publishProfile publishMethod="FTP" '
            b'publishUrl="ftp://host.example.net/site/wwwroot" /></publishData>'
        )
        web_client.web_apps.list_publishing_profile_xml_with_secrets.side_effect = (
            lambda *args: ByteStream(xml)
        )
        config = config.merged({"deployment_user": "ftp-user", "deployment_password": "ftp-pass"})

        with patch(CREATE_SESSION, AsyncMock(return_value=azure_session)):
            result = await service.publish(config)

        assert result.is_success
        assert len(result.warnings) == 1
        assert "deployment credentials" in result.warnings[0]

    @pytest.mark.asyncio
    async def test_profile_credentials_leave_no_warning(self, service, config, azure_session):
        with patch(CREATE_SESSION, AsyncMock(return_value=azure_session)):
            result = await service.publish(config)

        assert result.warnings == []

    @pytest.mark.asyncio
    async def test_transfer_failure(self, config, azure_session):
        session = RecordingSession(fail_on="a.css")
        service = PublishService(transfer_service_class=transfer_with(session))

        with patch(CREATE_SESSION, AsyncMock(return_value=azure_session)):
            with pytest.raises(TransferError) as exc_info:
                await service.publish(config)

        assert exc_info.value.stage == "transfer"
        assert session.closed

    @pytest.mark.asyncio
    async def test_unexpected_error_wrapped(self, service, config, azure_session, web_client):
        original = RuntimeError("connection reset")
        web_client.web_apps.get.side_effect = original

        with patch(CREATE_SESSION, AsyncMock(return_value=azure_session)):
            with pytest.raises(RemoteOperationError) as exc_info:
                await service.publish(config)

        assert exc_info.value.stage == "resources"
        assert exc_info.value.__cause__ is original


class TestCleanup:
    """Test cases for PublishService.cleanup."""

    @pytest.mark.asyncio
    async def test_single_delete(self, config, azure_session, resource_client):
        with patch(CREATE_SESSION, AsyncMock(return_value=azure_session)):
            result = await PublishService().cleanup("old-rg", config)

        resource_client.resource_groups.begin_delete.assert_awaited_once_with("old-rg")
        resource_client.close.assert_awaited_once()
        assert result.is_success
        assert result.metadata["resource_group"] == "old-rg"

    @pytest.mark.asyncio
    async def test_remote_error_surfaced(self, config, azure_session, resource_client):
        original = make_http_error(404, "ResourceGroupNotFound")
        resource_client.resource_groups.begin_delete.side_effect = original

        with patch(CREATE_SESSION, AsyncMock(return_value=azure_session)):
            with pytest.raises(RemoteOperationError) as exc_info:
                await PublishService().cleanup("old-rg", config)

        assert exc_info.value.stage == "cleanup"
        assert exc_info.value.__cause__ is original
        assert exc_info.value.remote_code == "ResourceGroupNotFound"
        resource_client.resource_groups.begin_delete.assert_awaited_once()
        resource_client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_requires_identity_only(self, config, azure_session):
        identity_only = replace(config, directory=None, web_app_name=None, rg_template_path=None)

        with patch(CREATE_SESSION, AsyncMock(return_value=azure_session)):
            result = await PublishService().cleanup("old-rg", identity_only)

        assert result.is_success

    @pytest.mark.asyncio
    async def test_missing_identity(self, config):
        with pytest.raises(ConfigurationError) as exc_info:
            await PublishService().cleanup("old-rg", replace(config, password=None))

        assert exc_info.value.missing_fields == ["password"]
