"""Tests for resource group provisioning and deployment polling."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from azure.mgmt.resource.resources.models import DeploymentMode

from webapp_publisher.api.exceptions import (
    ConfigurationError,
    DeploymentFailedError,
    DeploymentTimeoutError,
    FileSystemError,
    PublishCancelledError,
    RemoteOperationError,
)
from webapp_publisher.core.provisioner import Provisioner

from conftest import make_deployment, make_http_error


@pytest.fixture
def provisioner(azure_session, config):
    return Provisioner(azure_session, config)


class TestResourceGroupExistence:
    """Test cases for the resource group existence check."""

    @pytest.mark.asyncio
    async def test_exists(self, provisioner, resource_client):
        assert await provisioner.resource_group_exists() is True
        resource_client.resource_groups.check_existence.assert_awaited_once_with("my-rg")

    @pytest.mark.asyncio
    async def test_false_creates_once(self, provisioner, resource_client):
        resource_client.resource_groups.check_existence.return_value = False

        await provisioner.provision()

        resource_client.resource_groups.check_existence.assert_awaited_once()
        resource_client.resource_groups.create_or_update.assert_awaited_once()
        rg_name, model = resource_client.resource_groups.create_or_update.call_args[0]
        assert rg_name == "my-rg"
        assert model.location == "westeurope"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", ["NotFound", "ResourceGroupNotFound"])
    async def test_not_found_error_creates_once(self, provisioner, resource_client, code):
        resource_client.resource_groups.check_existence.side_effect = make_http_error(404, code)

        await provisioner.provision()

        resource_client.resource_groups.check_existence.assert_awaited_once()
        resource_client.resource_groups.create_or_update.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_other_error_is_fatal(self, provisioner, resource_client):
        resource_client.resource_groups.check_existence.side_effect = make_http_error(
            403, "AuthorizationFailed"
        )

        with pytest.raises(RemoteOperationError) as exc_info:
            await provisioner.provision()

        assert exc_info.value.status_code == 403
        assert exc_info.value.remote_code == "AuthorizationFailed"
        resource_client.resource_groups.create_or_update.assert_not_awaited()
        resource_client.deployments.begin_create_or_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_404_with_other_code_is_fatal(self, provisioner, resource_client):
        resource_client.resource_groups.check_existence.side_effect = make_http_error(
            404, "SubscriptionNotFound"
        )

        with pytest.raises(RemoteOperationError):
            await provisioner.resource_group_exists()

    @pytest.mark.asyncio
    async def test_existing_group_not_recreated(self, provisioner, resource_client):
        await provisioner.provision()

        resource_client.resource_groups.create_or_update.assert_not_awaited()
        resource_client.deployments.begin_create_or_update.assert_awaited_once()


class TestTemplateDeployment:
    """Test cases for template loading and submission."""

    @pytest.mark.asyncio
    async def test_parameters_bound(self, provisioner, resource_client):
        await provisioner.deploy_template()

        rg_name, deployment_name, deployment = (
            resource_client.deployments.begin_create_or_update.call_args[0]
        )
        assert rg_name == "my-rg"
        assert deployment_name == "my-deployment"
        assert deployment.properties.mode == DeploymentMode.INCREMENTAL
        assert deployment.properties.parameters == {
            "siteName": {"value": "my-site"},
            "hostingPlanName": {"value": "my-plan"},
            "siteLocation": {"value": "westeurope"},
        }
        assert deployment.properties.template["contentVersion"] == "1.0.0.0"

    @pytest.mark.asyncio
    async def test_missing_template(self, azure_session, config, tmp_path):
        provisioner = Provisioner(
            azure_session, config.merged({"rg_template_path": str(tmp_path / "missing.json")})
        )

        with pytest.raises(FileSystemError):
            await provisioner.deploy_template()

    @pytest.mark.asyncio
    async def test_invalid_template(self, azure_session, config, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json")
        provisioner = Provisioner(azure_session, config.merged({"rg_template_path": str(bad)}))

        with pytest.raises(ConfigurationError):
            await provisioner.deploy_template()


class TestDeploymentPolling:
    """Test cases for waiting on the deployment."""

    @pytest.mark.asyncio
    async def test_running_running_succeeded(self, provisioner, resource_client):
        resource_client.deployments.get.side_effect = [
            make_deployment("Running"),
            make_deployment("Running"),
            make_deployment("Succeeded"),
        ]

        status = await provisioner.wait_for_deployment()

        assert resource_client.deployments.get.await_count == 3
        assert status.succeeded
        assert status.attempts == 3

    @pytest.mark.asyncio
    async def test_failed_after_one_poll(self, provisioner, resource_client):
        resource_client.deployments.get.return_value = make_deployment("Failed")

        with pytest.raises(DeploymentFailedError) as exc_info:
            await provisioner.wait_for_deployment()

        assert resource_client.deployments.get.await_count == 1
        assert exc_info.value.state == "Failed"
        assert not isinstance(exc_info.value, DeploymentTimeoutError)

    @pytest.mark.asyncio
    async def test_canceled_deployment_fails(self, provisioner, resource_client):
        resource_client.deployments.get.return_value = make_deployment("Canceled")

        with pytest.raises(DeploymentFailedError):
            await provisioner.wait_for_deployment()

    @pytest.mark.asyncio
    async def test_poll_bound(self, azure_session, config, resource_client):
        resource_client.deployments.get.return_value = make_deployment("Running")
        provisioner = Provisioner(azure_session, config.merged({"max_poll_attempts": 4}))

        with pytest.raises(DeploymentTimeoutError) as exc_info:
            await provisioner.wait_for_deployment()

        assert resource_client.deployments.get.await_count == 4
        assert exc_info.value.attempts == 4

    @pytest.mark.asyncio
    async def test_status_error_stops_polling(self, provisioner, resource_client):
        resource_client.deployments.get.side_effect = make_http_error(500, "InternalServerError")

        with pytest.raises(RemoteOperationError):
            await provisioner.wait_for_deployment()

        assert resource_client.deployments.get.await_count == 1

    @pytest.mark.asyncio
    async def test_cancel_event(self, azure_session, config, resource_client):
        cancel_event = asyncio.Event()

        async def running_then_cancel(*args):
            cancel_event.set()
            return make_deployment("Running")

        resource_client.deployments.get = AsyncMock(side_effect=running_then_cancel)
        provisioner = Provisioner(azure_session, config, cancel_event)

        with pytest.raises(PublishCancelledError):
            await provisioner.wait_for_deployment()

        assert resource_client.deployments.get.await_count == 1


class TestResourceGroupDeletion:
    """Test cases for deleting the resource group."""

    @pytest.mark.asyncio
    async def test_single_delete(self, provisioner, resource_client):
        await provisioner.delete_resource_group()

        resource_client.resource_groups.begin_delete.assert_awaited_once_with("my-rg")
        poller = resource_client.resource_groups.begin_delete.return_value
        poller.result.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_error_surfaced(self, provisioner, resource_client):
        original = make_http_error(409, "ScopeLocked")
        resource_client.resource_groups.begin_delete.side_effect = original

        with pytest.raises(RemoteOperationError) as exc_info:
            await provisioner.delete_resource_group()

        assert exc_info.value.__cause__ is original
        assert exc_info.value.status_code == 409
        assert exc_info.value.remote_code == "ScopeLocked"
