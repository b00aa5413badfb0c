"""Shared fixtures for webapp-publisher tests."""

from typing import Any, Dict, List
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from azure.core.exceptions import HttpResponseError

from webapp_publisher.core.credentials import AzureSession, StaticTokenCredential
from webapp_publisher.models.config import PublishConfig
from webapp_publisher.models.remote import Credentials

PROFILE_XML = b"""<publishData>
  <publishProfile profileName="my-site - Web Deploy" publishMethod="MSDeploy"
    publishUrl="my-site.scm.azurewebsites.net:443" userName="$my-site" userPWD="secret" />
  <publishProfile profileName="my-site - FTP" publishMethod="FTP"
    publishUrl="ftp://waws-prod-am2-001.ftp.azurewebsites.windows.net/site/wwwroot"
    userName="my-site\\$my-site" userPWD="ftp-secret" />
</publishData>"""

TEMPLATE = """{
  "$schema": "https://schema.management.azure.com/schemas/2015-01-01/deploymentTemplate.json#",
  "contentVersion": "1.0.0.0",
  "parameters": {
    "siteName": {"type": "string"},
    "hostingPlanName": {"type": "string"},
    "siteLocation": {"type": "string"}
  },
  "resources": []
}"""


def make_http_error(status_code: int, code: str = None, message: str = "Operation failed"):
    """Build an HttpResponseError carrying a status and ARM error code."""
    error = HttpResponseError(message=message)
    error.status_code = status_code
    error.error = Mock(code=code) if code else None
    return error


def make_deployment(state: str) -> Mock:
    """Deployment as returned by deployments.get."""
    return Mock(properties=Mock(provisioning_state=state))


class ByteStream:
    """Async iterator over byte chunks, like the SDK download stream."""

    def __init__(self, data: bytes, chunk_size: int = 64):
        self._chunks = [data[i:i + chunk_size] for i in range(0, len(data), chunk_size)]

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._chunks:
            raise StopAsyncIteration
        return self._chunks.pop(0)


@pytest.fixture
def site_dir(tmp_path):
    """Site tree with 4 files in 3 directories."""
    root = tmp_path / "site"
    (root / "css").mkdir(parents=True)
    (root / "js" / "vendor").mkdir(parents=True)
    (root / "index.html").write_text("<html></html>")
    (root / "css" / "a.css").write_text("body {}")
    (root / "js" / "app.js").write_text("console.log(1);")
    (root / "js" / "vendor" / "lib.js").write_text("// lib")
    return root


@pytest.fixture
def template_file(tmp_path):
    path = tmp_path / "template.json"
    path.write_text(TEMPLATE, encoding="utf-8")
    return path


@pytest.fixture
def config_values(site_dir, template_file) -> Dict[str, Any]:
    """Complete configuration using camelCase keys."""
    return {
        "authorityUrl": "https://login.microsoftonline.com/contoso.onmicrosoft.com",
        "username": "deployer@contoso.onmicrosoft.com",
        "password": "p@ssw0rd",
        "clientId": "04b07795-8ddb-461a-bbee-02f9e1bf7b46",
        "subscriptionId": "00000000-0000-0000-0000-000000000000",
        "rgName": "my-rg",
        "region": "westeurope",
        "webAppName": "my-site",
        "directory": str(site_dir),
        "rgTemplatePath": str(template_file),
        "rgDeploymentName": "my-deployment",
        "appHostingPlanName": "my-plan",
        "pollInterval": 0,
    }


@pytest.fixture
def config(config_values) -> PublishConfig:
    return PublishConfig.from_dict(config_values)


@pytest.fixture
def resource_client() -> MagicMock:
    """ResourceManagementClient double where every resource already exists."""
    client = MagicMock()
    client.resource_groups.check_existence = AsyncMock(return_value=True)
    client.resource_groups.create_or_update = AsyncMock()
    delete_poller = Mock()
    delete_poller.result = AsyncMock(return_value=None)
    client.resource_groups.begin_delete = AsyncMock(return_value=delete_poller)
    client.deployments.begin_create_or_update = AsyncMock()
    client.deployments.get = AsyncMock(return_value=make_deployment("Succeeded"))
    client.close = AsyncMock()
    return client


@pytest.fixture
def web_client() -> MagicMock:
    """WebSiteManagementClient double where the plan and app exist."""
    client = MagicMock()
    client.app_service_plans.get = AsyncMock(return_value=Mock(name="plan"))
    client.web_apps.get = AsyncMock(return_value=Mock(name="site"))
    client.web_apps.list_publishing_profile_xml_with_secrets = AsyncMock(
        side_effect=lambda *args, **kwargs: ByteStream(PROFILE_XML)
    )
    client.close = AsyncMock()
    return client


@pytest.fixture
def azure_session(resource_client, web_client) -> AzureSession:
    credentials = Credentials(
        token="test-token",
        expires_on=4102444800,
        subscription_id="00000000-0000-0000-0000-000000000000",
    )
    return AzureSession(credentials, StaticTokenCredential(credentials), resource_client, web_client)


class RecordingSession:
    """Transfer session double recording every call in order."""

    def __init__(self, fail_on: str = None):
        self.calls: List[tuple] = []
        self.fail_on = fail_on
        self.is_open = False
        self.closed = False

    async def __aenter__(self):
        self.is_open = True
        self.calls.append(("open",))
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.is_open = False
        self.closed = True
        self.calls.append(("close",))

    async def mkdir(self, remote_path: str, recursive: bool = True) -> None:
        self.calls.append(("mkdir", remote_path))

    async def upload(self, local_path, remote_path: str) -> int:
        from webapp_publisher.api.exceptions import TransferError

        if self.fail_on and remote_path.endswith(self.fail_on):
            raise TransferError(f"Failed to upload '{local_path}'", remote_path)
        self.calls.append(("upload", remote_path))
        return 10


@pytest.fixture
def recording_session() -> RecordingSession:
    return RecordingSession()
