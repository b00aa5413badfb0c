"""Models for remote Azure objects observed during a publish run"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse


@dataclass(frozen=True)
class Credentials:
    """Bearer token bound to one subscription

    Owned by the run that acquired it and never persisted.
    """

    token: str
    expires_on: int
    subscription_id: str

    def __repr__(self) -> str:
        return f"Credentials(subscription_id={self.subscription_id!r}, expires_on={self.expires_on})"


@dataclass(frozen=True)
class ResourceGroup:
    """Resource group identity"""

    name: str
    region: str


@dataclass(frozen=True)
class DeploymentStatus:
    """Observed provisioning state of a template deployment"""

    resource_group: str
    deployment_name: str
    provisioning_state: Optional[str]
    attempts: int = 0

    @property
    def succeeded(self) -> bool:
        return self.provisioning_state == "Succeeded"


@dataclass(frozen=True)
class PublishProfile:
    """Transfer endpoint and credentials issued for one application"""

    publish_method: str
    publish_url: str
    username: Optional[str] = None
    password: Optional[str] = None
    profile_name: Optional[str] = None
    fallback_used: bool = False

    @property
    def host(self) -> Optional[str]:
        """Host name parsed from the publish URL"""
        url = self.publish_url
        if "://" not in url:
            url = f"ftp://{url}"
        return urlparse(url).hostname

    @property
    def port(self) -> Optional[int]:
        url = self.publish_url
        if "://" not in url:
            url = f"ftp://{url}"
        return urlparse(url).port

    def with_fallback_credentials(self,
                                  username: Optional[str],
                                  password: Optional[str]) -> 'PublishProfile':
        """Fill in missing username/password from fallback values"""
        return PublishProfile(
            publish_method=self.publish_method,
            publish_url=self.publish_url,
            username=self.username or username,
            password=self.password or password,
            profile_name=self.profile_name,
            fallback_used=bool(
                (not self.username and username) or (not self.password and password)
            ),
        )

    def __repr__(self) -> str:
        return (
            f"PublishProfile(publish_method={self.publish_method!r}, "
            f"publish_url={self.publish_url!r}, username={self.username!r})"
        )
