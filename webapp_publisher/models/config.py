"""Configuration data models"""

from dataclasses import dataclass, fields, replace
from typing import Dict, List, Optional, Any, Mapping

from ..api.exceptions import ConfigurationError
from ..constants import (
    DEFAULT_MANAGEMENT_SCOPE,
    DEFAULT_MAX_POLL_ATTEMPTS,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_REMOTE_ROOT,
    DEFAULT_TRANSFER_CONCURRENCY,
    DEFAULT_TRANSFER_PROTOCOL,
)

# camelCase keys accepted in configuration dictionaries
FIELD_ALIASES = {
    "authorityUrl": "authority_url",
    "clientId": "client_id",
    "subscriptionId": "subscription_id",
    "rgName": "rg_name",
    "webAppName": "web_app_name",
    "rgTemplatePath": "rg_template_path",
    "rgDeploymentName": "rg_deployment_name",
    "appHostingPlanName": "app_hosting_plan_name",
    "transferProtocol": "transfer_protocol",
    "remoteRoot": "remote_root",
    "pollInterval": "poll_interval",
    "maxPollAttempts": "max_poll_attempts",
    "transferConcurrency": "transfer_concurrency",
    "deploymentUser": "deployment_user",
    "deploymentPassword": "deployment_password",
    "managementScope": "management_scope",
}

AUTH_FIELDS = (
    "authority_url",
    "username",
    "password",
    "client_id",
    "subscription_id",
)

REQUIRED_FIELDS = AUTH_FIELDS + (
    "rg_name",
    "region",
    "web_app_name",
    "directory",
    "rg_template_path",
    "rg_deployment_name",
    "app_hosting_plan_name",
)

_INT_FIELDS = ("max_poll_attempts", "transfer_concurrency")
_FLOAT_FIELDS = ("poll_interval",)


@dataclass(frozen=True)
class PublishConfig:
    """Merged configuration for one publish run"""

    # Identity
    authority_url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    client_id: Optional[str] = None
    subscription_id: Optional[str] = None

    # Infrastructure
    rg_name: Optional[str] = None
    region: Optional[str] = None
    web_app_name: Optional[str] = None
    app_hosting_plan_name: Optional[str] = None
    rg_template_path: Optional[str] = None
    rg_deployment_name: Optional[str] = None

    # Content
    directory: Optional[str] = None

    # Tuning
    transfer_protocol: str = DEFAULT_TRANSFER_PROTOCOL
    remote_root: str = DEFAULT_REMOTE_ROOT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    max_poll_attempts: int = DEFAULT_MAX_POLL_ATTEMPTS
    transfer_concurrency: int = DEFAULT_TRANSFER_CONCURRENCY
    management_scope: str = DEFAULT_MANAGEMENT_SCOPE

    # Fallback transfer credentials
    deployment_user: Optional[str] = None
    deployment_password: Optional[str] = None

    def __repr__(self) -> str:
        shown = []
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in ("password", "deployment_password") and value:
                value = "***"
            shown.append(f"{f.name}={value!r}")
        return f"PublishConfig({', '.join(shown)})"

    def missing_fields(self, names=REQUIRED_FIELDS) -> List[str]:
        """Return the required fields that are unset or blank"""
        return [name for name in names if not getattr(self, name)]

    def validate(self, names=REQUIRED_FIELDS) -> 'PublishConfig':
        """Raise ConfigurationError if any of the given fields is missing"""
        missing = self.missing_fields(names)
        if missing:
            raise ConfigurationError(
                "Missing Azure configuration properties: "
                f"{', '.join(missing)}. Check that the corresponding "
                "environment variables or configuration keys are set",
                missing_fields=missing
            )
        if self.max_poll_attempts < 1:
            raise ConfigurationError("max_poll_attempts must be at least 1")
        if self.transfer_concurrency < 1:
            raise ConfigurationError("transfer_concurrency must be at least 1")
        if self.poll_interval < 0:
            raise ConfigurationError("poll_interval must not be negative")
        return self

    @property
    def hosting_namespace(self) -> str:
        """Name of the App Service plan the application is registered under"""
        return self.app_hosting_plan_name

    def merged(self, overrides: Mapping[str, Any]) -> 'PublishConfig':
        """Return a copy with non-empty override values applied"""
        values = normalize_keys(overrides)
        return replace(self, **_coerce(values))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'PublishConfig':
        """Create from dictionary (snake_case or camelCase keys)"""
        return cls(**_coerce(normalize_keys(data)))

    def explicit_values(self) -> Dict[str, Any]:
        """Fields set to something other than their declared default"""
        return {f.name: getattr(self, f.name) for f in fields(self)
                if getattr(self, f.name) != f.default}


def normalize_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Map camelCase aliases to field names, dropping unknown keys and None values"""
    known = {f.name for f in fields(PublishConfig)}
    result = {}
    for key, value in data.items():
        name = FIELD_ALIASES.get(key, key)
        if name in known and value is not None and value != "":
            result[name] = value
    return result


def _coerce(values: Dict[str, Any]) -> Dict[str, Any]:
    """Convert numeric settings that arrive as strings (environment, YAML)"""
    try:
        for name in _INT_FIELDS:
            if name in values:
                values[name] = int(values[name])
        for name in _FLOAT_FIELDS:
            if name in values:
                values[name] = float(values[name])
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid numeric configuration value: {e}")
    for name in ("directory", "rg_template_path"):
        if name in values:
            values[name] = str(values[name])
    return values
