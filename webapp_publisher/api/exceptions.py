"""Exception definitions for webapp-publisher API"""

from typing import Optional

from ..constants import ErrorCode


class WebAppPublisherError(Exception):
    """Base exception for webapp-publisher"""

    def __init__(self, message: str, error_code: str = None, stage: str = None):
        super().__init__(message)
        self.error_code = error_code
        self.stage = stage

    def with_stage(self, stage: str) -> 'WebAppPublisherError':
        """Tag the error with the pipeline stage it escaped from (first tag wins)"""
        if self.stage is None:
            self.stage = stage
        return self


class ConfigurationError(WebAppPublisherError):
    """Missing or invalid configuration"""

    def __init__(self, message: str, missing_fields: Optional[list] = None):
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR)
        self.missing_fields = list(missing_fields or [])


class AuthenticationError(WebAppPublisherError):
    """Identity provider rejected the credentials"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.AUTHENTICATION_FAILED)


class NotFoundError(WebAppPublisherError):
    """Remote object does not exist

    Expected signal used to decide whether provisioning is needed.
    """

    def __init__(self, resource_type: str, name: str):
        message = f"{resource_type} '{name}' not found"
        super().__init__(message, ErrorCode.RESOURCE_NOT_FOUND)
        self.resource_type = resource_type
        self.name = name


class RemoteOperationError(WebAppPublisherError):
    """Management API call failed"""

    def __init__(self, message: str, status_code: int = None, remote_code: str = None):
        super().__init__(message, ErrorCode.REMOTE_OPERATION_FAILED)
        self.status_code = status_code
        self.remote_code = remote_code

    @classmethod
    def from_exception(cls, operation: str, error: Exception) -> 'RemoteOperationError':
        """Build from an SDK exception, keeping its status and error code"""
        status_code = getattr(error, "status_code", None)
        remote_code = getattr(getattr(error, "error", None), "code", None)
        return cls(f"{operation} failed: {error}", status_code, remote_code)


class DeploymentFailedError(WebAppPublisherError):
    """Template deployment reached a failed terminal state"""

    def __init__(self, deployment_name: str, state: str = "Failed", message: str = None):
        if message is None:
            message = f"Template deployment '{deployment_name}' ended in state '{state}'"
        super().__init__(message, ErrorCode.DEPLOYMENT_FAILED)
        self.deployment_name = deployment_name
        self.state = state


class DeploymentTimeoutError(DeploymentFailedError):
    """Template deployment did not reach a terminal state in time"""

    def __init__(self, deployment_name: str, attempts: int, last_state: str = None):
        message = (
            f"Template deployment '{deployment_name}' still '{last_state}' "
            f"after {attempts} status check(s)"
        )
        super().__init__(deployment_name, last_state, message)
        self.error_code = ErrorCode.DEPLOYMENT_TIMEOUT
        self.attempts = attempts


class PublishProfileNotFoundError(WebAppPublisherError):
    """No publish profile matches the configured transfer protocol"""

    def __init__(self, web_app_name: str, publish_method: str):
        message = f"No '{publish_method}' publish profile found for Web App '{web_app_name}'"
        super().__init__(message, ErrorCode.PUBLISH_PROFILE_NOT_FOUND)
        self.web_app_name = web_app_name
        self.publish_method = publish_method


class FileSystemError(WebAppPublisherError):
    """Local read or stat failure"""

    def __init__(self, message: str, path: str = None):
        super().__init__(message, ErrorCode.FILESYSTEM_ERROR)
        self.path = path


class TransferError(WebAppPublisherError):
    """Connection, session, mkdir or upload failure"""

    def __init__(self, message: str, remote_path: str = None):
        super().__init__(message, ErrorCode.TRANSFER_FAILED)
        self.remote_path = remote_path


class PublishCancelledError(WebAppPublisherError):
    """The operation was cancelled by the caller"""

    def __init__(self, message: str = "Operation cancelled"):
        super().__init__(message, ErrorCode.CANCELLED)
