# webapp_publisher/core/azure_errors.py
"""Classification of Azure SDK errors"""

from typing import Iterable, Optional

from azure.core.exceptions import AzureError, HttpResponseError

from ..api.exceptions import RemoteOperationError, WebAppPublisherError


def remote_error_code(error: BaseException) -> Optional[str]:
    """Return the ARM error code carried by an SDK exception, if any"""
    odata_error = getattr(error, "error", None)
    return getattr(odata_error, "code", None)


def is_not_found(error: BaseException, codes: Optional[Iterable[str]] = None) -> bool:
    """
    Check whether an SDK exception is a "not found" signal

    Args:
        error: Exception raised by a management client
        codes: If given, the ARM error code must also be one of these

    Returns:
        True for an HTTP 404 (with a matching code when codes is given)
    """
    if not isinstance(error, HttpResponseError):
        return False
    if getattr(error, "status_code", None) != 404:
        return False
    if codes is None:
        return True
    return remote_error_code(error) in set(codes)


def translate(operation: str, error: BaseException) -> WebAppPublisherError:
    """Map an exception from a management call onto the error hierarchy"""
    if isinstance(error, WebAppPublisherError):
        return error
    if isinstance(error, AzureError):
        return RemoteOperationError.from_exception(operation, error)
    return RemoteOperationError(f"{operation} failed: {error}")
