"""Custom exception hierarchy for ucloudctl.

All ucloudctl-specific exceptions inherit from UCloudError, enabling
callers to catch every client-side failure with a single except clause.
Transport failures are reported separately as ``ucloudctl.infra.http.HttpError``.
"""

from __future__ import annotations


class UCloudError(Exception):
    """Base exception for all ucloudctl errors."""


class ConfigurationError(UCloudError):
    """Raised for invalid configuration or missing required settings."""


class ApiError(UCloudError):
    """Raised when an action answers with a non-zero RetCode."""

    def __init__(self, action: str, ret_code: int, message: str = "") -> None:
        self.action = action
        self.ret_code = ret_code
        self.message = message
        super().__init__(f"Something wrong. RetCode:{ret_code}. Message:{message}")


class SchemaError(UCloudError):
    """Raised when a resource snapshot is not a record a state can be read from."""


class WaitTimeoutError(UCloudError):
    """Raised when a resource never reached its target state in time."""

    def __init__(self, resource_id: str, timeout: float) -> None:
        self.resource_id = resource_id
        self.timeout = timeout
        super().__init__(f"Resource {resource_id} did not reach target state within {timeout:g}s")
