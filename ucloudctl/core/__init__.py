from ucloudctl.core.exceptions import (
    ApiError,
    ConfigurationError,
    SchemaError,
    UCloudError,
    WaitTimeoutError,
)

__all__ = [
    "ApiError",
    "ConfigurationError",
    "SchemaError",
    "UCloudError",
    "WaitTimeoutError",
]
