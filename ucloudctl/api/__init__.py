from ucloudctl.api.client import ApiClient, is_retryable
from ucloudctl.api.signature import flatten, sign

__all__ = ["ApiClient", "flatten", "is_retryable", "sign"]
