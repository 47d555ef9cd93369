"""Async RPC client for the UCloud API.

Every action is a signed form POST to a single endpoint. The client fills the
common parameters from the active profile and turns non-zero ``RetCode``
answers into ``ApiError``.

Example:
    async with ApiClient(profile) as client:
        resp = await client.invoke("DescribeUHostInstance", {"Limit": 20})
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from loguru import logger

from ucloudctl.config import Profile
from ucloudctl.core.exceptions import ApiError
from ucloudctl.infra.http import HttpClient
from ucloudctl.retry import on_transient_http_error, retry

from .signature import flatten, sign

USER_AGENT = "ucloudctl/0.4.0"

# Actions with these prefixes allocate resources and are never replayed
NON_RETRYABLE_PREFIXES = ("Create", "Allocate")


def is_retryable(action: str) -> bool:
    return not action.startswith(NON_RETRYABLE_PREFIXES)


class ApiClient:
    """Signed action invoker bound to one profile.

    Region and ProjectId default to the profile and may be overridden per
    request by passing them in the request itself.
    """

    def __init__(self, profile: Profile, *, http: HttpClient | None = None) -> None:
        self._profile = profile.require_credentials()
        self._log = logger.bind(component="api")
        self._http = http or HttpClient(
            profile.base_url,
            timeout=profile.timeout,
            default_headers={"User-Agent": USER_AGENT},
        )

    @property
    def profile(self) -> Profile:
        return self._profile

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *_args: object) -> None:
        await self._http.close()

    async def close(self) -> None:
        await self._http.close()

    def build_params(self, action: str, request: Mapping[str, Any] | Any = None) -> dict[str, str]:
        params: dict[str, str] = {"Action": action, "PublicKey": self._profile.public_key}
        if self._profile.region:
            params["Region"] = self._profile.region
        if self._profile.project_id:
            params["ProjectId"] = self._profile.project_id
        params.update(flatten(request))
        params["Signature"] = sign(params, self._profile.private_key)
        return params

    async def invoke(self, action: str, request: Mapping[str, Any] | Any = None) -> dict[str, Any]:
        """Invoke an action and return the decoded response body.

        Raises:
            ApiError: The API answered with a non-zero RetCode.
            HttpError: The request failed at the transport level.
        """
        params = self.build_params(action, request)
        self._log.debug("Invoking {action}", action=action)

        send = self._send
        if is_retryable(action):
            send = retry(
                on=on_transient_http_error,
                max_attempts=self._profile.max_retries,
            )(self._send)

        body: dict[str, Any] = await send(params) or {}
        ret_code = int(body.get("RetCode", 0))
        if ret_code != 0:
            message = str(body.get("Message", ""))
            self._log.warning(
                "{action} failed: RetCode={code} Message={message}",
                action=action, code=ret_code, message=message,
            )
            raise ApiError(action, ret_code, message)
        return body

    async def _send(self, params: dict[str, str]) -> Any:
        return await self._http.request("POST", "/", data=params)
