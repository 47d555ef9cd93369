from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any, TypeAlias

import pytest

from ucloudctl.config import Profile

Handler: TypeAlias = dict[str, Any] | Exception | Callable[[dict[str, Any]], dict[str, Any]]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory):
    for key in list(os.environ):
        if key.startswith("UCLOUD_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("UCLOUD_CONFIG_DIR", str(tmp_path_factory.mktemp("ucloud-config")))


@pytest.fixture
def profile() -> Profile:
    return Profile(
        name="test",
        public_key="ucloud-public-key-0123456789",
        private_key="ucloud-private-key-0123456789",
        region="cn-bj2",
        zone="cn-bj2-05",
        project_id="org-test",
        base_url="http://127.0.0.1:1",
        max_retries=3,
    )


class FakeClient:
    """In-memory stand-in for ApiClient.

    Each action maps to a list of handlers consumed in order; the last one
    repeats. A handler is a response body, an exception to raise or a
    callable receiving the request.
    """

    def __init__(self, profile: Profile, responses: dict[str, list[Handler]] | None = None) -> None:
        self.profile = profile
        self.responses = {k: list(v) for k, v in (responses or {}).items()}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def __aenter__(self) -> FakeClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        pass

    def actions(self) -> list[str]:
        return [action for action, _ in self.calls]

    async def invoke(self, action: str, request: Any = None) -> dict[str, Any]:
        params = {k: v for k, v in dict(request or {}).items() if v is not None}
        self.calls.append((action, params))
        queue = self.responses.get(action)
        if not queue:
            return {"RetCode": 0, "Action": f"{action}Response"}
        handler = queue.pop(0) if len(queue) > 1 else queue[0]
        match handler:
            case Exception():
                raise handler
            case dict():
                return handler
            case _:
                return handler(params)


@pytest.fixture
def fake_client(profile: Profile) -> Callable[..., FakeClient]:
    def make(**responses: list[Handler]) -> FakeClient:
        return FakeClient(profile, responses)

    return make


def uhost_set(*states: str, uhost_id: str = "uhost-1") -> list[dict[str, Any]]:
    """DescribeUHostInstance responses, one per state."""
    return [
        {"RetCode": 0, "UHostSet": [{"UHostId": uhost_id, "Name": "web", "State": s}]}
        for s in states
    ]
