"""Generic resource-state poller.

Waits in the background for a cloud resource to reach one of its target
lifecycle states. What "ready" means is the caller's business (a describer
plus target states); how to wait is shared by every resource kind.

Example:
    handle = poll(uhost_describer(client), PollRequest(
        resource_id="uhost-abc",
        project_id="org-1",
        region="cn-bj2",
        zone="cn-bj2-05",
        target_states=("Running",),
    ))
    ...  # do other work
    outcome = await handle
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Collection, Generator, Iterable
from dataclasses import dataclass
from typing import Any, TypeAlias

from loguru import logger
from tenacity import AsyncRetrying, RetryError, retry_if_exception_type

from .outcome import DescribeError, Success, Timeout, WaitOutcome
from .state import extract_state

DEFAULT_PENDING: tuple[str, ...] = ("pending",)
DEFAULT_TIMEOUT = 300.0
DEFAULT_INTERVAL = 3.0

Describer: TypeAlias = Callable[[str, str, str, str], Awaitable[Any | None]]
"""(resource_id, project_id, region, zone) -> snapshot or None. Raises on failure."""


@dataclass(frozen=True, slots=True)
class PollRequest:
    resource_id: str
    project_id: str
    region: str
    zone: str
    target_states: tuple[str, ...]


class _StatePending(Exception):
    def __init__(self, state: str) -> None:
        self.state = state
        super().__init__(state or "<no state>")


class _DeadlineReached(Exception):
    """The session deadline expired while a describe call was in flight."""


class _PollExpired(RetryError):
    """The session deadline expired between two ticks."""


class PollHandle:
    """Completion handle of one background poll session.

    Awaiting the handle yields the session's ``WaitOutcome``. Cancelling stops
    the loop before its next tick; a cancelled session has no outcome.
    """

    __slots__ = ("_request", "_task")

    def __init__(self, request: PollRequest, task: asyncio.Task[WaitOutcome]) -> None:
        self._request = request
        self._task = task

    @property
    def request(self) -> PollRequest:
        return self._request

    @property
    def outcome(self) -> WaitOutcome | None:
        if not self._task.done() or self._task.cancelled():
            return None
        return self._task.result()

    def done(self) -> bool:
        return self._task.done()

    def cancel(self) -> bool:
        return self._task.cancel()

    async def wait(self) -> WaitOutcome:
        return await self._task

    def __await__(self) -> Generator[Any, None, WaitOutcome]:
        return self._task.__await__()


class Poller:
    """Reusable waiter for one resource kind.

    Args:
        describe: Read-only accessor for the current resource snapshot.
        pending: States expected while waiting. States that are neither
            pending nor target are tolerated and keep the wait open.
        timeout: Wall-clock budget of a session in seconds.
        interval: Fixed delay between two describe calls in seconds.
    """

    def __init__(
        self,
        describe: Describer,
        *,
        pending: Collection[str] = DEFAULT_PENDING,
        timeout: float = DEFAULT_TIMEOUT,
        interval: float = DEFAULT_INTERVAL,
    ) -> None:
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        if interval < 0:
            raise ValueError(f"interval must not be negative, got {interval}")
        self._describe = describe
        self._pending = frozenset(pending)
        self._timeout = timeout
        self._interval = interval

    def start(self, request: PollRequest) -> PollHandle:
        """Start a session on the running event loop and return its handle."""
        task = asyncio.get_running_loop().create_task(
            self._run(request), name=f"poll-{request.resource_id}"
        )
        return PollHandle(request, task)

    async def _refresh(self, request: PollRequest, deadline: float) -> tuple[Any, str]:
        scope = asyncio.timeout_at(deadline)
        try:
            async with scope:
                snapshot = await self._describe(
                    request.resource_id, request.project_id, request.region, request.zone
                )
        except TimeoutError:
            if scope.expired():
                raise _DeadlineReached() from None
            raise
        if snapshot is None:
            raise _StatePending("")

        state = extract_state(snapshot)
        if state and state in request.target_states:
            return snapshot, state
        if state and state not in self._pending:
            logger.bind(component="poller").debug(
                "{rid} in unrecognized state {state!r}, still waiting",
                rid=request.resource_id, state=state,
            )
        raise _StatePending(state)

    async def _run(self, request: PollRequest) -> WaitOutcome:
        log = logger.bind(component="poller", resource=request.resource_id)
        loop = asyncio.get_running_loop()
        started = loop.time()
        deadline = started + self._timeout
        last_state = ""

        def remaining() -> float:
            return deadline - loop.time()

        log.debug(
            "Waiting for {rid} to reach {targets}",
            rid=request.resource_id, targets=list(request.target_states),
        )
        outcome: WaitOutcome
        try:
            async for attempt in AsyncRetrying(
                stop=lambda _: remaining() <= 0,
                wait=lambda _: min(self._interval, max(remaining(), 0.0)),
                retry=retry_if_exception_type(_StatePending),
                retry_error_cls=_PollExpired,
            ):
                with attempt:
                    try:
                        snapshot, state = await self._refresh(request, deadline)
                    except _StatePending as e:
                        last_state = e.state
                        raise
            outcome = Success(
                resource_id=request.resource_id,
                snapshot=snapshot,
                state=state,
                elapsed=loop.time() - started,
            )
            log.info("{rid} reached state {state}", rid=request.resource_id, state=state)
        except (_PollExpired, _DeadlineReached):
            outcome = Timeout(
                resource_id=request.resource_id,
                timeout=self._timeout,
                elapsed=loop.time() - started,
                last_state=last_state,
            )
            log.error(
                "{rid} did not reach {targets} within {timeout:g}s (last state {state!r})",
                rid=request.resource_id, targets=list(request.target_states),
                timeout=self._timeout, state=last_state,
            )
        except Exception as e:
            outcome = DescribeError(
                resource_id=request.resource_id,
                error=e,
                elapsed=loop.time() - started,
            )
            log.error("Describing {rid} failed: {error}", rid=request.resource_id, error=e)
        return outcome


def poll(
    describe: Describer,
    request: PollRequest,
    *,
    pending: Collection[str] = DEFAULT_PENDING,
    timeout: float = DEFAULT_TIMEOUT,
    interval: float = DEFAULT_INTERVAL,
) -> PollHandle:
    """Start one poll session in the background."""
    return Poller(describe, pending=pending, timeout=timeout, interval=interval).start(request)


async def wait_all(handles: Iterable[PollHandle]) -> list[WaitOutcome]:
    """Wait for several concurrent sessions, preserving their order."""
    return list(await asyncio.gather(*(h.wait() for h in handles)))
