from __future__ import annotations

import asyncio
from typing import Any

import pytest

from tenacity import AsyncRetrying, RetryError, stop_after_attempt, wait_fixed

from ucloudctl.core.exceptions import SchemaError, WaitTimeoutError
from ucloudctl.wait import (
    DescribeError,
    Poller,
    PollRequest,
    Success,
    Timeout,
    poll,
    wait_all,
)

pytestmark = [pytest.mark.unit, pytest.mark.timeout(30)]

INTERVAL = 0.05


def _request(rid: str = "uhost-1", *targets: str) -> PollRequest:
    return PollRequest(
        resource_id=rid,
        project_id="org-1",
        region="cn-bj2",
        zone="cn-bj2-05",
        target_states=targets or ("avaliable",),
    )


class _Scripted:
    """Describer replaying a script of snapshots/exceptions; the last step repeats."""

    def __init__(self, *steps: Any) -> None:
        self.steps = steps
        self.calls: list[tuple[str, str, str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def __call__(self, rid: str, pid: str, region: str, zone: str) -> Any:
        self.calls.append((rid, pid, region, zone))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            step = self.steps[min(len(self.calls), len(self.steps)) - 1]
            if isinstance(step, Exception):
                raise step
            return step
        finally:
            self.in_flight -= 1


def _state(value: str) -> dict[str, str]:
    return {"State": value}


class TestSuccess:
    @pytest.mark.asyncio
    async def test_target_on_fourth_tick(self):
        describe = _Scripted(_state("pending"), _state("pending"), _state("pending"), _state("avaliable"))
        handle = poll(describe, _request(), pending=("pending",), timeout=300, interval=INTERVAL)

        outcome = await handle

        assert isinstance(outcome, Success)
        assert outcome.state == "avaliable"
        assert outcome.snapshot == {"State": "avaliable"}
        assert len(describe.calls) == 4
        assert 3 * INTERVAL * 0.9 <= outcome.elapsed < 3 * INTERVAL + 1.0

    @pytest.mark.asyncio
    async def test_immediate_success_does_not_sleep(self):
        describe = _Scripted(_state("avaliable"))
        outcome = await poll(describe, _request(), interval=10)
        assert isinstance(outcome, Success)
        assert outcome.elapsed < 1.0

    @pytest.mark.asyncio
    async def test_any_target_state_matches(self):
        describe = _Scripted(_state("Stopped"))
        outcome = await poll(describe, _request("uhost-1", "Running", "Stopped"), interval=INTERVAL)
        assert isinstance(outcome, Success)
        assert outcome.state == "Stopped"

    @pytest.mark.asyncio
    async def test_describer_receives_request_scope(self):
        describe = _Scripted(_state("avaliable"))
        await poll(describe, _request("uhost-9"))
        assert describe.calls == [("uhost-9", "org-1", "cn-bj2", "cn-bj2-05")]

    @pytest.mark.asyncio
    async def test_unwrap_returns_snapshot(self):
        describe = _Scripted(_state("avaliable"))
        outcome = await poll(describe, _request())
        assert outcome.ok
        assert outcome.unwrap() == {"State": "avaliable"}


class TestPending:
    @pytest.mark.asyncio
    async def test_none_snapshot_is_pending(self):
        describe = _Scripted(None, None, _state("avaliable"))
        outcome = await poll(describe, _request(), interval=INTERVAL)
        assert isinstance(outcome, Success)
        assert len(describe.calls) == 3

    @pytest.mark.asyncio
    async def test_missing_state_field_is_pending(self):
        describe = _Scripted({"UHostId": "uhost-1"}, _state("avaliable"))
        outcome = await poll(describe, _request(), interval=INTERVAL)
        assert isinstance(outcome, Success)
        assert len(describe.calls) == 2

    @pytest.mark.asyncio
    async def test_unrecognized_state_keeps_waiting(self):
        describe = _Scripted(_state("initializing"), _state("rebuilding"), _state("avaliable"))
        outcome = await poll(describe, _request(), pending=("pending",), interval=INTERVAL)
        assert isinstance(outcome, Success)
        assert len(describe.calls) == 3


class TestTimeout:
    @pytest.mark.asyncio
    async def test_unrecognized_state_times_out_never_earlier(self):
        timeout = 0.3
        describe = _Scripted(_state("initializing"))
        loop = asyncio.get_running_loop()
        started = loop.time()

        outcome = await poll(describe, _request(), timeout=timeout, interval=INTERVAL)

        assert isinstance(outcome, Timeout)
        assert outcome.timeout == timeout
        assert outcome.last_state == "initializing"
        assert outcome.elapsed >= timeout
        assert loop.time() - started >= timeout
        assert len(describe.calls) >= 2

    @pytest.mark.asyncio
    async def test_always_none_times_out(self):
        describe = _Scripted(None)
        outcome = await poll(describe, _request(), timeout=0.2, interval=INTERVAL)
        assert isinstance(outcome, Timeout)
        assert outcome.last_state == ""

    @pytest.mark.asyncio
    async def test_unwrap_raises_wait_timeout(self):
        describe = _Scripted(_state("pending"))
        outcome = await poll(describe, _request("uhost-7"), timeout=0.1, interval=INTERVAL)
        assert not outcome.ok
        with pytest.raises(WaitTimeoutError, match="uhost-7"):
            outcome.unwrap()

    @pytest.mark.asyncio
    async def test_slow_describe_is_cut_at_deadline(self):
        async def describe(*_: str) -> dict[str, str]:
            await asyncio.sleep(2)
            return _state("avaliable")

        outcome = await poll(describe, _request(), timeout=0.3, interval=INTERVAL)

        assert isinstance(outcome, Timeout)
        assert 0.3 <= outcome.elapsed < 1.0
        assert outcome.last_state == ""

    @pytest.mark.asyncio
    async def test_deadline_during_later_tick_keeps_last_state(self):
        ticks = 0

        async def describe(*_: str) -> dict[str, str]:
            nonlocal ticks
            ticks += 1
            if ticks > 1:
                await asyncio.sleep(2)
            return _state("Starting")

        outcome = await poll(describe, _request(), timeout=0.3, interval=INTERVAL)

        assert isinstance(outcome, Timeout)
        assert outcome.elapsed < 1.0
        assert outcome.last_state == "Starting"
        assert ticks == 2


class TestDescribeError:
    @pytest.mark.asyncio
    async def test_error_on_third_tick_stops_immediately(self):
        boom = ConnectionError("describe failed")
        describe = _Scripted(_state("pending"), _state("pending"), boom, _state("avaliable"))

        outcome = await poll(describe, _request(), timeout=300, interval=INTERVAL)
        await asyncio.sleep(INTERVAL * 3)

        assert isinstance(outcome, DescribeError)
        assert outcome.error is boom
        assert len(describe.calls) == 3

    @pytest.mark.asyncio
    async def test_error_on_first_tick(self):
        describe = _Scripted(RuntimeError("no credentials"))
        outcome = await poll(describe, _request(), interval=INTERVAL)
        assert isinstance(outcome, DescribeError)
        assert len(describe.calls) == 1
        with pytest.raises(RuntimeError, match="no credentials"):
            outcome.unwrap()

    @pytest.mark.asyncio
    async def test_non_record_snapshot_is_fatal(self):
        describe = _Scripted("Running")
        outcome = await poll(describe, _request(), interval=INTERVAL)
        assert isinstance(outcome, DescribeError)
        assert isinstance(outcome.error, SchemaError)
        assert len(describe.calls) == 1

    @pytest.mark.asyncio
    async def test_describer_running_out_of_its_own_retries(self):
        calls = 0

        async def describe(*_: str) -> None:
            nonlocal calls
            calls += 1
            async for attempt in AsyncRetrying(stop=stop_after_attempt(2), wait=wait_fixed(0)):
                with attempt:
                    raise ConnectionError("describe failed")

        outcome = await poll(describe, _request(), timeout=5, interval=INTERVAL)

        assert isinstance(outcome, DescribeError)
        assert calls == 1
        assert isinstance(outcome.error, RetryError)
        assert outcome.elapsed < 5

    @pytest.mark.asyncio
    async def test_describer_timeout_before_deadline_is_an_error(self):
        describe = _Scripted(TimeoutError("read timed out"))
        outcome = await poll(describe, _request(), timeout=5, interval=INTERVAL)
        assert isinstance(outcome, DescribeError)
        assert isinstance(outcome.error, TimeoutError)


class TestHandle:
    @pytest.mark.asyncio
    async def test_runs_in_background(self):
        describe = _Scripted(_state("pending"), _state("avaliable"))
        handle = poll(describe, _request(), interval=INTERVAL)

        assert not handle.done()
        assert handle.outcome is None

        outcome = await handle.wait()
        assert handle.done()
        assert handle.outcome is outcome
        assert handle.request.resource_id == "uhost-1"

    @pytest.mark.asyncio
    async def test_cancel_stops_session_without_outcome(self):
        describe = _Scripted(_state("pending"))
        handle = poll(describe, _request(), interval=INTERVAL)
        await asyncio.sleep(INTERVAL * 2)

        assert handle.cancel()
        with pytest.raises(asyncio.CancelledError):
            await handle
        calls = len(describe.calls)
        await asyncio.sleep(INTERVAL * 3)

        assert handle.outcome is None
        assert len(describe.calls) == calls

    @pytest.mark.asyncio
    async def test_ticks_never_overlap(self):
        describe = _Scripted(_state("pending"), _state("pending"), _state("avaliable"))
        await poll(describe, _request(), interval=0)
        assert describe.max_in_flight == 1


class TestConcurrentSessions:
    @pytest.mark.asyncio
    async def test_sessions_are_independent(self):
        poller = Poller(
            _Scripted(_state("pending"), _state("avaliable")),
            timeout=300,
            interval=INTERVAL,
        )
        failing = Poller(_Scripted(RuntimeError("gone")), interval=INTERVAL)

        outcomes = await wait_all([
            poller.start(_request("uhost-1")),
            failing.start(_request("uhost-2")),
            poller.start(_request("uhost-3")),
        ])

        assert [o.resource_id for o in outcomes] == ["uhost-1", "uhost-2", "uhost-3"]
        assert isinstance(outcomes[0], Success)
        assert isinstance(outcomes[1], DescribeError)
        assert isinstance(outcomes[2], Success)


class TestPollerValidation:
    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValueError, match="timeout"):
            Poller(_Scripted(None), timeout=0)

    def test_rejects_negative_interval(self):
        with pytest.raises(ValueError, match="interval"):
            Poller(_Scripted(None), interval=-1)
