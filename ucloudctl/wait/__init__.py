from ucloudctl.wait.outcome import DescribeError, Success, Timeout, WaitOutcome
from ucloudctl.wait.poller import (
    DEFAULT_INTERVAL,
    DEFAULT_PENDING,
    DEFAULT_TIMEOUT,
    Describer,
    PollHandle,
    Poller,
    PollRequest,
    poll,
    wait_all,
)
from ucloudctl.wait.state import STATE_FIELDS, Stateful, extract_state

__all__ = [
    "DEFAULT_INTERVAL",
    "DEFAULT_PENDING",
    "DEFAULT_TIMEOUT",
    "STATE_FIELDS",
    "DescribeError",
    "Describer",
    "PollHandle",
    "PollRequest",
    "Poller",
    "Stateful",
    "Success",
    "Timeout",
    "WaitOutcome",
    "extract_state",
    "poll",
    "wait_all",
]
