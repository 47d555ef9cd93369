"""Terminal outcomes of a poll session (ADT)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeAlias

from ucloudctl.core.exceptions import WaitTimeoutError


@dataclass(frozen=True, slots=True)
class Success:
    """The resource reached one of the target states."""

    resource_id: str
    snapshot: Any
    state: str
    elapsed: float

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> Any:
        return self.snapshot


@dataclass(frozen=True, slots=True)
class Timeout:
    """The target state was not observed within the allotted window."""

    resource_id: str
    timeout: float
    elapsed: float
    last_state: str = ""

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise WaitTimeoutError(self.resource_id, self.timeout)


@dataclass(frozen=True, slots=True)
class DescribeError:
    """Describing the resource failed; the session stopped at that tick."""

    resource_id: str
    error: Exception
    elapsed: float

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise self.error


WaitOutcome: TypeAlias = Success | Timeout | DescribeError
