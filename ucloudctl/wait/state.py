"""Lifecycle state extraction from resource snapshots.

Resource models expose their state through the ``Stateful`` protocol. Raw
API records (mappings, dataclasses, plain objects) fall back to the first
attribute named ``State`` or ``Status`` in declaration order, which covers the
inconsistent response schemas across resource kinds.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from ucloudctl.core.exceptions import SchemaError

STATE_FIELDS: tuple[str, ...] = ("State", "Status")


@runtime_checkable
class Stateful(Protocol):
    def current_state(self) -> str: ...


def _fields(snapshot: Any) -> Iterable[tuple[str, Any]]:
    match snapshot:
        case Mapping():
            return snapshot.items()
        case _ if dataclasses.is_dataclass(snapshot) and not isinstance(snapshot, type):
            return ((f.name, getattr(snapshot, f.name)) for f in dataclasses.fields(snapshot))
        case str() | bytes() | type():
            raise SchemaError(f"Snapshot is not a record: {type(snapshot).__name__}")
        case _ if hasattr(snapshot, "__dict__"):
            return vars(snapshot).items()
        case _:
            raise SchemaError(f"Snapshot is not a record: {type(snapshot).__name__}")


def extract_state(snapshot: Any) -> str:
    """Return the lifecycle state of a snapshot, or ``""`` if it has none.

    Raises:
        SchemaError: If the snapshot is not a record at all.
    """
    if isinstance(snapshot, Stateful):
        return snapshot.current_state()

    for name, value in _fields(snapshot):
        if name in STATE_FIELDS:
            return "" if value is None else str(value)
    return ""
