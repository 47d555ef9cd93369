"""Request encoding and signing for the UCloud API.

Requests travel as flat form parameters. Lists expand into ``Name.N`` keys
and nested mappings into ``Name.Key``; the ``Signature`` is the SHA1 hex
digest of every ``key + value`` pair in ascending key order followed by the
private key.
"""

from __future__ import annotations

import dataclasses
import hashlib
from collections.abc import Mapping
from typing import Any


def _encode_value(value: Any) -> str:
    match value:
        case bool():
            return "true" if value else "false"
        case float() if value.is_integer():
            return str(int(value))
        case _:
            return str(value)


def _flatten_into(out: dict[str, str], prefix: str, value: Any) -> None:
    if value is None:
        return
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = dataclasses.asdict(value)
    match value:
        case Mapping():
            for key, item in value.items():
                _flatten_into(out, f"{prefix}.{key}" if prefix else str(key), item)
        case list() | tuple():
            for index, item in enumerate(value):
                _flatten_into(out, f"{prefix}.{index}", item)
        case _:
            out[prefix] = _encode_value(value)


def flatten(request: Any) -> dict[str, str]:
    """Flatten a request (mapping or dataclass) into form parameters."""
    out: dict[str, str] = {}
    if request is not None:
        _flatten_into(out, "", request)
    return out


def sign(params: Mapping[str, str], private_key: str) -> str:
    payload = "".join(f"{key}{params[key]}" for key in sorted(params))
    return hashlib.sha1((payload + private_key).encode("utf-8")).hexdigest()
