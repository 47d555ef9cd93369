"""Command output context.

Every command receives an ``OutputContext`` instead of writing to a
process-wide console, so tests and embedding programs can capture output.
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Sequence
from typing import Any

from rich.console import Console

from ucloudctl.core.exceptions import ApiError

from .table import render_table


def _to_plain(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, list | tuple):
        return [_to_plain(v) for v in value]
    return value


class OutputContext:
    def __init__(
        self,
        *,
        json_output: bool = False,
        console: Console | None = None,
        err_console: Console | None = None,
    ) -> None:
        self.json_output = json_output
        self.console = console or Console(soft_wrap=True)
        self.err_console = err_console or Console(stderr=True, soft_wrap=True)

    def print(self, text: str) -> None:
        self.console.out(text, highlight=False)

    def print_error(self, text: str) -> None:
        self.err_console.out(text, highlight=False)

    def print_json(self, data: Any) -> None:
        self.console.out(json.dumps(_to_plain(data), indent=2, ensure_ascii=False), highlight=False)

    def print_table(self, rows: Sequence[Any], columns: Sequence[str] | None = None) -> None:
        self.console.out(render_table(rows, columns), end="", highlight=False)

    def emit(self, rows: Sequence[Any], columns: Sequence[str] | None = None) -> None:
        """Print rows as JSON or as a table depending on the selected format."""
        if self.json_output:
            self.print_json(list(rows))
        else:
            self.print_table(rows, columns)

    def handle_error(self, error: BaseException) -> None:
        match error:
            case ApiError(ret_code=code, message=message):
                self.print_error(f"Something wrong. RetCode:{code}. Message:{message}")
            case _:
                self.print_error(f"Error: {error}")
