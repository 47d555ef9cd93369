import asyncio
from collections.abc import Coroutine
from dataclasses import replace
from pathlib import Path
from typing import Annotated, Any, TypeVar

import typer

from ucloudctl.api.client import ApiClient
from ucloudctl.config import Profile, load_profile
from ucloudctl.core.exceptions import UCloudError
from ucloudctl.display.output import OutputContext
from ucloudctl.infra.http import HttpError

T = TypeVar("T")


class CLIState:
    def __init__(
        self,
        *,
        profile: str | None,
        config_dir: Path | None,
        output: OutputContext,
    ) -> None:
        self.profile_name = profile
        self.config_dir = config_dir
        self.output = output

    def profile(
        self,
        *,
        region: str | None = None,
        project_id: str | None = None,
    ) -> Profile:
        profile = load_profile(self.profile_name, directory=self.config_dir)
        overrides = {k: v for k, v in {"region": region, "project_id": project_id}.items() if v}
        return replace(profile, **overrides) if overrides else profile


def state(ctx: typer.Context) -> CLIState:
    obj = ctx.find_root().obj
    if not isinstance(obj, CLIState):
        raise typer.BadParameter("CLI context was not initialized")
    return obj


def open_client(profile: Profile) -> ApiClient:
    return ApiClient(profile)


def run(cli: CLIState, awaitable: Coroutine[Any, Any, T]) -> T:
    """Run a command coroutine, turning client errors into exit status 1."""
    try:
        return asyncio.run(awaitable)
    except (UCloudError, HttpError) as e:
        cli.output.handle_error(e)
        raise typer.Exit(code=1) from e


RegionOpt = Annotated[str | None, typer.Option("--region", help="Region, overrides the profile")]
ZoneOpt = Annotated[str | None, typer.Option("--zone", help="Availability zone, overrides the profile")]
ProjectOpt = Annotated[
    str | None, typer.Option("--project-id", help="Project id, overrides the profile")
]
