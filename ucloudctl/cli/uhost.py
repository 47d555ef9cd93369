from collections.abc import Sequence
from typing import Annotated

import typer

from ucloudctl.api.client import ApiClient
from ucloudctl.config import Profile
from ucloudctl.services import uhost
from ucloudctl.utils import pick_resource_id
from ucloudctl.wait import (
    DEFAULT_INTERVAL,
    DEFAULT_TIMEOUT,
    DescribeError,
    Poller,
    PollRequest,
    Success,
    Timeout,
    WaitOutcome,
    wait_all,
)

from . import _common
from ._common import CLIState, ProjectOpt, RegionOpt, ZoneOpt

app = typer.Typer(no_args_is_help=True, help="Manage UHost instances")

AsyncOpt = Annotated[
    bool, typer.Option("--async", help="Return without waiting for the target state")
]
TimeoutOpt = Annotated[
    float, typer.Option("--timeout", help="Seconds to wait for the target state")
]
IntervalOpt = Annotated[
    float, typer.Option("--interval", help="Seconds between two state checks", hidden=True)
]


async def wait_for_state(
    cli: CLIState,
    client: ApiClient,
    ids: Sequence[str],
    target: str,
    *,
    zone: str | None,
    timeout: float = DEFAULT_TIMEOUT,
    interval: float = DEFAULT_INTERVAL,
) -> list[WaitOutcome]:
    """Wait concurrently for every instance to reach ``target`` and report each result."""
    profile = client.profile
    poller = Poller(
        uhost.uhost_describer(client),
        pending=uhost.PENDING_STATES,
        timeout=timeout,
        interval=interval,
    )
    handles = [
        poller.start(
            PollRequest(
                resource_id=rid,
                project_id=profile.project_id,
                region=profile.region,
                zone=zone or profile.zone,
                target_states=(target,),
            )
        )
        for rid in ids
    ]
    with cli.output.err_console.status(f"Waiting for {len(handles)} uhost(s) to be {target}..."):
        outcomes = await wait_all(handles)

    for outcome in outcomes:
        match outcome:
            case Success(resource_id=rid, state=state):
                cli.output.print(f"uhost[{rid}] is {state}")
            case Timeout(resource_id=rid, timeout=limit, last_state=last):
                cli.output.print_error(
                    f"uhost[{rid}] is still {last or 'pending'} after {limit:g}s"
                )
            case DescribeError(resource_id=rid, error=error):
                cli.output.print_error(f"uhost[{rid}] could not be described")
                cli.output.handle_error(error)
    return outcomes


def _finish(outcomes: Sequence[WaitOutcome]) -> None:
    if not all(o.ok for o in outcomes):
        raise typer.Exit(code=1)


def _scoped(cli: CLIState, region: str | None, project_id: str | None) -> Profile:
    return cli.profile(region=region, project_id=project_id)


@app.command("list")
def list_instances(
    ctx: typer.Context,
    uhost_id: Annotated[list[str] | None, typer.Option("--uhost-id", help="Filter by id")] = None,
    group: Annotated[str | None, typer.Option("--group", help="Filter by business group")] = None,
    offset: Annotated[int, typer.Option("--offset")] = 0,
    limit: Annotated[int, typer.Option("--limit")] = 100,
    region: RegionOpt = None,
    zone: ZoneOpt = None,
    project_id: ProjectOpt = None,
) -> None:
    """List UHost instances."""
    cli = _common.state(ctx)

    async def _list() -> None:
        async with _common.open_client(_scoped(cli, region, project_id)) as client:
            instances = await uhost.describe_uhost_instances(
                client,
                uhost_ids=[pick_resource_id(i) for i in uhost_id or []] or None,
                zone=zone,
                tag=group,
                offset=offset,
                limit=limit,
            )
        cli.output.emit([inst.to_row() for inst in instances])

    _common.run(cli, _list())


@app.command("create")
def create_instances(
    ctx: typer.Context,
    image_id: Annotated[str, typer.Option("--image-id", help="Image to boot from")],
    password: Annotated[
        str, typer.Option("--password", prompt=True, hide_input=True, help="Root password")
    ],
    cpu: Annotated[int, typer.Option("--cpu")] = 1,
    memory_gb: Annotated[int, typer.Option("--memory-gb")] = 1,
    name: Annotated[str, typer.Option("--name")] = "UHost",
    group: Annotated[str | None, typer.Option("--group")] = None,
    disk_size_gb: Annotated[int, typer.Option("--disk-size-gb")] = 20,
    charge_type: Annotated[str, typer.Option("--charge-type")] = "Month",
    count: Annotated[int, typer.Option("--count", min=1, help="Number of instances")] = 1,
    no_wait: AsyncOpt = False,
    timeout: TimeoutOpt = DEFAULT_TIMEOUT,
    interval: IntervalOpt = DEFAULT_INTERVAL,
    region: RegionOpt = None,
    zone: ZoneOpt = None,
    project_id: ProjectOpt = None,
) -> None:
    """Create UHost instances and wait until they are running."""
    cli = _common.state(ctx)

    async def _create() -> list[WaitOutcome]:
        async with _common.open_client(_scoped(cli, region, project_id)) as client:
            ids: list[str] = []
            for _ in range(count):
                ids.extend(
                    await uhost.create_uhost_instance(
                        client,
                        image_id=image_id,
                        password=password,
                        cpu=cpu,
                        memory_mb=memory_gb * 1024,
                        name=name,
                        tag=group,
                        boot_disk_size_gb=disk_size_gb,
                        charge_type=charge_type,
                        zone=zone,
                    )
                )
            for rid in ids:
                cli.output.print(f"uhost[{rid}] is initializing")
            if no_wait:
                return []
            return await wait_for_state(
                cli, client, ids, uhost.RUNNING, zone=zone, timeout=timeout, interval=interval
            )

    _finish(_common.run(cli, _create()))


def _power_command(action: str, target: str) -> None:
    """Register a start/stop/reboot command waiting for ``target``."""
    invoke = {
        "start": uhost.start_uhost_instance,
        "stop": uhost.stop_uhost_instance,
        "reboot": uhost.reboot_uhost_instance,
    }[action]

    def command(
        ctx: typer.Context,
        uhost_ids: Annotated[list[str], typer.Argument(help="UHost ids")],
        no_wait: AsyncOpt = False,
        timeout: TimeoutOpt = DEFAULT_TIMEOUT,
        interval: IntervalOpt = DEFAULT_INTERVAL,
        region: RegionOpt = None,
        zone: ZoneOpt = None,
        project_id: ProjectOpt = None,
    ) -> None:
        cli = _common.state(ctx)
        ids = [pick_resource_id(i) for i in uhost_ids]

        async def _apply() -> list[WaitOutcome]:
            async with _common.open_client(_scoped(cli, region, project_id)) as client:
                for rid in ids:
                    await invoke(client, rid, zone=zone)
                    cli.output.print(f"uhost[{rid}] {action} requested")
                if no_wait:
                    return []
                return await wait_for_state(
                    cli, client, ids, target, zone=zone, timeout=timeout, interval=interval
                )

        _finish(_common.run(cli, _apply()))

    command.__doc__ = f"{action.capitalize()} UHost instances and wait until they are {target}."
    app.command(action)(command)


_power_command("start", uhost.RUNNING)
_power_command("stop", uhost.STOPPED)
_power_command("reboot", uhost.RUNNING)


@app.command("delete")
def delete_instances(
    ctx: typer.Context,
    uhost_ids: Annotated[list[str], typer.Argument(help="UHost ids")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
    keep_eip: Annotated[bool, typer.Option("--keep-eip")] = False,
    keep_udisk: Annotated[bool, typer.Option("--keep-udisk")] = False,
    timeout: TimeoutOpt = DEFAULT_TIMEOUT,
    interval: IntervalOpt = DEFAULT_INTERVAL,
    region: RegionOpt = None,
    zone: ZoneOpt = None,
    project_id: ProjectOpt = None,
) -> None:
    """Delete UHost instances, stopping running ones first."""
    cli = _common.state(ctx)
    ids = [pick_resource_id(i) for i in uhost_ids]
    if not yes:
        typer.confirm(f"Delete {', '.join(ids)}?", abort=True)

    async def _delete() -> list[WaitOutcome]:
        async with _common.open_client(_scoped(cli, region, project_id)) as client:
            instances = await uhost.describe_uhost_instances(client, uhost_ids=ids, zone=zone)
            running = [i.id for i in instances if i.state == uhost.RUNNING]
            for rid in running:
                await uhost.stop_uhost_instance(client, rid, zone=zone)
            outcomes: list[WaitOutcome] = []
            if running:
                outcomes = await wait_for_state(
                    cli, client, running, uhost.STOPPED,
                    zone=zone, timeout=timeout, interval=interval,
                )
            failed = {o.resource_id for o in outcomes if not o.ok}
            for rid in ids:
                if rid in failed:
                    continue
                await uhost.terminate_uhost_instance(
                    client, rid,
                    release_eip=not keep_eip,
                    release_udisk=not keep_udisk,
                    zone=zone,
                )
                cli.output.print(f"uhost[{rid}] deleted")
            return outcomes

    _finish(_common.run(cli, _delete()))


@app.command("wait")
def wait_instances(
    ctx: typer.Context,
    uhost_ids: Annotated[list[str], typer.Argument(help="UHost ids")],
    target: Annotated[str, typer.Option("--state", help="Target state, e.g. Running")] = uhost.RUNNING,
    timeout: TimeoutOpt = DEFAULT_TIMEOUT,
    interval: IntervalOpt = DEFAULT_INTERVAL,
    region: RegionOpt = None,
    zone: ZoneOpt = None,
    project_id: ProjectOpt = None,
) -> None:
    """Wait until UHost instances reach a state."""
    cli = _common.state(ctx)
    ids = [pick_resource_id(i) for i in uhost_ids]

    async def _wait() -> list[WaitOutcome]:
        async with _common.open_client(_scoped(cli, region, project_id)) as client:
            return await wait_for_state(
                cli, client, ids, target, zone=zone, timeout=timeout, interval=interval
            )

    _finish(_common.run(cli, _wait()))
