from typing import Annotated

import typer

from ucloudctl.services import ulb
from ucloudctl.utils import pick_resource_id

from . import _common
from ._common import ProjectOpt, RegionOpt

app = typer.Typer(no_args_is_help=True, help="Manage ULB load balancers")


@app.command("list")
def list_ulbs(
    ctx: typer.Context,
    ulb_id: Annotated[str | None, typer.Option("--ulb-id", help="Filter by id")] = None,
    vpc_id: Annotated[str | None, typer.Option("--vpc-id")] = None,
    subnet_id: Annotated[str | None, typer.Option("--subnet-id")] = None,
    offset: Annotated[int, typer.Option("--offset")] = 0,
    limit: Annotated[int, typer.Option("--limit")] = 100,
    region: RegionOpt = None,
    project_id: ProjectOpt = None,
) -> None:
    """List load balancers."""
    cli = _common.state(ctx)

    async def _list() -> None:
        async with _common.open_client(cli.profile(region=region, project_id=project_id)) as client:
            ulbs = await ulb.describe_ulbs(
                client,
                ulb_id=pick_resource_id(ulb_id) if ulb_id else None,
                vpc_id=vpc_id,
                subnet_id=subnet_id,
                offset=offset,
                limit=limit,
            )
        cli.output.emit([lb.to_row() for lb in ulbs])

    _common.run(cli, _list())


@app.command("create")
def create(
    ctx: typer.Context,
    name: Annotated[str, typer.Option("--name", help="Load balancer name")],
    mode: Annotated[str, typer.Option("--mode", help="outer (internet) or inner (intranet)")] = "outer",
    vpc_id: Annotated[str | None, typer.Option("--vpc-id")] = None,
    subnet_id: Annotated[str | None, typer.Option("--subnet-id")] = None,
    group: Annotated[str | None, typer.Option("--group")] = None,
    charge_type: Annotated[str | None, typer.Option("--charge-type")] = None,
    region: RegionOpt = None,
    project_id: ProjectOpt = None,
) -> None:
    """Create a load balancer."""
    cli = _common.state(ctx)
    if mode not in ("outer", "inner"):
        raise typer.BadParameter("mode must be 'outer' or 'inner'", param_hint="--mode")

    async def _create() -> None:
        async with _common.open_client(cli.profile(region=region, project_id=project_id)) as client:
            ulb_id = await ulb.create_ulb(
                client,
                name=name,
                mode=mode,  # type: ignore[arg-type]
                vpc_id=vpc_id,
                subnet_id=subnet_id,
                tag=group,
                charge_type=charge_type,
            )
        cli.output.print(f"ulb[{ulb_id}] created")

    _common.run(cli, _create())


@app.command("delete")
def delete(
    ctx: typer.Context,
    ulb_ids: Annotated[list[str], typer.Argument(help="ULB ids")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
    region: RegionOpt = None,
    project_id: ProjectOpt = None,
) -> None:
    """Delete load balancers."""
    cli = _common.state(ctx)
    ids = [pick_resource_id(i) for i in ulb_ids]
    if not yes:
        typer.confirm(f"Delete {', '.join(ids)}?", abort=True)

    async def _delete() -> None:
        async with _common.open_client(cli.profile(region=region, project_id=project_id)) as client:
            for ulb_id in ids:
                await ulb.delete_ulb(client, ulb_id)
                cli.output.print(f"ulb[{ulb_id}] deleted")

    _common.run(cli, _delete())
