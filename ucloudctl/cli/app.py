from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from ucloudctl import __version__
from ucloudctl.display.output import OutputContext
from ucloudctl.logging import LogConfig, setup_logging, teardown_logging, verbosity_level
from ucloudctl.services.types import RegionRow
from ucloudctl.utils import REGION_LABELS

from . import _common, config, uhost, ulb

app = typer.Typer(
    no_args_is_help=True,
    add_completion=True,
    help="Command-line client for the UCloud control-plane API",
)
region_app = typer.Typer(no_args_is_help=True, help="Regions")

app.add_typer(config.app, name="config")
app.add_typer(region_app, name="region")
app.add_typer(uhost.app, name="uhost")
app.add_typer(ulb.app, name="ulb")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"ucloudctl {__version__}")
        raise typer.Exit()


@app.callback()
def root(
    ctx: typer.Context,
    profile: Annotated[
        str | None, typer.Option("--profile", envvar="UCLOUD_PROFILE", help="Profile name")
    ] = None,
    config_dir: Annotated[
        Path | None,
        typer.Option("--config-dir", envvar="UCLOUD_CONFIG_DIR", help="Configuration directory"),
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Print JSON instead of tables")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log progress")] = False,
    debug: Annotated[bool, typer.Option("--debug", help="Log API calls")] = False,
    log_file: Annotated[str | None, typer.Option("--log-file", help="Also log to this file")] = None,
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version"),
    ] = False,
) -> None:
    # The CLI owns the process, so drop loguru's default sink before adding ours
    logger.remove()
    handler_ids = setup_logging(
        LogConfig(level=verbosity_level(verbose=verbose, debug=debug), file=log_file)
    )
    ctx.call_on_close(lambda: teardown_logging(handler_ids))

    ctx.obj = _common.CLIState(
        profile=profile,
        config_dir=config_dir,
        output=OutputContext(json_output=json_output),
    )


@region_app.command("list")
def list_regions(ctx: typer.Context) -> None:
    """List known regions."""
    cli = _common.state(ctx)
    cli.output.emit([RegionRow(Region=r, Label=label) for r, label in REGION_LABELS.items()])


def main() -> None:
    app()
