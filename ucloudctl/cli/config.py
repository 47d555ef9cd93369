import typer

from ucloudctl.config import CONFIG_FILE_NAME, CREDENTIAL_FILE_NAME, config_dir
from ucloudctl.core.exceptions import ConfigurationError
from ucloudctl.utils import mosaic_string, region_label

from . import _common

app = typer.Typer(no_args_is_help=True, help="Inspect local configuration")


@app.command("show")
def show(ctx: typer.Context) -> None:
    """Show the active profile with credentials masked."""
    cli = _common.state(ctx)
    try:
        profile = cli.profile()
    except ConfigurationError as e:
        cli.output.handle_error(e)
        raise typer.Exit(code=1) from e

    row = {
        "Profile": profile.name,
        "PublicKey": mosaic_string(profile.public_key, 10, 5),
        "PrivateKey": mosaic_string(profile.private_key, 5, 5),
        "Region": profile.region,
        "RegionName": region_label(profile.region),
        "Zone": profile.zone,
        "ProjectID": profile.project_id,
        "BaseURL": profile.base_url,
        "Timeout": f"{profile.timeout:g}s",
    }
    cli.output.emit([row])


@app.command("path")
def path(ctx: typer.Context) -> None:
    """Print where configuration and credentials are read from."""
    cli = _common.state(ctx)
    base = config_dir(cli.config_dir, create=True)
    cli.output.print(str(base / CONFIG_FILE_NAME))
    cli.output.print(str(base / CREDENTIAL_FILE_NAME))
