"""
CLI: ``elbman`` — add or remove an entire RightScale server array to or from an ELB.

Intended for red/black deploys:

- clone a new server array with upgraded packages
- add the entire new array to the existing ELB
- remove the instances of the old array from the ELB
- after testing, remove the old server array

Usage::

    elbman --add -s web_v2 -l web-elb -t $RS_REFRESH_TOKEN
    elbman --remove -s web_v1 -l web-elb -e prod
    elbman --add -s web_v2 -l web-elb --dryrun

Defaults come from ``RS_*`` environment variables or ``~/elbman.env``.
"""

from __future__ import annotations

from typing import Optional

import typer
from pydantic import ValidationError

from elbman.errors import ConfigurationError
from elbman.io.credentials import ElbManagerSettings
from elbman.io.env import load_env
from elbman.log import get_logger
from elbman.ops.orchestrator import run_from_settings

app = typer.Typer(
    name="elbman",
    help="Add or remove an entire RightScale server array to or from an ELB.",
    add_completion=False,
)


@app.command()
def main(
    add: bool = typer.Option(False, "--add", "-a", help="Add server array to a ELB."),
    remove: bool = typer.Option(False, "--remove", "-r", help="Remove server array from a ELB."),
    env: Optional[str] = typer.Option(None, "--env", "-e", help="Deployment environment (staging or prod)."),
    server_array: Optional[str] = typer.Option(
        None, "--server_array", "-s", help="Server array name to add or remove from ELB."
    ),
    elb: Optional[str] = typer.Option(
        None, "--elb", "-l", help="ELB name to add or remove server array to or from."
    ),
    api_url: Optional[str] = typer.Option(None, "--api_url", "-u", help="RightScale API URL."),
    api_version: Optional[str] = typer.Option(
        None, "--api_version", "-v", help="RightScale API Version."
    ),
    refresh_token: Optional[str] = typer.Option(
        None, "--refresh_token", "-t", help="The refresh token for RightScale OAuth2."
    ),
    oauth2_api_url: Optional[str] = typer.Option(
        None, "--oauth2_api_url", "-o", help="RightScale OAuth2 URL."
    ),
    dryrun: bool = typer.Option(False, "--dryrun", "-d", help="Dryrun. Do not update ELB."),
    timeout: Optional[int] = typer.Option(
        None, "--timeout", min=1, help="Polling rounds to wait for the RightScale task."
    ),
    poll_interval: Optional[float] = typer.Option(
        None, "--poll-interval", min=0, help="Seconds between polling rounds."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Debug logging."),
) -> None:
    """Add or remove all instances of a server array to or from an ELB."""
    logger = get_logger(verbose=verbose)
    load_env()

    try:
        settings = ElbManagerSettings()
    except ValidationError as exc:
        error = ConfigurationError.from_validation_error(exc)
        logger.error(str(error))
        raise typer.Exit(code=error.exit_code)

    code = run_from_settings(
        settings,
        logger=logger,
        add=add,
        remove=remove,
        env=env,
        server_array=server_array,
        elb=elb,
        api_url=api_url,
        api_version=api_version,
        oauth2_api_url=oauth2_api_url,
        refresh_token=refresh_token,
        dry_run=dryrun,
        timeout=timeout,
        poll_interval=poll_interval,
    )
    raise typer.Exit(code=code)


if __name__ == "__main__":  # pragma: no cover
    app()
