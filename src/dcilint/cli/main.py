"""dcilint CLI - dcilint command."""

import click

from dcilint.cli.check import check_command
from dcilint.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="dcilint")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """dcilint - check DCI Context/Role conventions in PHP classes."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(check_command, name="check")


if __name__ == "__main__":
    cli()
