import logging
import os

import click

from rosmanifest.cli.commands.deps import deps_cmd
from rosmanifest.cli.commands.generate import generate_cmd
from rosmanifest.cli.commands.init import init_cmd
from rosmanifest.cli.commands.pack import pack_cmd
from rosmanifest.cli.commands.targets import targets_cmd
from rosmanifest.cli.output import user_output
from rosmanifest.core.context import create_context
from rosmanifest.core.errors import ResolutionError

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="rosmanifest")
@click.option("--quiet", "-q", is_flag=True, help="Suppress status messages.")
@click.pass_context
def cli(ctx: click.Context, quiet: bool) -> None:
    """Resolve ROS package dependencies and assemble their manifests."""
    if os.environ.get("ROSMANIFEST_DEBUG"):
        logging.basicConfig(
            level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s"
        )
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        try:
            ctx.obj = create_context(quiet=quiet)
        except (ResolutionError, ValueError) as e:
            user_output(click.style("Error: ", fg="red") + str(e))
            raise SystemExit(1) from e


cli.add_command(init_cmd)
cli.add_command(generate_cmd)
cli.add_command(deps_cmd)
cli.add_command(targets_cmd)
cli.add_command(pack_cmd)


def main() -> None:
    """CLI entry point used by the `rosmanifest` console script."""
    cli()
