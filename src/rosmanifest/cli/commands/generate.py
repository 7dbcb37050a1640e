from pathlib import Path

import click

from rosmanifest.cli.core import resolve_units
from rosmanifest.cli.ensure import resolution_error_boundary
from rosmanifest.cli.output import machine_output, user_output
from rosmanifest.core.build_graph import write_manifests
from rosmanifest.core.context import ResolverContext


@click.command("generate")
@click.argument("units_file", type=click.Path(path_type=Path))
@click.option(
    "--output",
    "-o",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("build"),
    show_default=True,
    help="Directory receiving ros/stacks and ros/packages.",
)
@click.pass_obj
@resolution_error_boundary
def generate_cmd(ctx: ResolverContext, units_file: Path, output_dir: Path) -> None:
    """Resolve UNITS_FILE and write every manifest it describes."""
    resolve_units(ctx, units_file)
    if not output_dir.is_absolute():
        output_dir = ctx.cwd / output_dir

    written = write_manifests(ctx, output_dir)
    for path in written:
        machine_output(str(path))
    user_output(f"Wrote {len(written)} manifests to {output_dir}")
