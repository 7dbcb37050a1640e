from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from rosmanifest.cli.core import resolve_units
from rosmanifest.cli.ensure import resolution_error_boundary
from rosmanifest.cli.output import emit_json
from rosmanifest.core.build_graph import collect_targets
from rosmanifest.core.context import ResolverContext


@click.command("targets")
@click.argument("units_file", type=click.Path(path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_obj
@resolution_error_boundary
def targets_cmd(ctx: ResolverContext, units_file: Path, as_json: bool) -> None:
    """List the build targets described by UNITS_FILE."""
    resolve_units(ctx, units_file)
    targets = collect_targets(ctx)

    if as_json:
        emit_json({"targets": targets})
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("target", style="cyan", no_wrap=True)
    table.add_column("kind", no_wrap=True)
    table.add_column("depends")
    for target in targets:
        table.add_row(target.name, target.kind.value, " ".join(target.depends) or "-")

    console = Console(stderr=True, width=200)
    console.print(table)
