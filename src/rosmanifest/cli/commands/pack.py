from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from rosmanifest.cli.core import resolve_units
from rosmanifest.cli.ensure import resolution_error_boundary
from rosmanifest.cli.output import emit_json, user_output
from rosmanifest.core.context import ResolverContext
from rosmanifest.core.packaging import (
    install_order,
    plan_binary_packages,
    plan_source_package,
)


@click.command("pack")
@click.argument("units_file", type=click.Path(path_type=Path))
@click.option("--default", "default", help="Unit whose package installs the default component.")
@click.option("--conflicts", multiple=True, help="Host package conflicting with the default one.")
@click.option("--source", is_flag=True, help="Also plan the source package.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_obj
@resolution_error_boundary
def pack_cmd(
    ctx: ResolverContext,
    units_file: Path,
    default: str | None,
    conflicts: tuple[str, ...],
    source: bool,
    as_json: bool,
) -> None:
    """Print the Debian packaging plan of UNITS_FILE."""
    resolve_units(ctx, units_file)
    packages = plan_binary_packages(ctx, default=default, conflicts=conflicts)
    source_package = plan_source_package(ctx) if source else None

    if as_json:
        data: dict[str, object] = {
            "packages": packages,
            "install_order": install_order(packages),
        }
        if source_package is not None:
            data["source"] = source_package
        emit_json(data)
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("package", style="cyan", no_wrap=True)
    table.add_column("unit", no_wrap=True)
    table.add_column("depends")
    table.add_column("conflicts")
    for package in packages:
        table.add_row(
            package.file_name,
            package.unit,
            ", ".join(package.depends) or "-",
            ", ".join(package.conflicts) or "-",
        )
    console = Console(stderr=True, width=200)
    console.print(table)

    if source_package is not None:
        user_output(f"Build-Depends: {', '.join(source_package.build_depends)}")
