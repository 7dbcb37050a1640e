from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from rosmanifest.cli.core import resolve_units
from rosmanifest.cli.ensure import Ensure, resolution_error_boundary
from rosmanifest.cli.output import emit_json
from rosmanifest.core.context import ResolverContext
from rosmanifest.core.units import Unit

_LIST_FIELDS = (
    "build_depends",
    "run_depends",
    "internal_build_deps",
    "external_build_deps",
    "internal_run_deps",
    "external_run_deps",
    "extra_build_deps",
    "extra_run_deps",
    "include_dirs",
    "link_libraries",
    "library_dirs",
    "link_flags",
    "deploys",
)


def unit_state(unit: Unit) -> dict[str, object]:
    """Accumulated state of a unit as plain data."""
    state: dict[str, object] = {
        "name": unit.name,
        "kind": unit.kind,
        "meta": unit.is_meta,
        "component": unit.component,
        "description": unit.description,
        "manifest": unit.manifest.filename,
        "reverse_depends": unit.reverse_depends,
    }
    for field in _LIST_FIELDS:
        state[field] = list(getattr(unit, field))
    return state


@click.command("deps")
@click.argument("units_file", type=click.Path(path_type=Path))
@click.argument("unit_name")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_obj
@resolution_error_boundary
def deps_cmd(ctx: ResolverContext, units_file: Path, unit_name: str, as_json: bool) -> None:
    """Show the resolved dependencies of UNIT_NAME."""
    resolve_units(ctx, units_file)
    Ensure.invariant(
        ctx.registry.contains(unit_name), f"Unit {unit_name} is not declared in {units_file}"
    )
    state = unit_state(ctx.registry.get(unit_name))

    if as_json:
        emit_json(state)
        return

    table = Table(show_header=True, header_style="bold", title=f"{unit_name}")
    table.add_column("field", style="cyan", no_wrap=True)
    table.add_column("value")
    for key, value in state.items():
        if isinstance(value, list):
            table.add_row(key, " ".join(value) or "-")
        elif value is None:
            table.add_row(key, "-")
        else:
            table.add_row(key, str(getattr(value, "value", value)))

    # Output table to stderr (consistent with user_output convention)
    console = Console(stderr=True, width=200)
    console.print(table)
