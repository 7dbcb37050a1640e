"""Shared helpers for commands that resolve a unit description."""

from pathlib import Path

from rosmanifest.cli.ensure import Ensure
from rosmanifest.core.context import ResolverContext
from rosmanifest.core.project_config import CONFIG_FILENAME
from rosmanifest.core.unit_file import apply_unit_file, load_unit_file


def resolve_units(ctx: ResolverContext, units_file: Path) -> None:
    """Declare every unit of the description file in the context.

    Relative paths are taken from the context's working directory.
    """
    Ensure.not_none(
        ctx.project,
        f"No {CONFIG_FILENAME} found in {ctx.cwd}. Run 'rosmanifest init' first.",
    )
    path = units_file if units_file.is_absolute() else ctx.cwd / units_file
    Ensure.path_is_file(path, f"Unit description not found: {path}")
    apply_unit_file(ctx, load_unit_file(path))
