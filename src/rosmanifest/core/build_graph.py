"""Build targets describing how the assembled manifests are produced.

Compiling and installing is left to the host build system. This module only
describes the targets it needs: one manifest target per unit, one per plugin
manifest, the code generation targets, and the ``ros_manifests`` aggregate.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from rosmanifest.core.manifest import ManifestHandle
from rosmanifest.core.units import Unit

if TYPE_CHECKING:
    from rosmanifest.core.context import ResolverContext

MANIFESTS_TARGET = "ros_manifests"
OUTPUT_ROOT = "ros"


class TargetKind(Enum):
    MANIFEST = "manifest"
    PLUGIN_MANIFEST = "plugin_manifest"
    MESSAGES = "messages"
    SERVICES = "services"
    CONFIGURATIONS = "configurations"
    AGGREGATE = "aggregate"


@dataclass(frozen=True)
class BuildTarget:
    name: str
    kind: TargetKind
    owner: str
    depends: tuple[str, ...] = ()
    outputs: tuple[str, ...] = ()


def manifest_target_name(unit: Unit) -> str:
    """Name of the target generating a unit's manifest."""
    suffix = "ros_stack_manifest" if unit.is_stack else "ros_package_manifest"
    return f"{unit.name}_{suffix}"


def plugin_manifest_target_name(plugin: str) -> str:
    return f"{plugin}_plugins_ros_package_manifest"


def unit_directory(unit: Unit) -> str:
    """Directory of a unit's generated files relative to the output root."""
    kind = "stacks" if unit.is_stack else "packages"
    return f"{OUTPUT_ROOT}/{kind}/{unit.name}"


class BuildGraph:
    """Targets registered while declaring plugins and generated sources.

    Unit manifest targets are derived from the registry on demand, since
    their dependencies keep changing until resolution ends.
    """

    def __init__(self) -> None:
        self._targets: dict[str, BuildTarget] = {}

    def add(self, target: BuildTarget) -> BuildTarget:
        """Add a target, replacing an earlier one of the same name."""
        self._targets[target.name] = target
        return target

    def get(self, name: str) -> BuildTarget | None:
        return self._targets.get(name)

    def contains(self, name: str) -> bool:
        return name in self._targets

    def targets(self) -> list[BuildTarget]:
        return list(self._targets.values())


def output_path(ctx: "ResolverContext", handle: ManifestHandle) -> str:
    """Path of a manifest document relative to the output directory."""
    owner = ctx.registry.get(handle.owner)
    return f"{unit_directory(owner)}/{handle.filename}"


def collect_targets(ctx: "ResolverContext") -> list[BuildTarget]:
    """All build targets in declaration order, ending with the aggregate."""
    targets: list[BuildTarget] = []
    for unit in ctx.registry:
        depends = tuple(
            manifest_target_name(ctx.registry.get(dependency))
            for dependency in unit.internal_build_deps
        )
        targets.append(
            BuildTarget(
                name=manifest_target_name(unit),
                kind=TargetKind.MANIFEST,
                owner=unit.name,
                depends=depends,
                outputs=(output_path(ctx, unit.manifest),),
            )
        )
    targets.extend(ctx.build_graph.targets())

    manifest_kinds = (TargetKind.MANIFEST, TargetKind.PLUGIN_MANIFEST)
    targets.append(
        BuildTarget(
            name=MANIFESTS_TARGET,
            kind=TargetKind.AGGREGATE,
            owner="",
            depends=tuple(target.name for target in targets if target.kind in manifest_kinds),
        )
    )
    return targets


def write_manifests(ctx: "ResolverContext", out_dir: Path) -> list[Path]:
    """Assemble every open manifest document and write it below out_dir.

    Returns:
        Written file paths in the order the documents were opened
    """
    written: list[Path] = []
    for handle in ctx.manifests.handles():
        path = out_dir / output_path(ctx, handle)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(ctx.manifests.assemble(handle), encoding="utf-8")
        written.append(path)
    return written
