"""Unit data structures shared by the registry, resolver and strategies."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from rosmanifest.core.manifest import ManifestHandle


class UnitKind(Enum):
    """Kind of a registered unit."""

    PACKAGE = "package"
    STACK = "stack"


class DependencyScope(Enum):
    """Whether a dependency is needed at build time or at run time."""

    BUILD = "build"
    RUN = "run"


def extend_unique(target: list[str], items: Iterable[str]) -> list[str]:
    """Append items not yet present in target, preserving first-seen order.

    Returns the items that were actually appended.
    """
    added: list[str] = []
    for item in items:
        if item and item not in target:
            target.append(item)
            added.append(item)
    return added


def unique(items: Iterable[str]) -> list[str]:
    """Return items de-duplicated in first-seen order."""
    return list(dict.fromkeys(item for item in items if item))


def default_component(name: str) -> str:
    """Install component name conversion of a unit name."""
    return name.replace("_", "-")


@dataclass(eq=False)
class Unit:
    """A declared package, meta-package or legacy stack.

    The dependency and compile/link lists are mutated in place by the
    resolver and never contain duplicates.
    """

    name: str
    kind: UnitKind
    is_meta: bool
    component: str
    description: str
    manifest: ManifestHandle
    reverse_depends: str | None = None
    build_depends: list[str] = field(default_factory=list)
    run_depends: list[str] = field(default_factory=list)
    internal_build_deps: list[str] = field(default_factory=list)
    external_build_deps: list[str] = field(default_factory=list)
    internal_run_deps: list[str] = field(default_factory=list)
    external_run_deps: list[str] = field(default_factory=list)
    extra_build_deps: list[str] = field(default_factory=list)
    extra_run_deps: list[str] = field(default_factory=list)
    include_dirs: list[str] = field(default_factory=list)
    link_libraries: list[str] = field(default_factory=list)
    library_dirs: list[str] = field(default_factory=list)
    link_flags: list[str] = field(default_factory=list)
    deploys: list[str] = field(default_factory=list)

    @property
    def is_stack(self) -> bool:
        return self.kind is UnitKind.STACK

