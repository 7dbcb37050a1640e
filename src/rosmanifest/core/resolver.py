"""Dependency classification and resolution for declared units.

Every dependency name is classified once as either an internal unit
(registered in the same resolution pass) or an external dependency (assumed
to be installed on the host). Build dependencies propagate compile/link
settings into the declaring unit: internal ones through the transitive
closure of their own internal build dependencies, external ones through
host discovery. Each call re-renders the affected manifest section from the
unit's accumulated state, so repeating a call never duplicates an element.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rosmanifest.core.errors import MetaBuildDependencyError, UndefinedUnitError
from rosmanifest.core.manifest import (
    BUILD_DEPENDS,
    EXPORT_BEGIN,
    EXPORT_DECLARATIONS,
    EXPORT_END,
    EXTRA_BUILD_DEPENDS,
    EXTRA_RUN_DEPENDS,
    RUN_DEPENDS,
    STACK_DEPENDS,
    xml_text,
)
from rosmanifest.core.units import DependencyScope, Unit, UnitKind, extend_unique, unique

if TYPE_CHECKING:
    from rosmanifest.core.context import ResolverContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InternalUnit:
    """A dependency satisfied by a unit of the same resolution pass."""

    unit: Unit

    @property
    def name(self) -> str:
        return self.unit.name


@dataclass(frozen=True)
class ExternalDependency:
    """A dependency expected to be installed on the host."""

    name: str


Classification = InternalUnit | ExternalDependency


def classify(
    ctx: "ResolverContext",
    names: Iterable[str],
    kind: UnitKind = UnitKind.PACKAGE,
) -> list[Classification]:
    """Classify dependency names, internal registration taking precedence."""
    classified: list[Classification] = []
    for name in unique(names):
        if ctx.registry.contains(name, kind):
            classified.append(InternalUnit(ctx.registry.get(name)))
        else:
            classified.append(ExternalDependency(name))
    return classified


def _classify_restricted(
    ctx: "ResolverContext",
    names: list[str],
    kind: UnitKind,
    internal_only: bool,
    external_only: bool,
) -> list[Classification]:
    if internal_only and external_only:
        raise ValueError("internal_only and external_only are mutually exclusive")
    if external_only:
        return [ExternalDependency(name) for name in names]

    classified = classify(ctx, names, kind)
    if internal_only:
        for item in classified:
            if isinstance(item, ExternalDependency):
                raise UndefinedUnitError(item.name, kind.value)
    return classified


def include_closure(ctx: "ResolverContext", unit: Unit) -> list[str]:
    """Include directories of a unit and of every unit it reaches through
    internal build dependencies, in depth-first declaration order.
    """
    include_dirs: list[str] = []
    visited: set[str] = set()
    pending = [unit]
    while pending:
        current = pending.pop()
        if current.name in visited:
            continue
        visited.add(current.name)
        extend_unique(include_dirs, current.include_dirs)
        pending.extend(
            ctx.registry.get(name) for name in reversed(current.internal_build_deps)
        )
    return include_dirs


def _mark_internal(name: str, internal: list[str], external: list[str]) -> None:
    # A name classified external before its unit was registered moves over.
    if name in external:
        external.remove(name)
    extend_unique(internal, [name])


def add_build_dependencies(
    ctx: "ResolverContext",
    unit: Unit,
    names: Iterable[str],
    *,
    internal_only: bool = False,
    external_only: bool = False,
    optional: bool = False,
) -> None:
    """Add build-time dependencies to a package.

    Args:
        ctx: Resolution context
        unit: The declaring package
        names: Dependency names
        internal_only: Require every name to be a registered package
        external_only: Treat every name as external without consulting the registry
        optional: Skip external dependencies that cannot be discovered

    Raises:
        MetaBuildDependencyError: If the unit is a meta-package or stack
        UndefinedUnitError: If internal_only is set and a name is not registered
        ExternalDependencyNotFoundError: If a required external dependency is missing
    """
    names = unique(names)
    if not names:
        return
    if unit.is_meta:
        raise MetaBuildDependencyError(unit.name, names)

    for item in _classify_restricted(ctx, names, UnitKind.PACKAGE, internal_only, external_only):
        if isinstance(item, InternalUnit):
            extend_unique(unit.include_dirs, include_closure(ctx, item.unit))
            _mark_internal(item.name, unit.internal_build_deps, unit.external_build_deps)
            logger.debug("%s: internal build dependency %s", unit.name, item.name)
        else:
            discovered = ctx.strategy.discover_unit(
                ctx, item.name, optional=optional, required_by=unit.name
            )
            if discovered is None:
                continue
            extend_unique(unit.include_dirs, discovered.include_dirs)
            extend_unique(unit.link_libraries, discovered.libraries)
            extend_unique(unit.library_dirs, discovered.library_dirs)
            extend_unique(unit.link_flags, discovered.link_flags)
            if item.name not in unit.internal_build_deps:
                extend_unique(unit.external_build_deps, [item.name])
            logger.debug("%s: external build dependency %s", unit.name, item.name)
        extend_unique(unit.build_depends, [item.name])

    write_dependency_section(ctx, unit, BUILD_DEPENDS)


def add_run_dependencies(
    ctx: "ResolverContext",
    unit: Unit,
    names: Iterable[str],
    *,
    internal_only: bool = False,
    external_only: bool = False,
) -> None:
    """Add run-time dependencies to a package or meta-package.

    Run-time dependencies do not touch the unit's compile/link settings and
    are never discovered on the host while declaring.
    """
    names = unique(names)
    if not names:
        return

    for item in _classify_restricted(ctx, names, UnitKind.PACKAGE, internal_only, external_only):
        if isinstance(item, InternalUnit):
            _mark_internal(item.name, unit.internal_run_deps, unit.external_run_deps)
        elif item.name not in unit.internal_run_deps:
            extend_unique(unit.external_run_deps, [item.name])
        extend_unique(unit.run_depends, [item.name])
    logger.debug("%s: run dependencies %s", unit.name, names)

    write_dependency_section(ctx, unit, RUN_DEPENDS)


def add_extra_dependencies(
    ctx: "ResolverContext",
    unit: Unit,
    names: Iterable[str],
    *,
    scope: DependencyScope,
) -> None:
    """Add system dependencies that bypass classification.

    The names are inscribed into the manifest verbatim and resolved by the
    packaging backend only.

    Raises:
        MetaBuildDependencyError: If build-time extras are added to a meta unit
    """
    names = unique(names)
    if not names:
        return
    if scope is DependencyScope.BUILD:
        if unit.is_meta:
            raise MetaBuildDependencyError(unit.name, names)
        extend_unique(unit.extra_build_deps, names)
        write_dependency_section(ctx, unit, EXTRA_BUILD_DEPENDS)
    else:
        extend_unique(unit.extra_run_deps, names)
        write_dependency_section(ctx, unit, EXTRA_RUN_DEPENDS)


def add_stack_dependencies(
    ctx: "ResolverContext",
    stack: Unit,
    names: Iterable[str],
    *,
    optional: bool = False,
) -> None:
    """Add dependencies of a legacy stack on other stacks.

    Internal stacks contribute their include directories; external stacks
    are discovered through the packages they contain.
    """
    names = unique(names)
    if not names:
        return

    for item in classify(ctx, names, UnitKind.STACK):
        if isinstance(item, InternalUnit):
            extend_unique(stack.include_dirs, item.unit.include_dirs)
            _mark_internal(item.name, stack.internal_run_deps, stack.external_run_deps)
        else:
            discovered = ctx.strategy.discover_unit(
                ctx, item.name, meta=True, optional=optional, required_by=stack.name
            )
            if discovered is None:
                continue
            extend_unique(stack.include_dirs, discovered.include_dirs)
            extend_unique(stack.library_dirs, discovered.library_dirs)
            if item.name not in stack.internal_run_deps:
                extend_unique(stack.external_run_deps, [item.name])
        extend_unique(stack.run_depends, [item.name])
    logger.debug("%s: stack dependencies %s", stack.name, names)

    write_dependency_section(ctx, stack, STACK_DEPENDS)


def add_deploys(ctx: "ResolverContext", stack: Unit, packages: Iterable[str]) -> None:
    """Record packages a legacy stack ships without listing them as dependencies."""
    added = extend_unique(stack.deploys, packages)
    if added:
        logger.debug("%s: deploys %s", stack.name, added)


def add_export(
    ctx: "ResolverContext",
    unit: Unit,
    decl_type: str,
    attributes: Mapping[str, str] | None = None,
) -> None:
    """Write one export declaration inside the unit's shared export envelope."""
    rendered = "".join(f' {key}="{xml_text(value)}"' for key, value in (attributes or {}).items())
    ctx.manifests.write_envelope(
        unit.manifest,
        begin=(EXPORT_BEGIN, ["  <export>"]),
        end=(EXPORT_END, ["  </export>"]),
    )
    ctx.manifests.write_fragment(
        unit.manifest, EXPORT_DECLARATIONS, decl_type, [f"    <{decl_type}{rendered}/>"]
    )


def write_dependency_section(ctx: "ResolverContext", unit: Unit, category: str) -> None:
    """Re-render one dependency section of the unit's manifest."""
    lines = ctx.strategy.render_dependencies(unit, category)
    ctx.manifests.write_fragment(unit.manifest, category, "", lines)
