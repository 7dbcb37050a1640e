"""Debian packaging plan derived from the declared units.

Every unit becomes one binary package. Internal run dependencies turn into
dependencies between the project's own packages, external ones are resolved
to the host packages that install them.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rosmanifest.core.distribution import GenerationMode
from rosmanifest.core.errors import ResolutionError, UnresolvedHostPackageError
from rosmanifest.core.units import Unit, extend_unique, unique

if TYPE_CHECKING:
    from rosmanifest.core.context import ResolverContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BinaryPackage:
    """One binary Debian package of the project.

    ``internal_depends`` names the project packages that must be installed
    before this one and removed after it.
    """

    unit: str
    name: str
    version: str
    architecture: str
    description: str
    depends: tuple[str, ...]
    internal_depends: tuple[str, ...]
    conflicts: tuple[str, ...] = ()
    extra: tuple[str, ...] = ()

    @property
    def file_name(self) -> str:
        return f"{self.name}_{self.version}_{self.architecture}.deb"


@dataclass(frozen=True)
class SourcePackage:
    """Build dependencies of the project's Debian source package."""

    name: str
    version: str
    build_depends: tuple[str, ...]


def _packaged_units(ctx: "ResolverContext") -> list[Unit]:
    units: list[Unit] = []
    if ctx.strategy.mode is GenerationMode.LEGACY:
        units.extend(ctx.registry.stacks())
    units.extend(ctx.registry.packages())
    return units


def _internal_run_deps(unit: Unit) -> list[str]:
    names = list(unit.internal_run_deps)
    if unit.is_stack:
        extend_unique(names, unit.deploys)
    return names


def plan_binary_packages(
    ctx: "ResolverContext",
    default: str | None = None,
    conflicts: Sequence[str] = (),
    extra: Sequence[str] = (),
) -> list[BinaryPackage]:
    """Plan one binary package per unit in registration order.

    Legacy stacks come first, followed by packages and meta-packages.

    Args:
        ctx: Resolution context after all units were declared
        default: Unit whose package installs the project's default component
            and carries ``conflicts`` and ``extra``
        conflicts: Host packages conflicting with the default package
        extra: Maintainer scripts included in the default package

    Raises:
        UnresolvedHostPackageError: If an external run dependency has no host package
    """
    strategy = ctx.strategy
    version = ctx.project.version if ctx.project is not None else "0.0.0"
    architecture = ctx.debian.architecture()

    plan: list[BinaryPackage] = []
    for unit in _packaged_units(ctx):
        internal = [strategy.package_filename(name) for name in _internal_run_deps(unit)]
        depends = list(unit.extra_run_deps)
        extend_unique(depends, internal)
        for dependency in unit.external_run_deps:
            host_package = strategy.resolve_host_package(ctx, dependency, meta=unit.is_meta)
            if host_package is None:
                raise UnresolvedHostPackageError(dependency, "runtime", unit.name)
            extend_unique(depends, [host_package])

        is_default = unit.name == default
        plan.append(
            BinaryPackage(
                unit=unit.name,
                name=strategy.package_filename(unit.name),
                version=version,
                architecture=architecture,
                description=unit.description,
                depends=tuple(depends),
                internal_depends=tuple(internal),
                conflicts=tuple(conflicts) if is_default else (),
                extra=tuple(extra) if is_default else (),
            )
        )
        logger.debug("Binary package for %s depends on %s", unit.name, depends)
    return plan


def install_order(packages: Sequence[BinaryPackage]) -> list[str]:
    """Package names ordered such that internal dependencies install first.

    Uninstalling runs in the reverse order.
    """
    by_name = {package.name: package for package in packages}
    ordered: list[str] = []
    visiting: set[str] = set()

    def visit(name: str) -> None:
        if name in ordered or name in visiting:
            return
        visiting.add(name)
        package = by_name.get(name)
        if package is not None:
            for dependency in package.internal_depends:
                visit(dependency)
            ordered.append(name)
        visiting.discard(name)

    for package in packages:
        visit(package.name)
    return ordered


def plan_source_package(ctx: "ResolverContext") -> SourcePackage:
    """Collect the host packages required to build the project from source.

    External build dependencies of all packages are expanded with their
    implicit dependencies before being resolved.

    Raises:
        ResolutionError: If the implicit dependencies of a package cannot be determined
        UnresolvedHostPackageError: If a build dependency has no host package
    """
    dependencies: list[str] = []
    extra: list[str] = []
    for unit in ctx.registry.packages():
        extend_unique(dependencies, unit.external_build_deps)
        extend_unique(extra, unit.extra_build_deps)

    expanded = list(dependencies)
    for dependency in dependencies:
        implicit = ctx.ros.implicit_depends(dependency)
        if implicit is None:
            raise ResolutionError(
                f"ROS build dependencies for {dependency} could not be determined."
            )
        extend_unique(expanded, implicit)

    build_depends: list[str] = []
    for dependency in expanded:
        host_package = ctx.strategy.resolve_host_package(ctx, dependency)
        if host_package is None:
            raise UnresolvedHostPackageError(dependency, "build")
        extend_unique(build_depends, [host_package])
    extend_unique(build_depends, extra)

    project = ctx.project
    return SourcePackage(
        name=project.name if project is not None else "",
        version=project.version if project is not None else "0.0.0",
        build_depends=tuple(unique(build_depends)),
    )
