"""Manifest schema generations behind one declaration API.

A strategy is selected once per context from the distribution name. Both
strategies offer the package and stack operations; each redirects the
operations its schema has no notion of to their counterpart.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from rosmanifest.core import resolver
from rosmanifest.core.distribution import Distribution, GenerationMode
from rosmanifest.core.errors import MissingProjectConfigError
from rosmanifest.core.external import DiscoveryResult, host_package_name
from rosmanifest.core.manifest import ManifestHandle, xml_text
from rosmanifest.core.project_config import ProjectConfig
from rosmanifest.core.units import DependencyScope, Unit, UnitKind, unique

if TYPE_CHECKING:
    from rosmanifest.core.context import ResolverContext

logger = logging.getLogger(__name__)

DEFAULT_PACKAGE_DEPENDS = ("roscpp", "rospy")
DEFAULT_STACK_DEPENDS = ("ros", "ros_comm")


def summary_of(project: ProjectConfig, description: str) -> str:
    """Project summary without its final period, followed by the unit description."""
    summary = project.summary[:-1] if project.summary.endswith(".") else project.summary
    return f"{summary} ({description})"


class GenerationStrategy(ABC):
    """One manifest schema generation.

    Subclasses provide the schema (file names, header and dependency
    elements) and the dispatch between package and stack operations. The
    registration bookkeeping shared by both lives here.
    """

    mode: GenerationMode

    def __init__(self, distribution: Distribution) -> None:
        self.distribution = distribution

    # Schema

    @property
    @abstractmethod
    def package_manifest(self) -> str:
        """File name of package manifests."""
        ...

    @property
    @abstractmethod
    def stack_manifest(self) -> str:
        """File name of stack (or meta-package) manifests."""
        ...

    def manifest_filename(self, kind: UnitKind) -> str:
        return self.stack_manifest if kind is UnitKind.STACK else self.package_manifest

    @abstractmethod
    def render_head(self, project: ProjectConfig, unit: Unit) -> list[str]:
        """Root open tag and metadata block of a unit's manifest."""
        ...

    def render_tail(self, unit: Unit) -> list[str]:
        return [f"</{unit.kind.value}>"]

    @abstractmethod
    def render_dependencies(self, unit: Unit, category: str) -> list[str]:
        """Elements of one dependency section of a unit's manifest."""
        ...

    def _render_people(self, project: ProjectConfig) -> list[str]:
        lines = [f"  <author>{xml_text(author)}</author>" for author in project.authors]
        lines.append(
            f'  <maintainer email="{xml_text(project.contact)}">'
            f"{xml_text(project.maintainer)}</maintainer>"
        )
        lines.append(f"  <license>{xml_text(project.license)}</license>")
        lines.append(f"  <url>{xml_text(project.home)}</url>")
        return lines

    # Declarations

    @abstractmethod
    def declare_package(
        self,
        ctx: "ResolverContext",
        name: str,
        *,
        meta: bool = False,
        component: str | None = None,
        description: str | None = None,
        depends: Sequence[str] = (),
        build_depends: Sequence[str] | None = None,
        run_depends: Sequence[str] | None = None,
        extra_build_depends: Sequence[str] = (),
        extra_run_depends: Sequence[str] = (),
        reverse_depends: str | None = None,
    ) -> Unit:
        """Declare a package or meta-package.

        ``depends`` apply to both build and run time. Omitted build and run
        dependencies default to ``roscpp rospy``; meta-packages get no
        build dependencies.
        """
        ...

    @abstractmethod
    def declare_stack(
        self,
        ctx: "ResolverContext",
        name: str,
        *,
        component: str | None = None,
        description: str | None = None,
        depends: Sequence[str] | None = None,
    ) -> Unit:
        """Declare a stack; ``depends`` default to ``ros ros_comm``."""
        ...

    @abstractmethod
    def add_package_dependencies(
        self,
        ctx: "ResolverContext",
        name: str,
        *,
        depends: Sequence[str] = (),
        build_depends: Sequence[str] = (),
        run_depends: Sequence[str] = (),
        extra_build_depends: Sequence[str] = (),
        extra_run_depends: Sequence[str] = (),
        optional: bool = False,
    ) -> None:
        """Add dependencies to a declared package or meta-package."""
        ...

    @abstractmethod
    def add_stack_dependencies(
        self,
        ctx: "ResolverContext",
        name: str,
        *,
        depends: Sequence[str] = (),
        deploys: Sequence[str] = (),
    ) -> None:
        """Add dependencies and deployed packages to a declared stack."""
        ...

    @abstractmethod
    def discover_unit(
        self,
        ctx: "ResolverContext",
        name: str,
        *,
        meta: bool = False,
        optional: bool = False,
        required_by: str | None = None,
    ) -> DiscoveryResult | None:
        """Discover an installed package, meta-package or stack."""
        ...

    def resolve_host_package(
        self, ctx: "ResolverContext", name: str, *, meta: bool = False
    ) -> str | None:
        """Resolve the Debian package providing an external unit."""
        stack = meta and self.mode is GenerationMode.LEGACY
        return ctx.external.resolve_host_package(
            name,
            manifest_filename=self.stack_manifest if stack else self.package_manifest,
            distribution=self.distribution.name,
            stack=stack,
        )

    def package_filename(self, name: str) -> str:
        """Debian package file name of a unit of this project."""
        return host_package_name(self.distribution.name, name)

    # Shared bookkeeping

    def _register(
        self,
        ctx: "ResolverContext",
        name: str,
        *,
        kind: UnitKind,
        meta: bool,
        component: str | None,
        description: str | None,
        reverse_depends: str | None = None,
    ) -> Unit:
        if ctx.project is None:
            raise MissingProjectConfigError()

        unit = ctx.registry.register(
            name,
            kind=kind,
            is_meta=meta,
            manifest=ManifestHandle(owner=name, filename=self.manifest_filename(kind)),
            component=component,
            description=description,
            reverse_depends=reverse_depends,
        )
        ctx.manifests.open(
            unit.manifest, self.render_head(ctx.project, unit), self.render_tail(unit)
        )
        logger.debug("Registered %s %s (meta=%s)", kind.value, name, unit.is_meta)
        return unit

    def _add_dependencies(
        self,
        ctx: "ResolverContext",
        unit: Unit,
        *,
        depends: Iterable[str],
        build_depends: Iterable[str],
        run_depends: Iterable[str],
        extra_build_depends: Iterable[str],
        extra_run_depends: Iterable[str],
        optional: bool,
    ) -> None:
        depends = list(depends)
        resolver.add_build_dependencies(
            ctx, unit, unique([*depends, *build_depends]), optional=optional
        )
        resolver.add_run_dependencies(ctx, unit, unique([*depends, *run_depends]))
        resolver.add_extra_dependencies(
            ctx, unit, extra_build_depends, scope=DependencyScope.BUILD
        )
        resolver.add_extra_dependencies(ctx, unit, extra_run_depends, scope=DependencyScope.RUN)

    def _announce(self, ctx: "ResolverContext", unit: Unit) -> None:
        if unit.is_stack:
            ctx.feedback.info(f"ROS stack: {unit.name}")
        elif unit.is_meta:
            ctx.feedback.info(f"ROS meta-package: {unit.name}")
        elif unit.reverse_depends:
            ctx.feedback.info(f"ROS package: {unit.name} ({unit.reverse_depends})")
        else:
            ctx.feedback.info(f"ROS package: {unit.name}")
