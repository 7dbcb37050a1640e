"""Modern flat schema: packages, some of them meta-packages."""

from collections.abc import Sequence
from typing import TYPE_CHECKING

from rosmanifest.core import resolver
from rosmanifest.core.distribution import GenerationMode
from rosmanifest.core.errors import ReverseDependencyError
from rosmanifest.core.external import DiscoveryResult
from rosmanifest.core.generation.abc import (
    DEFAULT_PACKAGE_DEPENDS,
    DEFAULT_STACK_DEPENDS,
    GenerationStrategy,
    summary_of,
)
from rosmanifest.core.manifest import (
    BUILD_DEPENDS,
    EXTRA_BUILD_DEPENDS,
    EXTRA_RUN_DEPENDS,
    RUN_DEPENDS,
    STACK_DEPENDS,
    xml_text,
)
from rosmanifest.core.project_config import ProjectConfig
from rosmanifest.core.units import Unit, UnitKind

if TYPE_CHECKING:
    from rosmanifest.core.context import ResolverContext


def _elements(tag: str, names: list[str]) -> list[str]:
    return [f"  <{tag}>{xml_text(name)}</{tag}>" for name in names]


class ModernGeneration(GenerationStrategy):
    """Schema of groovy and later distributions.

    Stacks do not exist; declaring one declares a meta-package, and stack
    dependencies become run-time dependencies of that meta-package.
    """

    mode = GenerationMode.MODERN

    @property
    def package_manifest(self) -> str:
        return "package.xml"

    @property
    def stack_manifest(self) -> str:
        return "package.xml"

    def render_head(self, project: ProjectConfig, unit: Unit) -> list[str]:
        major, minor, patch = project.version_triple
        return [
            "<package>",
            f"  <name>{unit.name}</name>",
            f"  <version>{major}.{minor}.{patch}</version>",
            "  <description>",
            f"    {xml_text(summary_of(project, unit.description))}",
            "  </description>",
            *self._render_people(project),
        ]

    def render_dependencies(self, unit: Unit, category: str) -> list[str]:
        if category == BUILD_DEPENDS:
            return _elements("build_depend", unit.build_depends)
        if category == EXTRA_BUILD_DEPENDS:
            return _elements("build_depend", unit.extra_build_deps)
        if category == RUN_DEPENDS:
            return _elements("run_depend", unit.run_depends)
        if category == EXTRA_RUN_DEPENDS:
            return _elements("run_depend", unit.extra_run_deps)
        if category == STACK_DEPENDS:
            return []
        raise ValueError(f"Unknown dependency section {category}")

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
        if reverse_depends is not None:
            target = ctx.registry.get(reverse_depends, UnitKind.PACKAGE)
            if not target.is_meta:
                raise ReverseDependencyError(name, reverse_depends)

        unit = self._register(
            ctx,
            name,
            kind=UnitKind.PACKAGE,
            meta=meta,
            component=component,
            description=description,
            reverse_depends=reverse_depends,
        )
        if meta:
            resolver.add_export(ctx, unit, "metapackage")

        if build_depends is None:
            build_depends = () if meta else DEFAULT_PACKAGE_DEPENDS
        self._add_dependencies(
            ctx,
            unit,
            depends=depends,
            build_depends=build_depends,
            run_depends=DEFAULT_PACKAGE_DEPENDS if run_depends is None else run_depends,
            extra_build_depends=extra_build_depends,
            extra_run_depends=extra_run_depends,
            optional=False,
        )
        if reverse_depends is not None:
            self.add_package_dependencies(ctx, reverse_depends, run_depends=[name])
        self._announce(ctx, unit)
        return unit

    def declare_stack(
        self,
        ctx: "ResolverContext",
        name: str,
        *,
        component: str | None = None,
        description: str | None = None,
        depends: Sequence[str] | None = None,
    ) -> Unit:
        return self.declare_package(
            ctx,
            name,
            meta=True,
            component=component,
            description=description,
            run_depends=DEFAULT_STACK_DEPENDS if depends is None else depends,
        )

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
        self._add_dependencies(
            ctx,
            ctx.registry.get(name, UnitKind.PACKAGE),
            depends=depends,
            build_depends=build_depends,
            run_depends=run_depends,
            extra_build_depends=extra_build_depends,
            extra_run_depends=extra_run_depends,
            optional=optional,
        )

    def add_stack_dependencies(
        self,
        ctx: "ResolverContext",
        name: str,
        *,
        depends: Sequence[str] = (),
        deploys: Sequence[str] = (),
    ) -> None:
        self.add_package_dependencies(ctx, name, run_depends=[*depends, *deploys])

    def discover_unit(
        self,
        ctx: "ResolverContext",
        name: str,
        *,
        meta: bool = False,
        optional: bool = False,
        required_by: str | None = None,
    ) -> DiscoveryResult | None:
        return ctx.external.discover(name, optional=optional, required_by=required_by)
