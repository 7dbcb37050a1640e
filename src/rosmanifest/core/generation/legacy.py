"""Legacy two-tier schema: stacks containing packages."""

from collections.abc import Sequence
from typing import TYPE_CHECKING

from rosmanifest.core import resolver
from rosmanifest.core.distribution import GenerationMode
from rosmanifest.core.errors import UndefinedUnitError
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
from rosmanifest.core.units import DependencyScope, Unit, UnitKind

if TYPE_CHECKING:
    from rosmanifest.core.context import ResolverContext


class LegacyGeneration(GenerationStrategy):
    """Schema of distributions before groovy.

    Meta-packages do not exist; declaring one declares a stack instead, and
    package dependency calls naming a stack become stack dependency calls.
    """

    mode = GenerationMode.LEGACY

    @property
    def package_manifest(self) -> str:
        return "manifest.xml"

    @property
    def stack_manifest(self) -> str:
        return "stack.xml"

    def render_head(self, project: ProjectConfig, unit: Unit) -> list[str]:
        summary = summary_of(project, unit.description)
        return [
            f"<{unit.kind.value}>",
            f'  <description brief="{xml_text(summary)}"/>',
            *self._render_people(project),
        ]

    def render_dependencies(self, unit: Unit, category: str) -> list[str]:
        if category == STACK_DEPENDS:
            return [f'  <depend stack="{xml_text(name)}"/>' for name in unit.run_depends]
        if category == BUILD_DEPENDS:
            return [f'  <depend package="{xml_text(name)}"/>' for name in unit.build_depends]
        if category == RUN_DEPENDS:
            return [f'  <depend package="{xml_text(name)}"/>' for name in unit.run_depends]
        if category == EXTRA_BUILD_DEPENDS:
            return [f'  <rosdep name="{xml_text(name)}"/>' for name in unit.extra_build_deps]
        if category == EXTRA_RUN_DEPENDS:
            return [f'  <rosdep name="{xml_text(name)}"/>' for name in unit.extra_run_deps]
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
        if meta:
            stack_depends = DEFAULT_STACK_DEPENDS if run_depends is None else run_depends
            return self.declare_stack(
                ctx,
                name,
                component=component,
                description=description,
                depends=[*depends, *stack_depends],
            )

        if reverse_depends is not None:
            ctx.registry.get(reverse_depends, UnitKind.STACK)

        unit = self._register(
            ctx,
            name,
            kind=UnitKind.PACKAGE,
            meta=False,
            component=component,
            description=description,
            reverse_depends=reverse_depends,
        )
        self._add_dependencies(
            ctx,
            unit,
            depends=depends,
            build_depends=DEFAULT_PACKAGE_DEPENDS if build_depends is None else build_depends,
            run_depends=DEFAULT_PACKAGE_DEPENDS if run_depends is None else run_depends,
            extra_build_depends=extra_build_depends,
            extra_run_depends=extra_run_depends,
            optional=False,
        )
        if reverse_depends is not None:
            self.add_stack_dependencies(ctx, reverse_depends, deploys=[name])
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
        unit = self._register(
            ctx,
            name,
            kind=UnitKind.STACK,
            meta=True,
            component=component,
            description=description,
        )
        self.add_stack_dependencies(
            ctx, name, depends=DEFAULT_STACK_DEPENDS if depends is None else depends
        )
        self._announce(ctx, unit)
        return unit

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
        if ctx.registry.contains(name, UnitKind.PACKAGE):
            self._add_dependencies(
                ctx,
                ctx.registry.get(name),
                depends=depends,
                build_depends=build_depends,
                run_depends=run_depends,
                extra_build_depends=extra_build_depends,
                extra_run_depends=extra_run_depends,
                optional=optional,
            )
            return

        if not ctx.registry.contains(name, UnitKind.STACK):
            raise UndefinedUnitError(name, "package")

        stack = ctx.registry.get(name)
        # Stacks carry run-time dependencies only.
        resolver.add_build_dependencies(ctx, stack, build_depends)
        resolver.add_extra_dependencies(
            ctx, stack, extra_build_depends, scope=DependencyScope.BUILD
        )
        resolver.add_extra_dependencies(ctx, stack, extra_run_depends, scope=DependencyScope.RUN)
        self.add_stack_dependencies(ctx, name, depends=[*depends, *run_depends])

    def add_stack_dependencies(
        self,
        ctx: "ResolverContext",
        name: str,
        *,
        depends: Sequence[str] = (),
        deploys: Sequence[str] = (),
    ) -> None:
        stack = ctx.registry.get(name, UnitKind.STACK)
        resolver.add_stack_dependencies(ctx, stack, depends)
        resolver.add_deploys(ctx, stack, deploys)

    def discover_unit(
        self,
        ctx: "ResolverContext",
        name: str,
        *,
        meta: bool = False,
        optional: bool = False,
        required_by: str | None = None,
    ) -> DiscoveryResult | None:
        if meta:
            return ctx.external.discover_stack(name, optional=optional, required_by=required_by)
        return ctx.external.discover(name, optional=optional, required_by=required_by)
