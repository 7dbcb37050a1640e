"""Unit description files listing the packages and stacks of a project.

A description is a YAML document (or a TOML file of ``[[units]]`` tables)
whose entries are applied in file order:

    units:
      - kind: stack
        name: nav_stack
        description: Navigation stack
      - name: nav_msgs
        depends: [std_msgs]
        messages: [Goal.msg]
      - name: nav_core
        build_depends: [nav_msgs, boost_system]
        run_depends: [nav_msgs]
        reverse_depends: nav_stack
        plugins:
          - name: nav_planners
            type: nav_core
            classes:
              - name: GridPlanner
                base_class_type: nav_core::BasePlanner
      - kind: dependencies
        name: nav_core
        run_depends: [tf]
"""

import logging
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from rosmanifest.core import codegen
from rosmanifest.core.errors import UndefinedUnitError, UnitFileError

if TYPE_CHECKING:
    from rosmanifest.core.context import ResolverContext

logger = logging.getLogger(__name__)


class PluginClassEntry(BaseModel):
    """A class exported by a plugin library."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    base_class_type: str = Field(..., min_length=1)
    class_type: str | None = None
    description: str | None = None


class PluginEntry(BaseModel):
    """A plugin library of a package."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    classes: list[PluginClassEntry] = Field(default_factory=list)


class ExportEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str = Field(..., min_length=1)
    attributes: dict[str, str] = Field(default_factory=dict)


class UnitEntry(BaseModel):
    """One declaration, or a dependency addition to a declared unit.

    ``kind: dependencies`` entries add to a unit declared earlier in the
    file; every other field except the dependency lists is ignored for them.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1)
    kind: Literal["package", "stack", "dependencies"] = "package"
    meta: bool = False
    component: str | None = None
    description: str | None = None
    depends: list[str] | None = None
    build_depends: list[str] | None = None
    run_depends: list[str] | None = None
    extra_build_depends: list[str] = Field(default_factory=list)
    extra_run_depends: list[str] = Field(default_factory=list)
    deploys: list[str] = Field(default_factory=list)
    reverse_depends: str | None = None
    optional: bool = False
    messages: list[str] = Field(default_factory=list)
    services: list[str] = Field(default_factory=list)
    configurations: list[str] = Field(default_factory=list)
    exports: list[ExportEntry] = Field(default_factory=list)
    plugins: list[PluginEntry] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_stack_fields(self) -> "UnitEntry":
        """Stacks carry neither package dependencies nor generated code."""
        if self.kind != "stack":
            return self
        package_only = {
            "meta": self.meta,
            "build_depends": self.build_depends,
            "run_depends": self.run_depends,
            "extra_build_depends": self.extra_build_depends,
            "reverse_depends": self.reverse_depends,
            "optional": self.optional,
            "messages": self.messages,
            "services": self.services,
            "configurations": self.configurations,
            "exports": self.exports,
            "plugins": self.plugins,
        }
        used = [field for field, value in package_only.items() if value]
        if used:
            raise ValueError(f"stack {self.name} cannot declare {', '.join(used)}")
        return self


class UnitFile(BaseModel):
    """Top-level unit description."""

    model_config = ConfigDict(frozen=True)

    units: list[UnitEntry] = Field(default_factory=list)


def load_unit_file(path: Path) -> UnitFile:
    """Load and validate a unit description.

    Files ending in ``.toml`` are read as TOML, anything else as YAML.

    Raises:
        UnitFileError: If the file is not valid YAML or TOML
        pydantic.ValidationError: If the description is malformed
    """
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix == ".toml":
            data = tomllib.loads(text)
        else:
            data = yaml.safe_load(text)
    except (yaml.YAMLError, tomllib.TOMLDecodeError) as e:
        raise UnitFileError(path.name, str(e)) from e
    if data is None:
        data = {}
    return UnitFile.model_validate(data)


def apply_unit_file(ctx: "ResolverContext", description: UnitFile) -> None:
    """Declare every entry of a unit description in file order."""
    for entry in description.units:
        if entry.kind == "stack":
            _apply_stack(ctx, entry)
        elif entry.kind == "dependencies":
            _apply_dependencies(ctx, entry)
        else:
            _apply_package(ctx, entry)


def _apply_stack(ctx: "ResolverContext", entry: UnitEntry) -> None:
    ctx.strategy.declare_stack(
        ctx,
        entry.name,
        component=entry.component,
        description=entry.description,
        depends=entry.depends,
    )
    if entry.deploys:
        ctx.strategy.add_stack_dependencies(ctx, entry.name, deploys=entry.deploys)
    if entry.extra_run_depends:
        ctx.strategy.add_package_dependencies(
            ctx, entry.name, extra_run_depends=entry.extra_run_depends
        )


def _apply_package(ctx: "ResolverContext", entry: UnitEntry) -> None:
    ctx.strategy.declare_package(
        ctx,
        entry.name,
        meta=entry.meta,
        component=entry.component,
        description=entry.description,
        depends=entry.depends or (),
        build_depends=entry.build_depends,
        run_depends=entry.run_depends,
        extra_build_depends=entry.extra_build_depends,
        extra_run_depends=entry.extra_run_depends,
        reverse_depends=entry.reverse_depends,
    )
    codegen.add_generated(
        ctx,
        entry.name,
        messages=entry.messages,
        services=entry.services,
        configurations=entry.configurations,
    )
    for declaration in entry.exports:
        codegen.export(ctx, entry.name, declaration.type, **declaration.attributes)
    for plugin in entry.plugins:
        codegen.add_plugin(ctx, entry.name, plugin.name, plugin.type)
        for plugin_class in plugin.classes:
            codegen.add_plugin_class(
                ctx,
                entry.name,
                plugin.type,
                plugin_class.name,
                plugin_class.base_class_type,
                class_type=plugin_class.class_type,
                description=plugin_class.description,
            )


def _apply_dependencies(ctx: "ResolverContext", entry: UnitEntry) -> None:
    if not ctx.registry.contains(entry.name):
        raise UndefinedUnitError(entry.name)

    unit = ctx.registry.get(entry.name)
    if unit.is_meta:
        # Meta units take their dependencies through the stack call in either generation.
        ctx.strategy.add_stack_dependencies(
            ctx,
            entry.name,
            depends=[*(entry.depends or ()), *(entry.run_depends or ())],
            deploys=entry.deploys,
        )
        ctx.strategy.add_package_dependencies(
            ctx,
            entry.name,
            build_depends=entry.build_depends or (),
            extra_build_depends=entry.extra_build_depends,
            extra_run_depends=entry.extra_run_depends,
        )
    else:
        ctx.strategy.add_package_dependencies(
            ctx,
            entry.name,
            depends=entry.depends or (),
            build_depends=entry.build_depends or (),
            run_depends=entry.run_depends or (),
            extra_build_depends=entry.extra_build_depends,
            extra_run_depends=entry.extra_run_depends,
            optional=entry.optional,
        )
        if entry.deploys:
            ctx.strategy.add_stack_dependencies(ctx, entry.name, deploys=entry.deploys)
    logger.debug("Added dependencies to %s", entry.name)
