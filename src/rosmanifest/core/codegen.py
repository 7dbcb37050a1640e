"""Declaration helpers contributing to a package's manifest and build graph.

Message, service and configuration generators add their build
dependencies and generated include directory to the package and describe a
code generation target. Plugins export themselves through the package's
shared export envelope and get a plugin manifest of their own.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from rosmanifest.core import resolver
from rosmanifest.core.build_graph import (
    BuildTarget,
    TargetKind,
    manifest_target_name,
    plugin_manifest_target_name,
    unit_directory,
)
from rosmanifest.core.errors import ManifestStateError, UndefinedUnitError
from rosmanifest.core.manifest import (
    HEAD,
    PLUGIN_CLASSES,
    FragmentKey,
    ManifestHandle,
    xml_text,
)
from rosmanifest.core.units import Unit, UnitKind, extend_unique

if TYPE_CHECKING:
    from rosmanifest.core.context import ResolverContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratorSettings:
    extension: str
    target_suffix: str
    kind: TargetKind
    build_depends: tuple[str, ...]


class Generator(Enum):
    """Code generators run over a package's definition files."""

    MESSAGES = GeneratorSettings(
        "msg", "ros_messages", TargetKind.MESSAGES, ("rosbash", "rosbuild")
    )
    SERVICES = GeneratorSettings(
        "srv", "ros_services", TargetKind.SERVICES, ("rosbash", "rosbuild")
    )
    CONFIGURATIONS = GeneratorSettings(
        "cfg", "ros_configurations", TargetKind.CONFIGURATIONS, ("dynamic_reconfigure",)
    )


@dataclass(frozen=True)
class GeneratedSources:
    """Outputs of one code generation target."""

    target: str
    include_dir: str
    headers: tuple[str, ...]
    modules: tuple[str, ...]


@dataclass(frozen=True)
class LinkInfo:
    """What an executable, library or plugin of a package builds against."""

    depends: tuple[str, ...]
    libraries: tuple[str, ...]
    library_dirs: tuple[str, ...]
    link_flags: tuple[str, ...]


def _package(ctx: "ResolverContext", name: str) -> Unit:
    if not ctx.registry.contains(name, UnitKind.PACKAGE):
        raise UndefinedUnitError(name, "package")
    return ctx.registry.get(name)


def generated_target_name(package: str, generator: Generator) -> str:
    return f"{package}_{generator.value.target_suffix}"


def _generate(
    ctx: "ResolverContext",
    package: str,
    generator: Generator,
    definitions: Sequence[str],
) -> GeneratedSources | None:
    if not definitions:
        return None
    settings = generator.value
    ctx.strategy.add_package_dependencies(ctx, package, build_depends=settings.build_depends)
    unit = _package(ctx, package)

    package_dir = unit_directory(unit)
    module_dir = f"{package_dir}/src/{package}/{settings.extension}"
    stems = [PurePosixPath(definition).stem for definition in definitions]
    if generator is Generator.CONFIGURATIONS:
        include_dir = f"{package_dir}/{settings.extension}/cpp"
        headers = tuple(f"{include_dir}/{package}/{stem}Config.h" for stem in stems)
        modules = tuple(f"{module_dir}/{stem}Config.py" for stem in stems)
    else:
        include_dir = f"{package_dir}/{settings.extension}_gen/cpp/include"
        headers = tuple(f"{include_dir}/{package}/{stem}.h" for stem in stems)
        modules = (*(f"{module_dir}/_{stem}.py" for stem in stems), f"{module_dir}/__init__.py")

    # Generated headers come first on the include path.
    include_dirs = [include_dir, *(d for d in unit.include_dirs if d != include_dir)]
    unit.include_dirs[:] = include_dirs

    target = generated_target_name(package, generator)
    manifest_targets = [manifest_target_name(unit)]
    manifest_targets.extend(
        manifest_target_name(ctx.registry.get(dependency))
        for dependency in unit.internal_build_deps
    )
    ctx.build_graph.add(
        BuildTarget(
            name=target,
            kind=settings.kind,
            owner=package,
            depends=tuple(manifest_targets),
            outputs=(*headers, *modules),
        )
    )
    logger.debug("%s: %d %s definitions", package, len(definitions), settings.extension)
    return GeneratedSources(
        target=target, include_dir=include_dir, headers=headers, modules=modules
    )


def add_messages(
    ctx: "ResolverContext", package: str, definitions: Sequence[str]
) -> GeneratedSources | None:
    """Describe C++ and Python generation for ``.msg`` definitions."""
    return _generate(ctx, package, Generator.MESSAGES, definitions)


def add_services(
    ctx: "ResolverContext", package: str, definitions: Sequence[str]
) -> GeneratedSources | None:
    """Describe C++ and Python generation for ``.srv`` definitions."""
    return _generate(ctx, package, Generator.SERVICES, definitions)


def add_configurations(
    ctx: "ResolverContext", package: str, definitions: Sequence[str]
) -> GeneratedSources | None:
    """Describe dynamic_reconfigure generation for ``.cfg`` definitions."""
    return _generate(ctx, package, Generator.CONFIGURATIONS, definitions)


def add_generated(
    ctx: "ResolverContext",
    package: str,
    *,
    messages: Sequence[str] = (),
    services: Sequence[str] = (),
    configurations: Sequence[str] = (),
) -> list[GeneratedSources]:
    """Run every generator that has definitions."""
    results = [
        add_messages(ctx, package, messages),
        add_services(ctx, package, services),
        add_configurations(ctx, package, configurations),
    ]
    return [result for result in results if result is not None]


def export(
    ctx: "ResolverContext", package: str, decl_type: str, **attributes: str
) -> None:
    """Add an export declaration to a package manifest."""
    resolver.add_export(ctx, _package(ctx, package), decl_type, attributes)


def plugin_manifest_handle(package: str, plugin_type: str) -> ManifestHandle:
    return ManifestHandle(owner=package, filename=f"{plugin_type}_plugins.xml")


def add_plugin(
    ctx: "ResolverContext", package: str, name: str, plugin_type: str
) -> ManifestHandle:
    """Declare a plugin library of a package.

    The plugin type becomes a build and run dependency of the package, is
    exported from the package manifest and gets a plugin manifest listing
    the classes added with add_plugin_class().

    Returns:
        Handle of the plugin manifest

    Raises:
        ManifestStateError: If another library of that type was added to the package
    """
    unit = _package(ctx, package)
    manifest = plugin_manifest_handle(package, plugin_type)
    library = f'<library path="lib/lib{name}">'
    # A package has one library per plugin type.
    if ctx.manifests.is_open(manifest):
        if ctx.manifests.fragments(manifest)[FragmentKey(HEAD)] != (library,):
            raise ManifestStateError(
                f"Plugin manifest {manifest.relative_path} already lists another "
                f"library than {name}."
            )
    else:
        ctx.manifests.open(manifest, [library], ["</library>"])

    ctx.strategy.add_package_dependencies(ctx, package, depends=[plugin_type])
    resolver.add_export(
        ctx, unit, plugin_type, {"plugin": f"${{prefix}}/{manifest.filename}"}
    )
    ctx.build_graph.add(
        BuildTarget(
            name=plugin_manifest_target_name(name),
            kind=TargetKind.PLUGIN_MANIFEST,
            owner=package,
            depends=(manifest_target_name(unit),),
            outputs=(f"{unit_directory(unit)}/{manifest.filename}",),
        )
    )
    logger.debug("%s: plugin %s of type %s", package, name, plugin_type)
    return manifest


def add_plugin_class(
    ctx: "ResolverContext",
    package: str,
    plugin_type: str,
    name: str,
    base_class_type: str,
    *,
    class_type: str | None = None,
    description: str | None = None,
) -> None:
    """Add a class entry to the package's plugin manifest of that type.

    Raises:
        ManifestStateError: If no plugin of that type was added to the package
    """
    class_type = class_type or f"{package}::{name}"
    description = description or f"{name} plugin class"
    ctx.manifests.write_fragment(
        plugin_manifest_handle(package, plugin_type),
        PLUGIN_CLASSES,
        name,
        [
            f'  <class name="{package}/{name}" type="{xml_text(class_type)}" '
            f'base_class_type="{xml_text(base_class_type)}">',
            "    <description>",
            f"      {xml_text(description)}",
            "    </description>",
            "  </class>",
        ],
    )


def link_info(ctx: "ResolverContext", package: str) -> LinkInfo:
    """Generated targets and link settings for a package's binaries.

    Binaries depend on the message and service targets of the package and
    of its internal build dependencies.
    """
    unit = _package(ctx, package)
    depends: list[str] = []
    for owner in (package, *unit.internal_build_deps):
        for generator in (Generator.MESSAGES, Generator.SERVICES):
            target = generated_target_name(owner, generator)
            if ctx.build_graph.contains(target):
                depends.append(target)
    return LinkInfo(
        depends=tuple(depends),
        libraries=tuple(unit.link_libraries),
        library_dirs=tuple(unit.library_dirs),
        link_flags=tuple(unit.link_flags),
    )


def pkg_config_requires(ctx: "ResolverContext", package: str) -> list[str]:
    """Modules a generated pkg-config file of the package requires."""
    unit = _package(ctx, package)
    requires: list[str] = []
    extend_unique(requires, unit.internal_build_deps)
    extend_unique(requires, unit.external_build_deps)
    return requires
