"""Memoized discovery of external ROS packages and their host packages.

External dependencies are units assumed to be installed on the host. The
resolver asks this module for their compile/link settings while declaring
dependencies, and for the Debian package providing them at packaging time.
Every lookup runs the host tools at most once per name.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from rosmanifest.core.debian.abc import Debian
from rosmanifest.core.errors import ExternalDependencyNotFoundError
from rosmanifest.core.ros.abc import CompileFlags, RosPack
from rosmanifest.core.units import extend_unique
from rosmanifest.core.user_feedback import UserFeedback

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscoveryResult:
    """Install path and compile/link settings of one external unit."""

    path: Path | None
    include_dirs: list[str] = field(default_factory=list)
    libraries: list[str] = field(default_factory=list)
    library_dirs: list[str] = field(default_factory=list)
    link_flags: list[str] = field(default_factory=list)


def host_package_name(distribution: str, name: str) -> str:
    """Conventional Debian package name of a ROS unit, ``ros-<distro>-<name>``."""
    return f"ros-{distribution}-{name}".replace("_", "-")


class ExternalResolver:
    """Resolves external dependency names through the host tools.

    Results, including negative ones, are cached per name so that repeated
    declarations never re-run a lookup.
    """

    def __init__(self, ros: RosPack, debian: Debian, feedback: UserFeedback) -> None:
        self._ros = ros
        self._debian = debian
        self._feedback = feedback
        self._packages: dict[str, DiscoveryResult | None] = {}
        self._stacks: dict[str, DiscoveryResult | None] = {}
        self._host_packages: dict[str, str | None] = {}

    def discover(
        self,
        name: str,
        *,
        optional: bool = False,
        required_by: str | None = None,
    ) -> DiscoveryResult | None:
        """Discover an installed package's path and compile/link settings.

        Args:
            name: Name of the external package
            optional: Report a missing package as an advisory instead of failing
            required_by: Name of the unit declaring the dependency, for messages

        Returns:
            DiscoveryResult, or None if an optional package is missing

        Raises:
            ExternalDependencyNotFoundError: If a required package is missing
        """
        if name not in self._packages:
            self._packages[name] = self._discover_package(name)
        return self._checked(self._packages[name], name, "package", optional, required_by)

    def discover_stack(
        self,
        name: str,
        *,
        optional: bool = False,
        required_by: str | None = None,
    ) -> DiscoveryResult | None:
        """Discover an installed legacy stack.

        The stack's settings are the concatenated settings of every package
        it contains.
        """
        if name not in self._stacks:
            self._stacks[name] = self._discover_stack(name, optional)
        return self._checked(self._stacks[name], name, "stack", optional, required_by)

    def resolve_host_package(
        self,
        name: str,
        *,
        manifest_filename: str,
        distribution: str,
        stack: bool = False,
    ) -> str | None:
        """Resolve the Debian package providing an external unit.

        ``rosdep resolve`` is asked first. Failing that, the installed
        package owning the unit's manifest file is searched, preferring the
        conventional ``ros-<distro>-<name>`` package among several owners.

        Returns:
            Debian package name, or None if neither method resolves it
        """
        if name in self._host_packages:
            return self._host_packages[name]

        resolved = self._ros.resolve_rosdep(name)
        if resolved is None:
            path = self._ros.find_stack(name) if stack else self._ros.find_package(name)
            if path is not None:
                resolved = self._search_owner(
                    path / manifest_filename, host_package_name(distribution, name)
                )
        logger.debug("Resolved host package of %s: %s", name, resolved)
        self._host_packages[name] = resolved
        return resolved

    def _search_owner(self, manifest: Path, preferred: str) -> str | None:
        owners = self._debian.search_packages(manifest)
        if not owners:
            return None
        if preferred in owners:
            return preferred
        return owners[0]

    def _discover_package(self, name: str) -> DiscoveryResult | None:
        path = self._ros.find_package(name)
        if path is None:
            logger.debug("rospack cannot find %s", name)
            return None

        flags = self._ros.package_flags(name)
        if flags is None or flags.is_empty():
            flags = self._ros.pkg_config_flags(name) or flags or CompileFlags()
        logger.debug("Discovered %s at %s: %s", name, path, flags)
        return DiscoveryResult(
            path=path,
            include_dirs=list(flags.include_dirs),
            libraries=list(flags.libraries),
            library_dirs=list(flags.library_dirs),
            link_flags=list(flags.link_flags),
        )

    def _discover_stack(self, name: str, optional: bool) -> DiscoveryResult | None:
        path = self._ros.find_stack(name)
        if path is None:
            logger.debug("rosstack cannot find %s", name)
            return None

        result = DiscoveryResult(path=path)
        for package in self._ros.stack_contents(name):
            discovered = self.discover(package, optional=optional, required_by=name)
            if discovered is None:
                continue
            extend_unique(result.include_dirs, discovered.include_dirs)
            extend_unique(result.libraries, discovered.libraries)
            extend_unique(result.library_dirs, discovered.library_dirs)
            extend_unique(result.link_flags, discovered.link_flags)
        return result

    def _checked(
        self,
        result: DiscoveryResult | None,
        name: str,
        kind: str,
        optional: bool,
        required_by: str | None,
    ) -> DiscoveryResult | None:
        if result is not None:
            return result
        if optional:
            self._feedback.info(f"Optional ROS {kind} {name} not found, skipping.")
            return None
        raise ExternalDependencyNotFoundError(required_by or name, name, kind)
