"""Fake RosPack implementation for testing.

FakeRosPack is an in-memory implementation answering lookups from
constructor-provided tables, tracking calls for memoization assertions.
"""

from pathlib import Path

from rosmanifest.core.ros.abc import CompileFlags, RosPack


class FakeRosPack(RosPack):
    """In-memory fake implementation of the ROS lookup tools.

    This class has NO public setup methods. All state is provided via constructor
    or captured during execution.

    Examples:
        >>> ros = FakeRosPack(
        ...     packages={"boost_system": Path("/opt/ros/hydro/share/boost_system")},
        ...     flags={"boost_system": CompileFlags(libraries=["boost_system"])},
        ...     rosdep={"boost_system": "libboost-system-dev"},
        ... )
        >>> ros.resolve_rosdep("boost_system")
        'libboost-system-dev'
    """

    def __init__(
        self,
        *,
        packages: dict[str, Path] | None = None,
        stacks: dict[str, Path] | None = None,
        stack_contents: dict[str, list[str]] | None = None,
        flags: dict[str, CompileFlags] | None = None,
        pkg_config: dict[str, CompileFlags] | None = None,
        rosdep: dict[str, str] | None = None,
        depends: dict[str, list[str]] | None = None,
    ) -> None:
        """Create FakeRosPack with predetermined lookup tables.

        Args:
            packages: Mapping of installed package name to install path
            stacks: Mapping of installed legacy stack name to install path
            stack_contents: Mapping of stack name to contained package names
            flags: Mapping of package name to flags reported by rospack
            pkg_config: Mapping of package name to flags reported by pkg-config
            rosdep: Mapping of dependency key to resolved Debian package
            depends: Mapping of package name to its recursive dependencies;
                names missing here make implicit_depends() fail
        """
        self._packages = packages or {}
        self._stacks = stacks or {}
        self._stack_contents = stack_contents or {}
        self._flags = flags or {}
        self._pkg_config = pkg_config or {}
        self._rosdep = rosdep or {}
        self._depends = depends or {}
        self._find_calls: list[str] = []
        self._flag_calls: list[str] = []
        self._rosdep_calls: list[str] = []

    @property
    def find_calls(self) -> list[str]:
        """Names passed to find_package() and find_stack(), for test assertions."""
        return self._find_calls

    @property
    def flag_calls(self) -> list[str]:
        """Names passed to package_flags(), for test assertions."""
        return self._flag_calls

    @property
    def rosdep_calls(self) -> list[str]:
        """Names passed to resolve_rosdep(), for test assertions."""
        return self._rosdep_calls

    def find_package(self, name: str) -> Path | None:
        self._find_calls.append(name)
        return self._packages.get(name)

    def find_stack(self, name: str) -> Path | None:
        self._find_calls.append(name)
        return self._stacks.get(name)

    def stack_contents(self, name: str) -> list[str]:
        return list(self._stack_contents.get(name, []))

    def package_flags(self, name: str) -> CompileFlags | None:
        self._flag_calls.append(name)
        return self._flags.get(name)

    def pkg_config_flags(self, name: str) -> CompileFlags | None:
        return self._pkg_config.get(name)

    def resolve_rosdep(self, name: str) -> str | None:
        self._rosdep_calls.append(name)
        return self._rosdep.get(name)

    def implicit_depends(self, name: str) -> list[str] | None:
        if name not in self._depends:
            return None
        return list(self._depends[name])
