"""Abstract interface to the ROS host lookup tools."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class CompileFlags:
    """Compile and link settings reported for one installed package."""

    include_dirs: list[str] = field(default_factory=list)
    libraries: list[str] = field(default_factory=list)
    library_dirs: list[str] = field(default_factory=list)
    link_flags: list[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.include_dirs or self.libraries or self.library_dirs or self.link_flags)


class RosPack(ABC):
    """Abstract interface for rospack, rosstack, rosdep and pkg-config lookups.

    All implementations (real and fake) must implement this interface.
    Lookups return None (or an empty list) when the host does not know the
    name; they never raise for a missing package.
    """

    @abstractmethod
    def find_package(self, name: str) -> Path | None:
        """Get the install path of a ROS package.

        Args:
            name: Name of the package

        Returns:
            Path of the package directory, or None if not installed
        """
        ...

    @abstractmethod
    def find_stack(self, name: str) -> Path | None:
        """Get the install path of a legacy ROS stack.

        Args:
            name: Name of the stack

        Returns:
            Path of the stack directory, or None if not installed
        """
        ...

    @abstractmethod
    def stack_contents(self, name: str) -> list[str]:
        """List the packages contained in an installed legacy stack."""
        ...

    @abstractmethod
    def package_flags(self, name: str) -> CompileFlags | None:
        """Get include dirs, libraries and linker flags exported by a package.

        Returns:
            CompileFlags, or None if rospack cannot report flags for the package
        """
        ...

    @abstractmethod
    def pkg_config_flags(self, name: str) -> CompileFlags | None:
        """Get compile and link flags from the package's pkg-config file.

        Returns:
            CompileFlags, or None if pkg-config has no module of that name
        """
        ...

    @abstractmethod
    def resolve_rosdep(self, name: str) -> str | None:
        """Resolve a dependency key to the Debian package providing it.

        Returns:
            Debian package name, or None if rosdep cannot resolve the key
        """
        ...

    @abstractmethod
    def implicit_depends(self, name: str) -> list[str] | None:
        """List the recursive dependencies of an installed package.

        Returns:
            Dependency names, or None if they could not be determined
        """
        ...
