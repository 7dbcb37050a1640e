"""Abstract interface to the host Debian package database."""

from abc import ABC, abstractmethod
from pathlib import Path


class Debian(ABC):
    """Abstract interface for queries against installed Debian packages.

    All implementations (real and fake) must implement this interface.
    """

    @abstractmethod
    def search_packages(self, path: Path) -> list[str]:
        """Find the installed packages whose file lists contain a path.

        Args:
            path: Absolute path of an installed file

        Returns:
            Names of the owning packages, empty if no package owns the path
        """
        ...

    @abstractmethod
    def architecture(self) -> str:
        """Get the host's Debian architecture, e.g. ``amd64``."""
        ...
