"""Fake Debian implementation for testing."""

from pathlib import Path

from rosmanifest.core.debian.abc import Debian


class FakeDebian(Debian):
    """In-memory fake of the installed package database.

    This class has NO public setup methods. All state is provided via constructor
    or captured during execution.
    """

    def __init__(
        self,
        *,
        owners: dict[Path, list[str]] | None = None,
        architecture: str = "amd64",
    ) -> None:
        """Create FakeDebian with predetermined file ownership.

        Args:
            owners: Mapping of installed file path to the packages owning it
            architecture: Value returned by architecture()
        """
        self._owners = owners or {}
        self._architecture = architecture
        self._searched: list[Path] = []

    @property
    def searched_paths(self) -> list[Path]:
        """Paths passed to search_packages(), for test assertions."""
        return self._searched

    def search_packages(self, path: Path) -> list[str]:
        self._searched.append(path)
        return list(self._owners.get(path, []))

    def architecture(self) -> str:
        return self._architecture
