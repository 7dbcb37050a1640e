"""Authoritative set of units declared during one resolution pass."""

from collections.abc import Iterator

from rosmanifest.core.errors import DuplicateUnitError, UndefinedUnitError
from rosmanifest.core.manifest import ManifestHandle
from rosmanifest.core.units import Unit, UnitKind, default_component


class PackageRegistry:
    """Insertion-ordered registry of packages, meta-packages and stacks.

    Iteration order equals registration order; later units may depend on
    earlier ones. A name can only be registered once, whatever its kind.
    """

    def __init__(self) -> None:
        self._units: dict[str, Unit] = {}

    def register(
        self,
        name: str,
        *,
        kind: UnitKind,
        is_meta: bool,
        manifest: ManifestHandle,
        component: str | None = None,
        description: str | None = None,
        reverse_depends: str | None = None,
    ) -> Unit:
        """Create and store a unit with default metadata.

        Raises:
            DuplicateUnitError: If the name is already registered
        """
        if name in self._units:
            raise DuplicateUnitError(name)

        unit = Unit(
            name=name,
            kind=kind,
            is_meta=is_meta or kind is UnitKind.STACK,
            component=component or default_component(name),
            description=description or f"{name} {kind.value}",
            manifest=manifest,
            reverse_depends=reverse_depends,
        )
        self._units[name] = unit
        return unit

    def get(self, name: str, kind: UnitKind | None = None) -> Unit:
        """Look up a registered unit.

        Raises:
            UndefinedUnitError: If no unit (of the given kind) has that name
        """
        unit = self._units.get(name)
        if unit is None or (kind is not None and unit.kind is not kind):
            raise UndefinedUnitError(name, kind.value if kind is not None else "unit")
        return unit

    def contains(self, name: str, kind: UnitKind | None = None) -> bool:
        unit = self._units.get(name)
        if unit is None:
            return False
        return kind is None or unit.kind is kind

    def units(self) -> list[Unit]:
        return list(self._units.values())

    def packages(self) -> list[Unit]:
        return [unit for unit in self._units.values() if unit.kind is UnitKind.PACKAGE]

    def stacks(self) -> list[Unit]:
        return [unit for unit in self._units.values() if unit.kind is UnitKind.STACK]

    def __iter__(self) -> Iterator[Unit]:
        return iter(self.units())

    def __len__(self) -> int:
        return len(self._units)
