"""Errors raised while resolving units and assembling manifests.

Every error aborts the resolution pass. They propagate to the top-level
driver (the CLI) which reports them and exits.
"""


class ResolutionError(Exception):
    """Base class for all resolution failures."""


class DuplicateUnitError(ResolutionError):
    """A unit name was registered twice."""

    def __init__(self, name: str) -> None:
        super().__init__(f"ROS unit {name} multiply defined!")
        self.name = name


class UndefinedUnitError(ResolutionError):
    """A unit was queried that has not been registered."""

    def __init__(self, name: str, kind: str = "unit") -> None:
        super().__init__(f"ROS {kind} {name} undefined!")
        self.name = name


class MetaBuildDependencyError(ResolutionError):
    """A meta-package or stack declared build-time dependencies."""

    def __init__(self, name: str, dependencies: list[str]) -> None:
        super().__init__(
            f"ROS meta-package {name} defines build dependencies: {', '.join(dependencies)}"
        )
        self.name = name
        self.dependencies = dependencies


class ExternalDependencyNotFoundError(ResolutionError):
    """A required external dependency could not be discovered on the host."""

    def __init__(self, unit: str, dependency: str, kind: str = "package") -> None:
        super().__init__(f"ROS {kind} {dependency} required by {unit} not found.")
        self.unit = unit
        self.dependency = dependency


class UnresolvedHostPackageError(ResolutionError):
    """An external dependency has no host package at packaging time."""

    def __init__(self, dependency: str, scope: str, unit: str | None = None) -> None:
        message = f"ROS {scope} dependency {dependency} could not be resolved"
        if unit is not None:
            message += f" for {unit}"
        super().__init__(message + ".")
        self.dependency = dependency
        self.unit = unit


class InvalidDistributionStateError(ResolutionError):
    """The ROS distribution is undefined, invalid or contradicts an earlier one."""


class ReverseDependencyError(ResolutionError):
    """A package names a non-meta package as the meta-package it belongs to."""

    def __init__(self, name: str, target: str) -> None:
        super().__init__(f"ROS package {name} reversely depends on non-meta package {target}!")
        self.name = name
        self.target = target


class ManifestStateError(ResolutionError):
    """A manifest document was opened twice or written before being opened."""


class MissingProjectConfigError(ResolutionError):
    """Manifest headers were requested without project metadata."""

    def __init__(self) -> None:
        super().__init__("Project metadata is not configured; run 'rosmanifest init' first.")


class UnitFileError(ResolutionError):
    """A unit description could not be parsed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot parse unit description {path}: {reason}")
        self.path = path
