"""ROS distribution descriptor and one-shot generation mode selection."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from rosmanifest.core.errors import InvalidDistributionStateError

if TYPE_CHECKING:
    from rosmanifest.core.generation.abc import GenerationStrategy

logger = logging.getLogger(__name__)

# Distributions sorting lexically before this name use the legacy schema.
MODERN_THRESHOLD = "groovy"


class GenerationMode(Enum):
    """Manifest schema generation."""

    LEGACY = "legacy"
    MODERN = "modern"

    @staticmethod
    def for_distribution(name: str) -> "GenerationMode":
        if name < MODERN_THRESHOLD:
            return GenerationMode.LEGACY
        return GenerationMode.MODERN


@dataclass(frozen=True)
class Distribution:
    """The ROS distribution units are built against."""

    name: str
    path: Path
    package_path: tuple[Path, ...] = ()

    @property
    def mode(self) -> GenerationMode:
        return GenerationMode.for_distribution(self.name)

    @property
    def pkg_config_dir(self) -> Path:
        return self.path / "lib" / "pkgconfig"

    def validate(self) -> None:
        """Check that the distribution can be used for lookups.

        Raises:
            InvalidDistributionStateError: If the name is empty or no package
                path entry is an existing directory
        """
        if not self.name:
            raise InvalidDistributionStateError("ROS distribution is undefined.")
        if not any(path.is_dir() for path in self.package_path):
            raise InvalidDistributionStateError("ROS package path is invalid.")


def detect_distribution(
    environ: Mapping[str, str],
    *,
    name: str | None = None,
    path: Path | None = None,
    package_path: Sequence[Path] = (),
) -> Distribution | None:
    """Build the distribution descriptor from configuration and environment.

    Configured values win over ``ROS_DISTRO``, ``ROS_ROOT`` and
    ``ROS_PACKAGE_PATH``. A configured name that differs from ``ROS_DISTRO``
    is a contradiction.

    Returns:
        Distribution, or None if neither configuration nor environment
        names one

    Raises:
        InvalidDistributionStateError: If the configured name contradicts
            the environment
    """
    env_name = environ.get("ROS_DISTRO")
    if name and env_name and name != env_name:
        raise InvalidDistributionStateError(
            f"ROS distribution {name} contradicts ROS_DISTRO={env_name}."
        )
    resolved_name = name or env_name
    if not resolved_name:
        return None

    if path is None:
        ros_root = environ.get("ROS_ROOT")
        if ros_root:
            path = (Path(ros_root) / ".." / "..").resolve()
        else:
            path = Path("/opt/ros") / resolved_name

    resolved_package_path = tuple(package_path)
    if not resolved_package_path:
        env_package_path = environ.get("ROS_PACKAGE_PATH", "")
        resolved_package_path = tuple(Path(p) for p in env_package_path.split(":") if p)
    if not resolved_package_path:
        resolved_package_path = (path / "share",)

    return Distribution(name=resolved_name, path=path, package_path=resolved_package_path)


class GenerationSelector:
    """Selects the generation strategy once and keeps it fixed.

    Selection happens on the first strategy query, which is normally the
    first unit declaration. The descriptor may be replaced until then;
    afterwards a descriptor naming another distribution is rejected.
    """

    def __init__(self, distribution: Distribution | None, *, validate_paths: bool = True) -> None:
        self._distribution = distribution
        self._validate_paths = validate_paths
        self._strategy: GenerationStrategy | None = None

    @property
    def is_selected(self) -> bool:
        return self._strategy is not None

    @property
    def distribution(self) -> Distribution:
        if self._distribution is None or not self._distribution.name:
            raise InvalidDistributionStateError("ROS distribution is undefined.")
        return self._distribution

    def strategy(self) -> "GenerationStrategy":
        """Get the active strategy, selecting it on first use.

        Raises:
            InvalidDistributionStateError: If no distribution is defined or
                its package path is invalid
        """
        if self._strategy is None:
            distribution = self.distribution
            if self._validate_paths:
                distribution.validate()
            # Deferred: the generation modules import this one.
            from rosmanifest.core.generation.legacy import LegacyGeneration
            from rosmanifest.core.generation.modern import ModernGeneration

            if distribution.mode is GenerationMode.LEGACY:
                self._strategy = LegacyGeneration(distribution)
            else:
                self._strategy = ModernGeneration(distribution)
            logger.debug(
                "Selected %s generation for ROS %s", distribution.mode.value, distribution.name
            )
        return self._strategy

    def observe(self, distribution: Distribution) -> None:
        """Report distribution information seen after construction.

        The CLI builds its context from one descriptor and never calls this.
        It is the hook for callers embedding the resolver that learn about
        the distribution in stages, e.g. a build driver sourcing a ROS setup
        script after units were declared.

        Raises:
            InvalidDistributionStateError: If a strategy was already selected
                for a different distribution
        """
        if self._strategy is None:
            self._distribution = distribution
            return
        if distribution.name != self.distribution.name:
            raise InvalidDistributionStateError(
                f"ROS distribution {distribution.name} observed after "
                f"{self.distribution.name} was selected."
            )
