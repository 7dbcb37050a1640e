"""Resolution context with dependency injection."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from rosmanifest.core.build_graph import BuildGraph
from rosmanifest.core.debian.abc import Debian
from rosmanifest.core.debian.fake import FakeDebian
from rosmanifest.core.debian.real import RealDebian
from rosmanifest.core.distribution import (
    Distribution,
    GenerationSelector,
    detect_distribution,
)
from rosmanifest.core.external import ExternalResolver
from rosmanifest.core.generation.abc import GenerationStrategy
from rosmanifest.core.manifest import ManifestAssembler
from rosmanifest.core.project_config import (
    CONFIG_FILENAME,
    ProjectConfig,
    load_project_config,
)
from rosmanifest.core.registry import PackageRegistry
from rosmanifest.core.ros.abc import RosPack
from rosmanifest.core.ros.fake import FakeRosPack
from rosmanifest.core.ros.real import RealRosPack
from rosmanifest.core.user_feedback import (
    FakeUserFeedback,
    InteractiveFeedback,
    SuppressedFeedback,
    UserFeedback,
)


@dataclass(frozen=True)
class ResolverContext:
    """Immutable context holding all state of one resolution pass.

    Created at the CLI entry point (or per test) and passed to every
    operation. The fields are fixed; the registry, manifests, caches and
    build graph they hold accumulate state during the pass.

    Note: project may be None only before ``rosmanifest init`` has written
    the config file. Declaring units requires it.
    """

    registry: PackageRegistry
    manifests: ManifestAssembler
    external: ExternalResolver
    generation: GenerationSelector
    build_graph: BuildGraph
    ros: RosPack
    debian: Debian
    feedback: UserFeedback
    project: ProjectConfig | None
    cwd: Path

    @property
    def strategy(self) -> GenerationStrategy:
        """The generation strategy, selected on first access."""
        return self.generation.strategy()

    @property
    def distribution(self) -> Distribution:
        return self.generation.distribution

    @staticmethod
    def for_test(
        *,
        distribution: str | Distribution | None = "hydro",
        ros: RosPack | None = None,
        debian: Debian | None = None,
        feedback: UserFeedback | None = None,
        project: ProjectConfig | None = None,
        cwd: Path | None = None,
    ) -> "ResolverContext":
        """Create a test context backed by in-memory fakes.

        Args:
            distribution: Distribution name or descriptor. Names sorting
                before "groovy" select the legacy schema. None leaves the
                distribution undefined.
            ros: Optional RosPack. If None, creates an empty FakeRosPack.
            debian: Optional Debian. If None, creates an empty FakeDebian.
            feedback: Optional UserFeedback. If None, creates FakeUserFeedback.
            project: Optional ProjectConfig. If None, uses test metadata.
            cwd: Optional working directory. If None, uses Path("/test/default/cwd").

        Returns:
            ResolverContext whose package path is never checked on disk

        Example:
            >>> ros = FakeRosPack(packages={"boost_system": Path("/opt/ros/hydro")})
            >>> ctx = ResolverContext.for_test(distribution="fuerte", ros=ros)
        """
        if isinstance(distribution, str):
            distribution = Distribution(
                name=distribution,
                path=Path("/opt/ros") / distribution,
                package_path=(Path("/opt/ros") / distribution / "share",),
            )
        if ros is None:
            ros = FakeRosPack()
        if debian is None:
            debian = FakeDebian()
        if feedback is None:
            feedback = FakeUserFeedback()
        if project is None:
            project = sample_project_config()

        return ResolverContext(
            registry=PackageRegistry(),
            manifests=ManifestAssembler(),
            external=ExternalResolver(ros, debian, feedback),
            generation=GenerationSelector(distribution, validate_paths=False),
            build_graph=BuildGraph(),
            ros=ros,
            debian=debian,
            feedback=feedback,
            project=project,
            cwd=cwd or Path("/test/default/cwd"),
        )


def sample_project_config() -> ProjectConfig:
    """Project metadata used by ResolverContext.for_test()."""
    return ProjectConfig(
        name="navigation",
        version="1.2.3",
        summary="Navigation components.",
        authors=("Ada Lovelace", "Grace Hopper"),
        contact="ada@example.com",
        license="BSD",
        home="https://example.com/navigation",
    )


def create_context(
    *,
    quiet: bool = False,
    cwd: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ResolverContext:
    """Create production context with real implementations.

    Called at CLI entry point. Loads ``rosmanifest.toml`` from the working
    directory and combines its ``[ros]`` section with the environment.

    Args:
        quiet: If True, use SuppressedFeedback to hide status messages
        cwd: Working directory holding the config file, defaults to os.getcwd()
        environ: Environment to read ROS_* variables from, defaults to os.environ

    Returns:
        ResolverContext with real host tool implementations

    Raises:
        InvalidDistributionStateError: If the configured distribution
            contradicts ROS_DISTRO
    """
    if cwd is None:
        cwd = Path(os.getcwd())
    if environ is None:
        environ = os.environ

    project = load_project_config(cwd / CONFIG_FILENAME)
    ros_settings = project.ros if project is not None else None
    distribution = detect_distribution(
        environ,
        name=ros_settings.distribution if ros_settings else None,
        path=ros_settings.path if ros_settings else None,
        package_path=ros_settings.package_path if ros_settings else (),
    )

    feedback: UserFeedback = SuppressedFeedback() if quiet else InteractiveFeedback()
    if distribution is not None:
        ros: RosPack = RealRosPack(distribution.path, list(distribution.package_path))
    else:
        ros = RealRosPack(Path("/opt/ros"), [])
    debian: Debian = RealDebian()

    return ResolverContext(
        registry=PackageRegistry(),
        manifests=ManifestAssembler(),
        external=ExternalResolver(ros, debian, feedback),
        generation=GenerationSelector(distribution),
        build_graph=BuildGraph(),
        ros=ros,
        debian=debian,
        feedback=feedback,
        project=project,
        cwd=cwd,
    )
