"""Tests for external discovery and host package resolution."""

from collections.abc import Callable
from pathlib import Path

import pytest

from rosmanifest.core.debian.fake import FakeDebian
from rosmanifest.core.errors import ExternalDependencyNotFoundError
from rosmanifest.core.external import ExternalResolver, host_package_name
from rosmanifest.core.ros.abc import CompileFlags
from rosmanifest.core.ros.fake import FakeRosPack
from rosmanifest.core.user_feedback import FakeUserFeedback


def _resolver(
    ros: FakeRosPack, debian: FakeDebian | None = None
) -> tuple[ExternalResolver, FakeUserFeedback]:
    feedback = FakeUserFeedback()
    return ExternalResolver(ros, debian or FakeDebian(), feedback), feedback


def test_host_package_name_follows_debian_conventions() -> None:
    assert host_package_name("hydro", "nav_core") == "ros-hydro-nav-core"


def test_discover_reports_path_and_flags(make_ros: Callable[..., FakeRosPack]) -> None:
    resolver, _ = _resolver(make_ros())

    result = resolver.discover("roscpp")

    assert result is not None
    assert result.path == Path("/opt/ros/hydro/share/roscpp")
    assert result.include_dirs == ["/opt/ros/hydro/include"]
    assert result.libraries == ["roscpp"]


def test_discover_falls_back_to_pkg_config(make_ros: Callable[..., FakeRosPack]) -> None:
    """Test that pkg-config answers when rospack reports no flags."""
    ros = make_ros(pkg_config={"tf": CompileFlags(libraries=["tf"], link_flags=["-pthread"])})
    resolver, _ = _resolver(ros)

    result = resolver.discover("tf")

    assert result is not None
    assert result.libraries == ["tf"]
    assert result.link_flags == ["-pthread"]


def test_discover_caches_negative_results(make_ros: Callable[..., FakeRosPack]) -> None:
    ros = make_ros()
    resolver, feedback = _resolver(ros)

    assert resolver.discover("missing", optional=True) is None
    assert resolver.discover("missing", optional=True) is None

    assert ros.find_calls == ["missing"]
    assert feedback.of_level("info") == [
        "Optional ROS package missing not found, skipping.",
        "Optional ROS package missing not found, skipping.",
    ]


def test_discover_missing_required_package_fails(make_ros: Callable[..., FakeRosPack]) -> None:
    resolver, _ = _resolver(make_ros())

    with pytest.raises(ExternalDependencyNotFoundError, match="missing required by nav_core"):
        resolver.discover("missing", required_by="nav_core")


def test_discover_stack_merges_contained_packages(make_ros: Callable[..., FakeRosPack]) -> None:
    resolver, _ = _resolver(make_ros())

    result = resolver.discover_stack("ros_comm")

    assert result is not None
    assert result.path == Path("/opt/ros/hydro/share/ros_comm")
    assert result.include_dirs == ["/opt/ros/hydro/include"]
    assert result.libraries == ["roscpp"]


def test_discover_stack_missing_fails(make_ros: Callable[..., FakeRosPack]) -> None:
    resolver, _ = _resolver(make_ros())

    with pytest.raises(ExternalDependencyNotFoundError, match="ROS stack navigation"):
        resolver.discover_stack("navigation")


def test_resolve_host_package_prefers_rosdep(make_ros: Callable[..., FakeRosPack]) -> None:
    resolver, _ = _resolver(make_ros())

    resolved = resolver.resolve_host_package(
        "boost_system", manifest_filename="package.xml", distribution="hydro"
    )

    assert resolved == "libboost-system-dev"


def test_resolve_host_package_searches_manifest_owner(
    make_ros: Callable[..., FakeRosPack],
) -> None:
    """Test the dpkg fallback preferring the conventional package name."""
    manifest = Path("/opt/ros/hydro/share/tf/package.xml")
    debian = FakeDebian(owners={manifest: ["ros-hydro-geometry", "ros-hydro-tf"]})
    resolver, _ = _resolver(make_ros(), debian)

    resolved = resolver.resolve_host_package(
        "tf", manifest_filename="package.xml", distribution="hydro"
    )

    assert resolved == "ros-hydro-tf"
    assert debian.searched_paths == [manifest]


def test_resolve_host_package_uses_first_owner(make_ros: Callable[..., FakeRosPack]) -> None:
    manifest = Path("/opt/ros/hydro/share/tf/package.xml")
    debian = FakeDebian(owners={manifest: ["ros-hydro-geometry", "ros-hydro-extras"]})
    resolver, _ = _resolver(make_ros(), debian)

    resolved = resolver.resolve_host_package(
        "tf", manifest_filename="package.xml", distribution="hydro"
    )

    assert resolved == "ros-hydro-geometry"


def test_resolve_host_package_for_legacy_stack(make_ros: Callable[..., FakeRosPack]) -> None:
    manifest = Path("/opt/ros/hydro/share/ros_comm/stack.xml")
    debian = FakeDebian(owners={manifest: ["ros-fuerte-ros-comm"]})
    resolver, _ = _resolver(make_ros(), debian)

    resolved = resolver.resolve_host_package(
        "ros_comm", manifest_filename="stack.xml", distribution="fuerte", stack=True
    )

    assert resolved == "ros-fuerte-ros-comm"


def test_resolve_host_package_caches_failures(make_ros: Callable[..., FakeRosPack]) -> None:
    ros = make_ros()
    resolver, _ = _resolver(ros)

    for _ in range(2):
        resolved = resolver.resolve_host_package(
            "missing", manifest_filename="package.xml", distribution="hydro"
        )
        assert resolved is None

    assert ros.rosdep_calls == ["missing"]
