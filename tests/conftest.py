"""Shared fixtures: a fake ROS installation holding the default dependencies."""

from collections.abc import Callable
from pathlib import Path

import pytest

from rosmanifest.core.context import ResolverContext
from rosmanifest.core.debian.fake import FakeDebian
from rosmanifest.core.ros.abc import CompileFlags
from rosmanifest.core.ros.fake import FakeRosPack
from rosmanifest.core.user_feedback import FakeUserFeedback

ROS_SHARE = Path("/opt/ros/hydro/share")

INSTALLED_PACKAGES = (
    "roscpp",
    "rospy",
    "std_msgs",
    "boost_system",
    "rosbash",
    "rosbuild",
    "dynamic_reconfigure",
    "costmap_2d",
    "tf",
)


def installed_ros(**overrides: object) -> FakeRosPack:
    """FakeRosPack knowing the packages and stacks declarations default to.

    Keyword arguments replace the corresponding constructor tables.
    """
    tables: dict[str, object] = {
        "packages": {name: ROS_SHARE / name for name in INSTALLED_PACKAGES},
        "stacks": {"ros": ROS_SHARE / "ros", "ros_comm": ROS_SHARE / "ros_comm"},
        "stack_contents": {"ros": ["rosbash", "rosbuild"], "ros_comm": ["roscpp", "rospy"]},
        "flags": {
            "roscpp": CompileFlags(
                include_dirs=["/opt/ros/hydro/include"],
                libraries=["roscpp"],
                library_dirs=["/opt/ros/hydro/lib"],
            ),
            "boost_system": CompileFlags(libraries=["boost_system"]),
        },
        "rosdep": {"boost_system": "libboost-system-dev"},
    }
    tables.update(overrides)
    return FakeRosPack(**tables)  # type: ignore[arg-type]


@pytest.fixture
def feedback() -> FakeUserFeedback:
    return FakeUserFeedback()


@pytest.fixture
def modern_ctx(feedback: FakeUserFeedback) -> ResolverContext:
    """Context for the hydro distribution with the default dependencies installed."""
    return ResolverContext.for_test(
        distribution="hydro", ros=installed_ros(), debian=FakeDebian(), feedback=feedback
    )


@pytest.fixture
def legacy_ctx(feedback: FakeUserFeedback) -> ResolverContext:
    """Context for the fuerte distribution with the default dependencies installed."""
    return ResolverContext.for_test(
        distribution="fuerte", ros=installed_ros(), debian=FakeDebian(), feedback=feedback
    )


@pytest.fixture
def make_ros() -> Callable[..., FakeRosPack]:
    """Factory building installed_ros() with replaced lookup tables."""
    return installed_ros
