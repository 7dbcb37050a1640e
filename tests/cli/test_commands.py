"""Tests for the rosmanifest commands run through the click group."""

import json
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

from click.testing import CliRunner

from rosmanifest.cli.cli import cli
from rosmanifest.core.context import ResolverContext
from rosmanifest.core.project_config import load_project_config
from rosmanifest.core.ros.fake import FakeRosPack

UNITS_YAML = """
units:
  - name: nav_msgs
    build_depends: []
    run_depends: []
    messages: [Goal.msg]
  - name: nav_core
    build_depends: [nav_msgs, boost_system]
    run_depends: [nav_msgs, boost_system]
"""


def _context(tmp_path: Path, ros: FakeRosPack, units: str = UNITS_YAML) -> ResolverContext:
    (tmp_path / "units.yaml").write_text(units, encoding="utf-8")
    return ResolverContext.for_test(ros=ros, cwd=tmp_path)


def _packaged_ros(make_ros: Callable[..., FakeRosPack]) -> FakeRosPack:
    return make_ros(
        depends={"boost_system": [], "rosbash": [], "rosbuild": []},
        rosdep={
            "boost_system": "libboost-system-dev",
            "rosbash": "ros-hydro-rosbash",
            "rosbuild": "ros-hydro-rosbuild",
        },
    )


# init


def test_init_writes_project_config(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx = ResolverContext.for_test(cwd=tmp_path)

    result = runner.invoke(
        cli,
        ["init", "--name", "navigation", "--author", "Ada Lovelace", "--distribution", "hydro"],
        obj=ctx,
    )

    assert result.exit_code == 0, result.output
    assert "Created" in result.output
    config = load_project_config(tmp_path / "rosmanifest.toml")
    assert config is not None
    assert config.name == "navigation"
    assert config.version == "0.1.0"
    assert config.authors == ("Ada Lovelace",)
    assert config.ros.distribution == "hydro"


def test_init_refuses_to_overwrite(tmp_path: Path) -> None:
    runner = CliRunner()
    (tmp_path / "rosmanifest.toml").write_text('[project]\nname = "old"\n', encoding="utf-8")
    ctx = ResolverContext.for_test(cwd=tmp_path)

    result = runner.invoke(cli, ["init", "--name", "navigation"], obj=ctx)

    assert result.exit_code == 1
    assert "already exists. Use --force to overwrite." in result.output

    forced = runner.invoke(cli, ["init", "--name", "navigation", "--force"], obj=ctx)
    assert forced.exit_code == 0, forced.output


# generate


def test_generate_writes_manifests(tmp_path: Path, make_ros: Callable[..., FakeRosPack]) -> None:
    """Test that generate writes every manifest and lists the paths on stdout."""
    # Arrange
    runner = CliRunner()
    ctx = _context(tmp_path, make_ros())

    # Act
    result = runner.invoke(cli, ["generate", "units.yaml", "-o", "out"], obj=ctx)

    # Assert
    assert result.exit_code == 0, result.output
    package_xml = tmp_path / "out" / "ros" / "packages" / "nav_core" / "package.xml"
    assert package_xml.exists()
    assert "<build_depend>nav_msgs</build_depend>" in package_xml.read_text(encoding="utf-8")
    assert result.stdout.splitlines() == [
        str(tmp_path / "out" / "ros" / "packages" / "nav_msgs" / "package.xml"),
        str(package_xml),
    ]
    assert "Wrote 2 manifests" in result.output


def test_generate_without_project_config(
    tmp_path: Path, make_ros: Callable[..., FakeRosPack]
) -> None:
    runner = CliRunner()
    ctx = replace(_context(tmp_path, make_ros()), project=None)

    result = runner.invoke(cli, ["generate", "units.yaml"], obj=ctx)

    assert result.exit_code == 1
    assert "Run 'rosmanifest init' first." in result.output


def test_generate_missing_units_file(tmp_path: Path, make_ros: Callable[..., FakeRosPack]) -> None:
    runner = CliRunner()
    ctx = ResolverContext.for_test(ros=make_ros(), cwd=tmp_path)

    result = runner.invoke(cli, ["generate", "missing.yaml"], obj=ctx)

    assert result.exit_code == 1
    assert "Unit description not found" in result.output


def test_generate_reports_resolution_errors(
    tmp_path: Path, make_ros: Callable[..., FakeRosPack]
) -> None:
    runner = CliRunner()
    units = "units:\n  - name: nav_core\n  - name: nav_core\n"
    ctx = _context(tmp_path, make_ros(), units)

    result = runner.invoke(cli, ["generate", "units.yaml"], obj=ctx)

    assert result.exit_code == 1
    assert "Error: ROS unit nav_core multiply defined!" in result.output
    assert not (tmp_path / "build").exists()


def test_generate_reports_invalid_descriptions(
    tmp_path: Path, make_ros: Callable[..., FakeRosPack]
) -> None:
    runner = CliRunner()
    ctx = _context(tmp_path, make_ros(), "units:\n  - kind: library\n    name: nav_core\n")

    result = runner.invoke(cli, ["generate", "units.yaml"], obj=ctx)

    assert result.exit_code == 1
    assert "Error: " in result.output


def test_generate_reports_malformed_yaml(
    tmp_path: Path, make_ros: Callable[..., FakeRosPack]
) -> None:
    runner = CliRunner()
    ctx = _context(tmp_path, make_ros(), "units: [\n  - name: nav_core\n")

    result = runner.invoke(cli, ["generate", "units.yaml"], obj=ctx)

    assert result.exit_code == 1
    assert "Error: Cannot parse unit description units.yaml" in result.output


# deps


def test_deps_json(tmp_path: Path, make_ros: Callable[..., FakeRosPack]) -> None:
    runner = CliRunner()
    ctx = _context(tmp_path, make_ros())

    result = runner.invoke(cli, ["deps", "units.yaml", "nav_core", "--json"], obj=ctx)

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["name"] == "nav_core"
    assert data["kind"] == "package"
    assert data["manifest"] == "package.xml"
    assert data["internal_build_deps"] == ["nav_msgs"]
    assert data["external_build_deps"] == ["boost_system"]
    assert data["link_libraries"] == ["boost_system"]
    assert data["include_dirs"][0] == "ros/packages/nav_msgs/msg_gen/cpp/include"


def test_deps_table(tmp_path: Path, make_ros: Callable[..., FakeRosPack]) -> None:
    runner = CliRunner()
    ctx = _context(tmp_path, make_ros())

    result = runner.invoke(cli, ["deps", "units.yaml", "nav_core"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "external_run_deps" in result.output
    assert "boost_system" in result.output
    assert result.stdout == ""


def test_deps_of_undeclared_unit(tmp_path: Path, make_ros: Callable[..., FakeRosPack]) -> None:
    runner = CliRunner()
    ctx = _context(tmp_path, make_ros())

    result = runner.invoke(cli, ["deps", "units.yaml", "tf"], obj=ctx)

    assert result.exit_code == 1
    assert "Unit tf is not declared in units.yaml" in result.output


# targets


def test_targets_json(tmp_path: Path, make_ros: Callable[..., FakeRosPack]) -> None:
    runner = CliRunner()
    ctx = _context(tmp_path, make_ros())

    result = runner.invoke(cli, ["targets", "units.yaml", "--json"], obj=ctx)

    assert result.exit_code == 0, result.output
    targets = json.loads(result.stdout)["targets"]
    assert [target["name"] for target in targets] == [
        "nav_msgs_ros_package_manifest",
        "nav_core_ros_package_manifest",
        "nav_msgs_ros_messages",
        "ros_manifests",
    ]
    assert targets[2]["kind"] == "messages"


def test_targets_json_error(tmp_path: Path, make_ros: Callable[..., FakeRosPack]) -> None:
    """Test that resolution failures become a JSON error object in JSON mode."""
    runner = CliRunner()
    units = "units:\n  - name: nav_core\n    build_depends: [missing]\n    run_depends: []\n"
    ctx = _context(tmp_path, make_ros(), units)

    result = runner.invoke(cli, ["targets", "units.yaml", "--json"], obj=ctx)

    assert result.exit_code == 1
    data = json.loads(result.stdout)
    assert data["error_type"] == "ExternalDependencyNotFoundError"
    assert data["error"] == "ROS package missing required by nav_core not found."
    assert data["exit_code"] == 1


def test_targets_json_reports_malformed_toml(
    tmp_path: Path, make_ros: Callable[..., FakeRosPack]
) -> None:
    runner = CliRunner()
    (tmp_path / "units.toml").write_text("[[units]]\nname = \n", encoding="utf-8")
    ctx = ResolverContext.for_test(ros=make_ros(), cwd=tmp_path)

    result = runner.invoke(cli, ["targets", "units.toml", "--json"], obj=ctx)

    assert result.exit_code == 1
    data = json.loads(result.stdout)
    assert data["error_type"] == "UnitFileError"
    assert data["error"].startswith("Cannot parse unit description units.toml: ")


# pack


def test_pack_json(tmp_path: Path, make_ros: Callable[..., FakeRosPack]) -> None:
    runner = CliRunner()
    ctx = _context(tmp_path, _packaged_ros(make_ros))

    result = runner.invoke(
        cli,
        ["pack", "units.yaml", "--default", "nav_core", "--conflicts", "old-nav"]
        + ["--source", "--json"],
        obj=ctx,
    )

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    nav_msgs, nav_core = data["packages"]
    assert nav_msgs["name"] == "ros-hydro-nav-msgs"
    assert nav_core["depends"] == ["ros-hydro-nav-msgs", "libboost-system-dev"]
    assert nav_core["conflicts"] == ["old-nav"]
    assert data["install_order"] == ["ros-hydro-nav-msgs", "ros-hydro-nav-core"]
    assert data["source"]["build_depends"] == [
        "ros-hydro-rosbash",
        "ros-hydro-rosbuild",
        "libboost-system-dev",
    ]


def test_pack_table(tmp_path: Path, make_ros: Callable[..., FakeRosPack]) -> None:
    runner = CliRunner()
    ctx = _context(tmp_path, _packaged_ros(make_ros))

    result = runner.invoke(cli, ["pack", "units.yaml", "--source"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "ros-hydro-nav-core_1.2.3_amd64.deb" in result.output
    build_depends = "ros-hydro-rosbash, ros-hydro-rosbuild, libboost-system-dev"
    assert f"Build-Depends: {build_depends}" in result.output
