"""Tests for rosmanifest.toml loading and saving."""

from pathlib import Path

import pytest

from rosmanifest.core.context import sample_project_config
from rosmanifest.core.project_config import (
    ProjectConfig,
    RosSettings,
    load_project_config,
    save_project_config,
)


def test_load_missing_file_returns_none(tmp_path: Path) -> None:
    assert load_project_config(tmp_path / "rosmanifest.toml") is None


def test_load_reads_project_and_ros_sections(tmp_path: Path) -> None:
    path = tmp_path / "rosmanifest.toml"
    path.write_text(
        """
[project]
name = "navigation"
version = "1.2.3"
summary = "Navigation components."
authors = "Ada Lovelace, Grace Hopper"
contact = "ada@example.com"
license = "BSD"
home = "https://example.com/navigation"

[ros]
distribution = "hydro"
package_path = ["/opt/ros/hydro/share"]
""",
        encoding="utf-8",
    )

    config = load_project_config(path)

    assert config is not None
    assert config.authors == ("Ada Lovelace", "Grace Hopper")
    assert config.maintainer == "Ada Lovelace"
    assert config.ros == RosSettings(
        distribution="hydro", path=None, package_path=(Path("/opt/ros/hydro/share"),)
    )


def test_load_without_name_fails(tmp_path: Path) -> None:
    path = tmp_path / "rosmanifest.toml"
    path.write_text('[project]\nversion = "1.0"\n', encoding="utf-8")

    with pytest.raises(ValueError, match="Missing 'name'"):
        load_project_config(path)


def test_save_then_load_preserves_config(tmp_path: Path) -> None:
    """Test that a saved config loads back unchanged."""
    path = tmp_path / "nested" / "rosmanifest.toml"
    config = ProjectConfig(
        name="navigation",
        version="1.2.3",
        summary="Navigation components.",
        authors=("Ada Lovelace",),
        contact="ada@example.com",
        license="BSD",
        home="https://example.com/navigation",
        ros=RosSettings(distribution="fuerte", path=Path("/opt/ros/fuerte")),
    )

    save_project_config(path, config)

    assert load_project_config(path) == config


def test_save_omits_empty_ros_section(tmp_path: Path) -> None:
    path = tmp_path / "rosmanifest.toml"

    save_project_config(path, sample_project_config())

    assert "[ros]" not in path.read_text(encoding="utf-8")


def test_version_triple_pads_missing_parts() -> None:
    config = sample_project_config()

    assert config.version_triple == ("1", "2", "3")
    assert ProjectConfig("x", "4", "", (), "", "", "").version_triple == ("4", "0", "0")
