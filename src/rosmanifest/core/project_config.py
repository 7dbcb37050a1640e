"""Project metadata loaded from ``rosmanifest.toml``."""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

import tomlkit

CONFIG_FILENAME = "rosmanifest.toml"


@dataclass(frozen=True)
class RosSettings:
    """Optional ``[ros]`` section; empty values defer to the environment."""

    distribution: str | None = None
    path: Path | None = None
    package_path: tuple[Path, ...] = ()


@dataclass(frozen=True)
class ProjectConfig:
    """In-memory representation of ``rosmanifest.toml``.

    The project metadata fills every manifest header: the summary becomes
    the description, the first author the maintainer.
    """

    name: str
    version: str
    summary: str
    authors: tuple[str, ...]
    contact: str
    license: str
    home: str
    ros: RosSettings = field(default_factory=RosSettings)

    @property
    def version_triple(self) -> tuple[str, str, str]:
        """Major, minor and patch parts, missing parts being ``0``."""
        parts = self.version.split(".") + ["0", "0", "0"]
        return parts[0] or "0", parts[1], parts[2]

    @property
    def maintainer(self) -> str:
        return self.authors[0] if self.authors else ""


def load_project_config(path: Path) -> ProjectConfig | None:
    """Load the project config if present.

    Example config:
      [project]
      name = "navigation"
      version = "1.2.3"
      summary = "Navigation components."
      authors = ["Ada Lovelace", "Grace Hopper"]
      contact = "ada@example.com"
      license = "BSD"
      home = "https://example.com/navigation"

      [ros]
      distribution = "hydro"

    Returns:
        ProjectConfig, or None if the file does not exist

    Raises:
        ValueError: If the project name is missing
    """
    if not path.exists():
        return None

    data = tomllib.loads(path.read_text(encoding="utf-8"))
    project = data.get("project", {})
    name = project.get("name")
    if not name:
        raise ValueError(f"Missing 'name' in [project] of {path}")

    authors = project.get("authors", [])
    if isinstance(authors, str):
        authors = [author.strip() for author in authors.split(",")]

    ros = data.get("ros", {})
    ros_path = ros.get("path")
    return ProjectConfig(
        name=str(name),
        version=str(project.get("version", "0.0.0")),
        summary=str(project.get("summary", "")),
        authors=tuple(str(author) for author in authors if author),
        contact=str(project.get("contact", "")),
        license=str(project.get("license", "")),
        home=str(project.get("home", "")),
        ros=RosSettings(
            distribution=str(ros["distribution"]) if ros.get("distribution") else None,
            path=Path(ros_path).expanduser() if ros_path else None,
            package_path=tuple(Path(p).expanduser() for p in ros.get("package_path", [])),
        ),
    )


def save_project_config(path: Path, config: ProjectConfig) -> None:
    """Save ProjectConfig as TOML.

    Uses tomlkit to preserve TOML formatting and comments.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    doc = tomlkit.document()

    project = tomlkit.table()
    project["name"] = config.name
    project["version"] = config.version
    project["summary"] = config.summary
    project["authors"] = list(config.authors)
    project["contact"] = config.contact
    project["license"] = config.license
    project["home"] = config.home
    doc["project"] = project

    if config.ros.distribution or config.ros.path or config.ros.package_path:
        ros = tomlkit.table()
        if config.ros.distribution:
            ros["distribution"] = config.ros.distribution
        if config.ros.path:
            ros["path"] = str(config.ros.path)
        if config.ros.package_path:
            ros["package_path"] = [str(p) for p in config.ros.package_path]
        doc["ros"] = ros

    path.write_text(tomlkit.dumps(doc), encoding="utf-8")
