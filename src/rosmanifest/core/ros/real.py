"""Production RosPack implementation using subprocess calls."""

import logging
import os
import re
from pathlib import Path

from rosmanifest.core.ros.abc import CompileFlags, RosPack
from rosmanifest.core.subprocess import run_optional

logger = logging.getLogger(__name__)

_APT_SECTION = re.compile(r"#apt\n([^\n]*)")
_FLAG_PREFIXES = ("-I", "-l", "-L")


def _split_words(output: str | None, prefix: str | None = None) -> list[str]:
    """Split tool output on whitespace, dropping a leading flag prefix."""
    if not output:
        return []
    words = output.split()
    if prefix is None:
        return words
    return [word[len(prefix) :] if word.startswith(prefix) else word for word in words]


def parse_rosdep_output(output: str) -> str | None:
    """Extract the Debian package from `rosdep resolve` output."""
    match = _APT_SECTION.search(output)
    if match:
        return match.group(1).strip() or None
    for line in output.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            return line.split()[0]
    return None


class RealRosPack(RosPack):
    """Production implementation running the ROS command line tools.

    Commands run inside the distribution's ``env.sh`` when it exists, with
    ``ROS_PACKAGE_PATH`` and ``PKG_CONFIG_PATH`` pointing into the
    distribution.
    """

    def __init__(self, ros_path: Path, package_path: list[Path]) -> None:
        self._ros_path = ros_path
        self._package_path = package_path

    def _env(self) -> dict[str, str]:
        env = dict(os.environ)
        env["ROS_PACKAGE_PATH"] = ":".join(str(path) for path in self._package_path)
        pkg_config_dir = str(self._ros_path / "lib" / "pkgconfig")
        env["PKG_CONFIG_PATH"] = pkg_config_dir
        env["PKG_CONFIG_LIBDIR"] = pkg_config_dir
        return env

    def _tool(self, name: str) -> str:
        candidate = self._ros_path / "bin" / name
        if candidate.exists():
            return str(candidate)
        return name

    def _run(self, *args: str) -> str | None:
        env_sh = self._ros_path / "env.sh"
        cmd = [str(env_sh), *args] if env_sh.exists() else list(args)
        logger.debug("Running ROS lookup: %s", " ".join(cmd))
        return run_optional(cmd, env=self._env())

    def find_package(self, name: str) -> Path | None:
        output = self._run(self._tool("rospack"), "find", name)
        if not output:
            return None
        return Path(output)

    def find_stack(self, name: str) -> Path | None:
        output = self._run(self._tool("rosstack"), "find", name)
        if not output:
            return None
        return Path(output)

    def stack_contents(self, name: str) -> list[str]:
        return _split_words(self._run(self._tool("rosstack"), "contents", name))

    def package_flags(self, name: str) -> CompileFlags | None:
        rospack = self._tool("rospack")
        include_dirs = self._run(rospack, "cflags-only-I", name)
        if include_dirs is None:
            return None
        return CompileFlags(
            include_dirs=_split_words(include_dirs, "-I"),
            libraries=_split_words(self._run(rospack, "libs-only-l", name), "-l"),
            library_dirs=_split_words(self._run(rospack, "libs-only-L", name), "-L"),
            link_flags=_split_words(self._run(rospack, "libs-only-other", name)),
        )

    def pkg_config_flags(self, name: str) -> CompileFlags | None:
        if run_optional(["pkg-config", "--exists", name], env=self._env()) is None:
            return None
        env = self._env()
        return CompileFlags(
            include_dirs=_split_words(
                run_optional(["pkg-config", "--cflags-only-I", name], env=env), "-I"
            ),
            libraries=_split_words(
                run_optional(["pkg-config", "--libs-only-l", name], env=env), "-l"
            ),
            library_dirs=_split_words(
                run_optional(["pkg-config", "--libs-only-L", name], env=env), "-L"
            ),
            link_flags=[
                word
                for word in _split_words(
                    run_optional(["pkg-config", "--libs-only-other", name], env=env)
                )
                if not word.startswith(_FLAG_PREFIXES)
            ],
        )

    def resolve_rosdep(self, name: str) -> str | None:
        output = run_optional(["rosdep", "resolve", name], env=self._env())
        if output is None:
            return None
        return parse_rosdep_output(output)

    def implicit_depends(self, name: str) -> list[str] | None:
        output = self._run(self._tool("rospack"), "depends", name)
        if output is None:
            return None
        return _split_words(output)
