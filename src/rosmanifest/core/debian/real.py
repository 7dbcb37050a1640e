"""Production Debian implementation using dpkg."""

from pathlib import Path

from rosmanifest.core.debian.abc import Debian
from rosmanifest.core.subprocess import run_optional, run_subprocess_with_context


def parse_dpkg_search(output: str) -> list[str]:
    """Parse ``dpkg -S`` output into package names.

    Each line has the form ``pkg1, pkg2: /path``; architecture qualifiers
    such as ``:amd64`` are dropped.
    """
    packages: list[str] = []
    for line in output.splitlines():
        owners, separator, _ = line.partition(": ")
        if not separator:
            continue
        for owner in owners.split(","):
            name = owner.strip().split(":")[0]
            if name and name not in packages:
                packages.append(name)
    return packages


class RealDebian(Debian):
    """Production implementation querying dpkg."""

    def search_packages(self, path: Path) -> list[str]:
        output = run_optional(["dpkg", "-S", str(path)])
        if output is None:
            return []
        return parse_dpkg_search(output)

    def architecture(self) -> str:
        result = run_subprocess_with_context(
            ["dpkg", "--print-architecture"],
            operation_context="determine the Debian architecture",
        )
        return result.stdout.strip()
