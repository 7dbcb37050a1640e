"""Output utilities for CLI commands with clear intent.

Human-facing messages go to stderr, machine-readable data to stdout.
"""

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import click


def user_output(message: str = "", nl: bool = True) -> None:
    """Write a message intended for the user (stderr)."""
    click.echo(message, err=True, nl=nl)


def machine_output(message: str = "", nl: bool = True) -> None:
    """Write machine-readable data (stdout)."""
    click.echo(message, nl=nl)


def _serialize_for_json(obj: Any) -> Any:
    """Recursively serialize special types for JSON.

    Handles Path, Enum and dataclass instances that appear in plain dict
    structures.
    """
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, Enum):
        return obj.value
    if is_dataclass(obj) and not isinstance(obj, type):
        return _serialize_for_json(asdict(obj))
    if isinstance(obj, dict):
        return {key: _serialize_for_json(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_serialize_for_json(item) for item in obj]
    return obj


def emit_json(data: dict[str, Any]) -> None:
    """Output JSON data to stdout for machine consumption.

    Routes JSON through machine_output() to keep data on stdout and human
    messages on stderr.

    Args:
        data: Dictionary to serialize as JSON
    """
    machine_output(json.dumps(_serialize_for_json(data), indent=2))
