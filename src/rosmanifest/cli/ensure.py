"""CLI error handling utilities with styled output.

This module provides the Ensure class for asserting invariants in CLI commands
with consistent, user-friendly error messages, and the boundary that turns
resolution failures into the same styled output. All errors use a red
"Error:" prefix for visual consistency.
"""

from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import Any, NoReturn, TypeVar

import click
from pydantic import ValidationError

from rosmanifest.cli.output import emit_json, user_output
from rosmanifest.core.errors import ResolutionError

T = TypeVar("T")


def _fail(error_message: str) -> NoReturn:
    user_output(click.style("Error: ", fg="red") + error_message)
    raise SystemExit(1)


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def invariant(condition: bool, error_message: str) -> None:
        """Ensure condition is true, otherwise output styled error and exit.

        Args:
            condition: Boolean condition to check
            error_message: Error message to display if condition is false.
                          "Error: " prefix will be added automatically in red.

        Raises:
            SystemExit: If condition is false (with exit code 1)
        """
        if not condition:
            _fail(error_message)

    @staticmethod
    def not_none(value: T | None, error_message: str) -> T:
        """Ensure value is not None, otherwise output styled error and exit.

        This method provides type narrowing: it takes `T | None` and returns `T`.

        Raises:
            SystemExit: If value is None (with exit code 1)
        """
        if value is None:
            _fail(error_message)
        return value

    @staticmethod
    def path_is_file(path: Path, error_message: str | None = None) -> None:
        """Ensure path is an existing file, otherwise output styled error and exit."""
        if not path.is_file():
            _fail(error_message or f"File not found: {path}")


def resolution_error_boundary(func: Callable) -> Callable:
    """Decorator reporting resolution and validation failures of a command.

    Inspects function kwargs for an ``as_json`` flag. In JSON mode the error
    is emitted as a JSON object on stdout, otherwise as a styled message on
    stderr. Either way the command exits with status 1.

    Example:
        @click.command()
        @click.option("--json", "as_json", is_flag=True)
        @resolution_error_boundary
        def my_command(as_json: bool) -> None:
            ...
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (ResolutionError, ValidationError) as e:
            if kwargs.get("as_json", False):
                emit_json({"error": str(e), "error_type": type(e).__name__, "exit_code": 1})
                raise SystemExit(1) from e
            _fail(str(e))

    return wrapper
