"""User-facing status output with mode awareness."""

from abc import ABC, abstractmethod

from rosmanifest.cli.output import user_output


class UserFeedback(ABC):
    """Provides user-facing status output that's mode-aware.

    The resolver reports each declared unit ("ROS package: nav_core") and
    every optional dependency it had to skip. Callers never check a quiet
    flag themselves; they call ctx.feedback and the implementation decides.
    Errors are not feedback: they propagate as exceptions to the CLI.
    """

    @abstractmethod
    def info(self, message: str) -> None:
        """Show a status message (suppressed in quiet mode)."""


class InteractiveFeedback(UserFeedback):
    """Feedback shown in interactive mode."""

    def info(self, message: str) -> None:
        user_output(message)


class SuppressedFeedback(UserFeedback):
    """Feedback used with --quiet."""

    def info(self, message: str) -> None:
        pass


class FakeUserFeedback(UserFeedback):
    """Records messages instead of printing them, for test assertions."""

    def __init__(self) -> None:
        self._messages: list[tuple[str, str]] = []

    @property
    def messages(self) -> list[tuple[str, str]]:
        """All recorded ``(level, message)`` pairs in emission order."""
        return self._messages

    def of_level(self, level: str) -> list[str]:
        return [message for recorded, message in self._messages if recorded == level]

    def info(self, message: str) -> None:
        self._messages.append(("info", message))
