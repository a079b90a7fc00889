"""Collected warnings and errors with their highest severity."""

from __future__ import annotations

import enum


class Level(enum.IntEnum):
    """Severity of a diagnostic, ordered from least to most severe."""

    DEBUG = 0
    WARNING = 1
    ERROR = 2
    FATAL = 3

    def __str__(self) -> str:
        return self.name.capitalize()


def diagnostic_format(level: Level, message: str) -> str:
    """Prefix a message with the name of its level."""
    return f"{Level(level)}: {message}"


class Diagnostics:
    """A list of messages together with the highest level seen."""

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._level = Level.DEBUG

    def add(self, level: Level, message: str) -> None:
        self._lines.append(message)
        self._level = max(self._level, Level(level))

    def fill(self, other: Diagnostics) -> None:
        """Take over all messages and the level of another collection."""
        self._lines.extend(other._lines)
        self._level = max(self._level, other._level)

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    @property
    def level(self) -> Level:
        return self._level

    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self):
        return iter(self._lines)

    def __str__(self) -> str:
        return f"Found {len(self._lines)} problems"

    def __repr__(self) -> str:
        return repr(self._lines)