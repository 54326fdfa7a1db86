"""Exceptions raised while loading or simulating levels."""

from __future__ import annotations

from typing import Optional


class LevelLoadError(ValueError):
    """A level description could not be turned into a playable level."""

    default_message = "Invalid level data."

    def __init__(self, message: Optional[str] = None, *, source: Optional[str] = None):
        self.source = source
        text = message or self.default_message
        if source:
            text = f"{source}: {text}"
        super().__init__(text)


class NoPlayerSpawnError(LevelLoadError):
    default_message = (
        "No player spawn: There must be a single player spawn object per level map."
    )


class NoGoalsOrCratesError(LevelLoadError):
    default_message = (
        "No goals or crates: There must be at least one goal and one crate per level."
    )


class NotFiniteError(LevelLoadError):
    default_message = (
        "Map not finite: The level's map must be set to finite in its properties."
    )


class InvalidDimensionsError(LevelLoadError):
    default_message = "Invalid dimensions: A level must have a positive width and height."


class InvalidLayersError(LevelLoadError):
    default_message = (
        'Invalid layers: A level must have at least two tile layers, one named "building" '
        'and another named "floor", each covering the whole map.'
    )


class InvalidObjectGroupsError(LevelLoadError):
    default_message = (
        "Invalid object groups: There should be a single object group holding the "
        "level objects."
    )


class InvalidColorError(LevelLoadError):
    def __init__(self, value: object, *, source: Optional[str] = None):
        self.value = value
        super().__init__(f"Invalid colour: {value!r}", source=source)


class InvalidLevelDataError(LevelLoadError):
    """The level file is not valid JSON or holds values of the wrong type."""

    default_message = "Invalid level data: The level file could not be decoded."


class InvalidObjectError(LevelLoadError):
    """A map object is not a spawn, crate or goal, or has bad properties."""

    def __init__(self, obj: object, reason: str = "", *, source: Optional[str] = None):
        self.obj = obj
        message = f"Invalid object: {obj!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, source=source)


class InconsistentStateError(RuntimeError):
    """Raised when the undo history cannot be replayed.

    This signals a bug in the simulation rather than a user error.
    """
