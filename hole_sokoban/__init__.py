"""Hole sokoban puzzle core."""

from .action import Pull, Push
from .cues import NullCues, SoundCues
from .errors import InconsistentStateError, LevelLoadError
from .level import Level
from .loader import LevelDescription, LevelLoader
from .objects import ANY_STYLE, Crate, Direction, Goal, Player
from .session import Command, PlaySession
from .tilemap import Tile, Tilemap

__all__ = [
    "ANY_STYLE",
    "Command",
    "Crate",
    "Direction",
    "Goal",
    "InconsistentStateError",
    "Level",
    "LevelDescription",
    "LevelLoadError",
    "LevelLoader",
    "NullCues",
    "PlaySession",
    "Player",
    "Pull",
    "Push",
    "SoundCues",
    "Tile",
    "Tilemap",
]
