"""Play session: the current level, restarts and progression."""

from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional, Sequence, Set

from .cues import NullCues
from .level import Level
from .loader import LevelDescription
from .objects import Direction

logger = logging.getLogger(__name__)


class Command(Enum):
    """Commands a presentation layer can send to a session."""

    MOVE_NORTH = "move_north"
    MOVE_SOUTH = "move_south"
    MOVE_WEST = "move_west"
    MOVE_EAST = "move_east"
    UNDO = "undo"
    RESTART = "restart"

    @property
    def direction(self) -> Optional[Direction]:
        mapping = {
            Command.MOVE_NORTH: Direction.NORTH,
            Command.MOVE_SOUTH: Direction.SOUTH,
            Command.MOVE_WEST: Direction.WEST,
            Command.MOVE_EAST: Direction.EAST,
        }
        return mapping.get(self)

    @staticmethod
    def move(direction: Direction) -> "Command":
        return Command[f"MOVE_{direction.name}"]


class PlaySession:
    """Drive a sequence of levels.

    Restarting rebuilds the level from its description, which is the only
    way back to the spawn state.
    """

    def __init__(
        self,
        descriptions: Sequence[LevelDescription],
        *,
        cues: Optional[NullCues] = None,
        start: int = 0,
    ) -> None:
        if not descriptions:
            raise ValueError("A session needs at least one level.")
        if not 0 <= start < len(descriptions):
            raise IndexError(f"Level index out of range: {start}")
        self.descriptions: List[LevelDescription] = list(descriptions)
        self.cues = cues or NullCues()
        self.index = start
        self.completed: Set[str] = set()
        self.finished = False
        self.level = self._build()

    @property
    def description(self) -> LevelDescription:
        return self.descriptions[self.index]

    @property
    def is_last_level(self) -> bool:
        return self.index + 1 >= len(self.descriptions)

    def _build(self) -> Level:
        return Level.from_description(self.description, cues=self.cues)

    def restart(self) -> None:
        logger.info("Restarting level %s", self.description.name)
        self.level = self._build()

    def advance(self) -> bool:
        """Go to the next level once the current one is won.

        Returns ``False`` when the level is not won yet or when there is no
        next level; in the latter case the session is marked finished.
        """

        if not self.level.is_won():
            return False
        self.completed.add(self.description.name)
        logger.info(
            "Completed level %s in %d moves", self.description.name, self.level.action_count
        )
        if self.is_last_level:
            self.finished = True
            return False
        self.index += 1
        self.level = self._build()
        return True

    def handle(self, command: Command) -> bool:
        """Apply ``command``; returns whether anything changed."""

        if self.finished:
            return False
        if self.level.is_won():
            # Any command after a win moves on to the next level.
            return self.advance()
        if command is Command.RESTART:
            self.restart()
            return True
        if command is Command.UNDO:
            changed = self.level.undo()
        else:
            changed = self.level.move_player(command.direction)
        self.level.update()
        return changed
