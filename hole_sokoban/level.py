"""Level state machine: moves, undo history, derived flags and win state."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .action import Action, Push
from .cues import NullCues
from .errors import InconsistentStateError
from .loader import LevelDescription
from .objects import Crate, Direction, Goal, Player, Position
from .tilemap import Tile, Tilemap

logger = logging.getLogger(__name__)


class Level:
    """A playable level.

    The level owns its tilemap, crates, goals, player and undo history.
    Presentation code reads state through the public attributes and
    :meth:`snapshot`; it never mutates them directly.
    """

    def __init__(
        self,
        tilemap: Tilemap,
        crates: Iterable[Crate],
        goals: Iterable[Goal],
        player: Player,
        *,
        name: str = "",
        background_color: Tuple[int, int, int] = (0, 0, 0),
        tile_size: Tuple[int, int] = (1, 1),
        cues: Optional[NullCues] = None,
    ) -> None:
        self.tilemap = tilemap
        self.crates: List[Crate] = list(crates)
        self.goals: List[Goal] = list(goals)
        self.player = player
        self.name = name
        self.background_color = background_color
        self.tile_size = tile_size
        self.cues = cues or NullCues()
        self.undo_history: List[Action] = []
        self.update()

    @classmethod
    def from_description(
        cls, description: LevelDescription, cues: Optional[NullCues] = None
    ) -> "Level":
        """Build a fresh level in its spawn state."""

        return cls(
            description.tilemap,
            [Crate(position=spawn.position, style=spawn.style) for spawn in description.crates],
            [
                Goal(position=spawn.position, accepted_style=spawn.accepted_style)
                for spawn in description.goals
            ],
            Player(position=description.player_spawn),
            name=description.name,
            background_color=description.background_color,
            tile_size=description.tile_size,
            cues=cues,
        )

    # ------------------------------------------------------------------
    # Queries
    @property
    def action_count(self) -> int:
        return len(self.undo_history)

    def is_won(self) -> bool:
        return all(goal.done for goal in self.goals)

    def crate_at(self, position: Position, in_hole: Optional[bool] = None) -> Optional[Crate]:
        """Return the first crate at ``position``, optionally filtered by hole state."""

        for crate in self.crates:
            if crate.position != position:
                continue
            if in_hole is None or crate.in_hole == in_hole:
                return crate
        return None

    def is_cell_obstructed(self, position: Position) -> bool:
        """True if a solid tile or a crate outside a hole occupies ``position``.

        Cells outside the map are always obstructed.
        """

        tile = self.tilemap.get_tile(position)
        if tile is None or tile is Tile.SOLID:
            return True
        return self.crate_at(position, in_hole=False) is not None

    def is_cell_walkable(self, position: Position) -> bool:
        """Whether the player may stand on ``position``, ignoring movable crates.

        Holes only become walkable once a crate has dropped into them.
        """

        tile = self.tilemap.get_tile(position)
        if tile is Tile.FLOOR:
            return True
        if tile is Tile.HOLE:
            return self.crate_at(position, in_hole=True) is not None
        return False

    # ------------------------------------------------------------------
    # Commands
    def move_player(self, direction: Direction) -> bool:
        """Move the player one cell, pushing a crate if one is ahead."""

        undo = Push(direction, direction).apply(self)
        if undo is None:
            logger.debug("Move %s blocked at %s", direction.name, self.player.position)
            return False
        self.undo_history.append(undo)
        logger.debug("Moved %s to %s", direction.name, self.player.position)
        self.cues.on_move()
        return True

    def undo(self) -> bool:
        """Revert the last successful move; a no-op on an empty history."""

        if not self.undo_history:
            return False
        action = self.undo_history.pop()
        if action.apply(self) is None:
            raise InconsistentStateError(f"Could not undo {action!r} in level {self.name!r}")
        logger.debug("Undid move, player back at %s", self.player.position)
        self.cues.on_undo()
        return True

    def update(self) -> None:
        """Recompute derived crate and goal flags.  Call every tick."""

        self._update_crate_opacity()
        self._update_goals()

    def _covered_crates(self) -> List[int]:
        covered: List[int] = []
        for index, crate in enumerate(self.crates):
            if not crate.in_hole:
                continue
            for other_index, other in enumerate(self.crates):
                if other_index != index and other.position == crate.position:
                    covered.append(index)
                    break
        return covered

    def _update_crate_opacity(self) -> None:
        # A crate resting in a hole turns translucent while another crate
        # sits on top of it.  Indices first, flags second.
        covered = self._covered_crates()
        for crate in self.crates:
            crate.opaque = True
        for index in covered:
            self.crates[index].opaque = False

    def _update_goals(self) -> None:
        for goal in self.goals:
            goal.done = False
        for crate in self.crates:
            crate.positioned = False
        for goal in self.goals:
            for crate in self.crates:
                if crate.position == goal.position and not crate.in_hole and goal.accepts(crate.style):
                    goal.done = True
                    crate.positioned = True
                    break

    # ------------------------------------------------------------------
    # Presentation helpers
    def snapshot(self) -> Dict[str, object]:
        """Return a JSON friendly view of the current state."""

        return {
            "name": self.name,
            "size": list(self.tilemap.size),
            "player": {
                "position": list(self.player.position),
                "direction": self.player.direction.name,
            },
            "crates": [
                {
                    "position": list(crate.position),
                    "style": crate.style,
                    "in_hole": crate.in_hole,
                    "positioned": crate.positioned,
                    "opaque": crate.opaque,
                }
                for crate in self.crates
            ],
            "goals": [
                {
                    "position": list(goal.position),
                    "accepts": goal.accepted_style,
                    "done": goal.done,
                }
                for goal in self.goals
            ],
            "won": self.is_won(),
            "moves": self.action_count,
        }
