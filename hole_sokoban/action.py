"""Reversible player actions.

Each action mutates a :class:`~hole_sokoban.level.Level` all-or-nothing and,
on success, returns the reciprocal action that restores the previous state.
Failed actions return ``None`` and leave the level untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

from .objects import Crate, Direction, Position, offset
from .tilemap import Tile

if TYPE_CHECKING:  # pragma: no cover - import only used for annotations
    from .level import Level


def _claims_hole(level: "Level", moving: Crate, position: Position) -> bool:
    """Whether ``moving`` drops into ``position`` once it arrives there.

    The first crate to arrive in an empty hole claims it; later crates stack
    on top without the flag.
    """

    if level.tilemap.get_tile(position) is not Tile.HOLE:
        return False
    return not any(
        crate is not moving and crate.in_hole and crate.position == position
        for crate in level.crates
    )


@dataclass(frozen=True)
class Push:
    """Step in ``direction``, pushing the crate ahead of the player if any.

    The player ends up facing ``look_direction``.
    """

    direction: Direction
    look_direction: Direction

    def apply(self, level: "Level") -> Optional["Action"]:
        player = level.player
        previous_look = player.direction
        target = offset(player.position, self.direction)

        if not level.is_cell_walkable(target):
            return None

        leading = level.crate_at(target, in_hole=False)
        if leading is None:
            player.set_transform(target, self.look_direction)
            return Push(self.direction.inverse(), previous_look)

        crate_target = offset(target, self.direction)
        if level.is_cell_obstructed(crate_target):
            return None

        drops_in = _claims_hole(level, leading, crate_target)
        player.set_transform(target, self.look_direction)
        leading.position = crate_target
        if drops_in:
            leading.in_hole = True
        return Pull(self.direction.inverse(), previous_look)


@dataclass(frozen=True)
class Pull:
    """Step in ``direction``, dragging the crate behind the player along.

    Crates can be pulled out of holes.  When no crate stands behind the
    player this is a plain step.
    """

    direction: Direction
    look_direction: Direction

    def apply(self, level: "Level") -> Optional["Action"]:
        player = level.player
        previous_look = player.direction
        origin = player.position
        source = offset(origin, self.direction, -1)
        target = offset(origin, self.direction)

        if not level.is_cell_walkable(target):
            return None

        # The crate on top of a stack is the one dragged; a crate resting in
        # a hole only comes out when nothing sits above it.
        dragged = level.crate_at(source, in_hole=False)
        if dragged is None:
            dragged = level.crate_at(source)

        if dragged is None:
            player.set_transform(target, self.look_direction)
            return Push(self.direction.inverse(), previous_look)

        if level.is_cell_obstructed(origin):
            return None

        drops_in = _claims_hole(level, dragged, origin)
        player.set_transform(target, self.look_direction)
        dragged.position = origin
        dragged.in_hole = drops_in
        return Push(self.direction.inverse(), previous_look)


Action = Union[Push, Pull]
