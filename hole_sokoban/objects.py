"""Dynamic objects owned by a level: crates, goals and the player."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


Position = Tuple[int, int]

# A goal whose accepted style is ANY_STYLE is satisfied by every crate.
ANY_STYLE: Optional[int] = None


class Direction(Enum):
    """Cardinal movement directions; y grows downward."""

    NORTH = (0, -1)
    SOUTH = (0, 1)
    WEST = (-1, 0)
    EAST = (1, 0)

    @property
    def vector(self) -> Tuple[int, int]:
        return self.value

    def inverse(self) -> "Direction":
        mapping = {
            Direction.NORTH: Direction.SOUTH,
            Direction.SOUTH: Direction.NORTH,
            Direction.WEST: Direction.EAST,
            Direction.EAST: Direction.WEST,
        }
        return mapping[self]


def offset(position: Position, direction: Direction, steps: int = 1) -> Position:
    dx, dy = direction.vector
    return position[0] + dx * steps, position[1] + dy * steps


def validate_style(value: object) -> int:
    """Return ``value`` as a crate style, rejecting zero and non-integers."""

    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Crate style must be an integer, got {value!r}")
    if value <= 0:
        raise ValueError(f"Crate style must be positive, got {value}")
    return value


@dataclass
class Crate:
    """A crate the player can move around.

    ``positioned`` and ``opaque`` are derived flags refreshed by
    :meth:`hole_sokoban.level.Level.update`.
    """

    position: Position
    style: int
    in_hole: bool = False
    positioned: bool = False
    opaque: bool = True

    def __post_init__(self) -> None:
        self.position = tuple(self.position)
        self.style = validate_style(self.style)


@dataclass
class Goal:
    """Cell where a crate of an accepted style should end up."""

    position: Position
    accepted_style: Optional[int] = ANY_STYLE
    done: bool = False

    def __post_init__(self) -> None:
        self.position = tuple(self.position)
        if self.accepted_style is not ANY_STYLE:
            self.accepted_style = validate_style(self.accepted_style)

    def accepts(self, style: int) -> bool:
        return self.accepted_style is ANY_STYLE or self.accepted_style == style


@dataclass
class Player:
    position: Position
    direction: Direction = Direction.SOUTH

    def __post_init__(self) -> None:
        self.position = tuple(self.position)

    def set_transform(self, position: Position, direction: Direction) -> None:
        self.position = tuple(position)
        self.direction = direction
