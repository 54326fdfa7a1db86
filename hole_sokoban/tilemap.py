"""Static tile classification for a level."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Sequence, Tuple


class Tile(Enum):
    """Classification of a single building cell."""

    SOLID = "solid"
    HOLE = "hole"
    FLOOR = "floor"

    @staticmethod
    def from_type_name(name: Optional[str]) -> "Tile":
        # Tiles without a declared type, or with one we don't simulate, are plain floor.
        if name == "solid":
            return Tile.SOLID
        if name == "hole":
            return Tile.HOLE
        return Tile.FLOOR


@dataclass(frozen=True)
class Tilemap:
    """Immutable row-major grid of tiles."""

    width: int
    height: int
    tiles: Tuple[Tile, ...]

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid tilemap size: {self.width}x{self.height}")
        if len(self.tiles) != self.width * self.height:
            raise ValueError(
                f"Expected {self.width * self.height} tiles, got {len(self.tiles)}"
            )

    @classmethod
    def from_layer(
        cls,
        width: int,
        height: int,
        gids: Sequence[int],
        tile_types: Mapping[int, Optional[str]],
    ) -> "Tilemap":
        """Build a tilemap from a building layer.

        ``gids`` holds one global tile id per cell (0 meaning no tile) and
        ``tile_types`` resolves a gid to the type declared in its tileset.
        """

        tiles = tuple(
            Tile.from_type_name(tile_types.get(gid)) if gid else Tile.FLOOR
            for gid in gids
        )
        return cls(width=width, height=height, tiles=tiles)

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def inside(self, position: Tuple[int, int]) -> bool:
        x, y = position
        return 0 <= x < self.width and 0 <= y < self.height

    def get_tile(self, position: Tuple[int, int]) -> Optional[Tile]:
        if not self.inside(position):
            return None
        x, y = position
        return self.tiles[x + y * self.width]

    def positions(self, tile: Tile) -> Tuple[Tuple[int, int], ...]:
        """Return every cell holding ``tile`` in row-major order."""

        return tuple(
            (index % self.width, index // self.width)
            for index, current in enumerate(self.tiles)
            if current is tile
        )
