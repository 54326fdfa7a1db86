"""Shared fixtures for the puzzle core tests.

Levels are described with small ASCII grids: ``#`` is solid, ``_`` is a hole
and any other character is floor.  Crates, goals and the player are passed
separately so each test states their coordinates explicitly.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from hole_sokoban.level import Level
from hole_sokoban.objects import ANY_STYLE, Crate, Direction, Goal, Player
from hole_sokoban.tilemap import Tile, Tilemap

TILE_CHARS = {"#": Tile.SOLID, "_": Tile.HOLE}


def tilemap_from_rows(rows: Sequence[str]) -> Tilemap:
    width = len(rows[0])
    tiles = tuple(TILE_CHARS.get(char, Tile.FLOOR) for row in rows for char in row)
    return Tilemap(width=width, height=len(rows), tiles=tiles)


def build_level(
    rows: Sequence[str],
    player: Tuple[int, int],
    crates: Sequence[Crate] = (),
    goals: Optional[Sequence[Goal]] = None,
    facing: Direction = Direction.SOUTH,
    cues=None,
) -> Level:
    if goals is None:
        goals = [Goal(position=(0, 0), accepted_style=ANY_STYLE)]
    return Level(
        tilemap_from_rows(rows),
        list(crates),
        list(goals),
        Player(position=player, direction=facing),
        name="test",
        cues=cues,
    )


def fixture_path(*parts: str) -> Path:
    return Path(__file__).resolve().parents[1].joinpath(*parts)


def state_of(level: Level):
    """Everything undo must restore, in comparable form."""

    return (
        level.player.position,
        level.player.direction,
        tuple((crate.position, crate.style, crate.in_hole) for crate in level.crates),
    )


@pytest.fixture
def make_level() -> Callable[..., Level]:
    return build_level


@pytest.fixture
def level_root() -> Path:
    return fixture_path("levels")
