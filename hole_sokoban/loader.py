"""Load levels stored as Tiled JSON map exports."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from .errors import (
    InvalidColorError,
    InvalidDimensionsError,
    InvalidLayersError,
    InvalidLevelDataError,
    InvalidObjectError,
    InvalidObjectGroupsError,
    NoGoalsOrCratesError,
    NoPlayerSpawnError,
    NotFiniteError,
)
from .objects import ANY_STYLE, Position, validate_style
from .tilemap import Tilemap

logger = logging.getLogger(__name__)

LEVEL_ENV_VAR = "HOLE_SOKOBAN_LEVEL_ROOT"

BUILDING_LAYER = "building"
FLOOR_LAYER = "floor"
OVERLAY_GROUP = "overlay"

# Tiled stores flip flags in the three highest bits of a gid.
GID_MASK = 0x1FFFFFFF


@dataclass(frozen=True)
class CrateSpawn:
    position: Position
    style: int


@dataclass(frozen=True)
class GoalSpawn:
    position: Position
    accepted_style: Optional[int] = ANY_STYLE


@dataclass(frozen=True)
class TileInfo:
    """Type and custom properties of a tileset entry."""

    type: Optional[str]
    properties: Dict[str, object]


@dataclass(frozen=True)
class LevelDescription:
    """Parsed, immutable level data from which levels are (re)built."""

    name: str
    tilemap: Tilemap
    player_spawn: Position
    crates: Tuple[CrateSpawn, ...]
    goals: Tuple[GoalSpawn, ...]
    floor: Tuple[int, ...] = ()
    background_color: Tuple[int, int, int] = (0, 0, 0)
    tile_size: Tuple[int, int] = (1, 1)

    @property
    def size(self) -> Tuple[int, int]:
        return self.tilemap.size


def default_level_root() -> Path:
    return Path(__file__).resolve().parent / "levels"


def resolve_level_root(check_exists: bool = True) -> Path:
    """Return the level directory, honouring ``HOLE_SOKOBAN_LEVEL_ROOT``."""

    value = os.environ.get(LEVEL_ENV_VAR)
    root = Path(value).expanduser() if value else default_level_root()
    if check_exists and not root.is_dir():
        raise FileNotFoundError(f"Level directory does not exist: {root}")
    return root


def parse_color(value: Optional[str], *, source: Optional[str] = None) -> Tuple[int, int, int]:
    """Parse a Tiled ``#rrggbb`` or ``#aarrggbb`` colour; defaults to black."""

    if not value:
        return (0, 0, 0)
    if not isinstance(value, str):
        raise InvalidColorError(value, source=source)
    digits = value.lstrip("#")
    if len(digits) == 8:
        digits = digits[2:]
    if len(digits) != 6:
        raise InvalidColorError(value, source=source)
    try:
        return tuple(int(digits[i : i + 2], 16) for i in range(0, 6, 2))
    except ValueError as exc:
        raise InvalidColorError(value, source=source) from exc


def _properties(entry: Dict) -> Dict[str, object]:
    raw = entry.get("properties") or []
    # Old Tiled exports used a plain mapping instead of a list of records.
    if isinstance(raw, dict):
        return dict(raw)
    return {prop["name"]: prop.get("value") for prop in raw}


def _read_json(path: Path, *, source: Optional[str] = None) -> Dict:
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise InvalidLevelDataError(
            f"Invalid level data: {path.name} is not valid JSON ({exc.msg}).", source=source
        ) from exc
    if not isinstance(data, dict):
        raise InvalidLevelDataError(
            f"Invalid level data: {path.name} must hold a JSON object.", source=source
        )
    return data


class LevelLoader:
    """Load level files stored as JSON."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def available(self) -> List[str]:
        return sorted(path.stem for path in self.root.glob("*.json"))

    def load(self, name: str) -> LevelDescription:
        path = self.root / f"{name}.json"
        if not path.exists():
            raise FileNotFoundError(path)
        data = _read_json(path, source=name)
        description = self.parse(data, name=name, base=path.parent)
        logger.info(
            "Loaded level %s (%dx%d, %d crates, %d goals)",
            name,
            description.size[0],
            description.size[1],
            len(description.crates),
            len(description.goals),
        )
        return description

    def load_all(self) -> List[LevelDescription]:
        return [self.load(name) for name in self.available()]

    def parse(self, data: Dict, *, name: str = "", base: Optional[Path] = None) -> LevelDescription:
        """Turn a decoded map document into a :class:`LevelDescription`."""

        base = Path(base) if base is not None else self.root
        source = name or None

        if data.get("infinite", False):
            raise NotFiniteError(source=source)

        width, height = self._dimensions(data, source)
        size = width * height

        tile_layers = {
            layer.get("name"): layer
            for layer in data.get("layers", [])
            if layer.get("type", "tilelayer") == "tilelayer"
        }
        building = self._layer_data(tile_layers.get(BUILDING_LAYER), size, source)
        floor = self._layer_data(tile_layers.get(FLOOR_LAYER), size, source)

        tiles = self._resolve_tilesets(data.get("tilesets", []), base, source)
        tilemap = Tilemap.from_layer(
            width,
            height,
            building,
            {gid: info.type for gid, info in tiles.items()},
        )

        try:
            tile_width = int(data.get("tilewidth", 1) or 1)
            tile_height = int(data.get("tileheight", 1) or 1)
        except (TypeError, ValueError) as exc:
            raise InvalidLevelDataError(
                "Invalid level data: Tile sizes must be integers.", source=source
            ) from exc

        player_spawn: Optional[Position] = None
        crates: List[CrateSpawn] = []
        goals: List[GoalSpawn] = []
        for obj in self._objects(data.get("layers", []), source):
            try:
                position = (int(obj.get("x", 0) / tile_width), int(obj.get("y", 0) / tile_height))
                info = tiles.get(int(obj.get("gid", 0)) & GID_MASK)
            except (TypeError, ValueError) as exc:
                raise InvalidObjectError(obj, "non-numeric position or gid", source=source) from exc
            object_type = info.type if info else None
            if object_type == "spawn":
                if player_spawn is not None:
                    logger.warning(
                        "Level %s has several player spawns, using %s", name, position
                    )
                player_spawn = position
            elif object_type == "crate":
                try:
                    style = validate_style(info.properties.get("style"))
                except ValueError as exc:
                    raise InvalidObjectError(obj, str(exc), source=source) from exc
                crates.append(CrateSpawn(position=position, style=style))
            elif object_type == "goal":
                accepts = info.properties.get("accepts")
                try:
                    accepted = validate_style(accepts)
                except ValueError:
                    accepted = ANY_STYLE
                goals.append(GoalSpawn(position=position, accepted_style=accepted))
            else:
                raise InvalidObjectError(obj, "unknown object type", source=source)

        if not goals or not crates:
            raise NoGoalsOrCratesError(source=source)
        if player_spawn is None:
            raise NoPlayerSpawnError(source=source)

        return LevelDescription(
            name=name,
            tilemap=tilemap,
            player_spawn=player_spawn,
            crates=tuple(crates),
            goals=tuple(goals),
            floor=tuple(floor),
            background_color=parse_color(data.get("backgroundcolor"), source=source),
            tile_size=(tile_width, tile_height),
        )

    @staticmethod
    def _dimensions(data: Dict, source: Optional[str]) -> Tuple[int, int]:
        try:
            width = int(data["width"])
            height = int(data["height"])
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidDimensionsError(source=source) from exc
        if width <= 0 or height <= 0:
            raise InvalidDimensionsError(source=source)
        return width, height

    @staticmethod
    def _layer_data(layer: Optional[Dict], size: int, source: Optional[str]) -> List[int]:
        if layer is None:
            raise InvalidLayersError(source=source)
        data = layer.get("data")
        if not isinstance(data, list) or len(data) != size:
            raise InvalidLayersError(source=source)
        try:
            return [int(gid) & GID_MASK for gid in data]
        except (TypeError, ValueError) as exc:
            raise InvalidLevelDataError(
                "Invalid level data: Layer gids must be integers.", source=source
            ) from exc

    @staticmethod
    def _objects(layers: Sequence[Dict], source: Optional[str]) -> List[Dict]:
        groups = [
            layer
            for layer in layers
            if layer.get("type") == "objectgroup" and layer.get("name") != OVERLAY_GROUP
        ]
        if len(groups) != 1:
            raise InvalidObjectGroupsError(source=source)
        return list(groups[0].get("objects", []))

    def _resolve_tilesets(
        self, tilesets: Sequence[Dict], base: Path, source: Optional[str]
    ) -> Dict[int, TileInfo]:
        tiles: Dict[int, TileInfo] = {}
        for tileset in tilesets:
            try:
                first_gid = int(tileset.get("firstgid", 1))
            except (TypeError, ValueError) as exc:
                raise InvalidLevelDataError(
                    "Invalid level data: Tileset firstgid must be an integer.", source=source
                ) from exc
            if "source" in tileset:
                path = base / tileset["source"]
                if not path.exists():
                    raise FileNotFoundError(path)
                definition = _read_json(path, source=source)
            else:
                definition = tileset
            for tile in definition.get("tiles", []):
                # Tiled 1.9 renamed the tile "type" field to "class".
                tile_type = tile.get("type", tile.get("class"))
                try:
                    gid = first_gid + int(tile["id"])
                except (KeyError, TypeError, ValueError) as exc:
                    raise InvalidLevelDataError(
                        "Invalid level data: Tileset tiles need an integer id.", source=source
                    ) from exc
                tiles[gid] = TileInfo(
                    type=tile_type or None,
                    properties=_properties(tile),
                )
        return tiles
