"""Command line entry point: list levels and replay move strings."""

from __future__ import annotations

import argparse
import json
import logging
from typing import List, Optional, Sequence

from .errors import LevelLoadError
from .loader import LEVEL_ENV_VAR, LevelLoader, resolve_level_root
from .session import Command, PlaySession

MOVE_LETTERS = {
    "N": Command.MOVE_NORTH,
    "S": Command.MOVE_SOUTH,
    "W": Command.MOVE_WEST,
    "E": Command.MOVE_EAST,
    "Z": Command.UNDO,
}


def parse_moves(moves: str) -> List[Command]:
    """Translate a move string such as ``"EEN Z"`` into commands."""

    commands: List[Command] = []
    for letter in moves.upper():
        if letter.isspace():
            continue
        try:
            commands.append(MOVE_LETTERS[letter])
        except KeyError as exc:
            raise ValueError(f"Unknown move letter: {letter}") from exc
    return commands


def format_summary(session: PlaySession) -> str:
    level = session.level
    lines = [
        f"Level: {session.description.name}",
        f"  player: {level.player.position} facing {level.player.direction.name}",
    ]
    for crate in level.crates:
        state = "in hole" if crate.in_hole else ("on goal" if crate.positioned else "free")
        lines.append(f"  crate style {crate.style} at {crate.position} ({state})")
    done = sum(1 for goal in level.goals if goal.done)
    lines.append(f"  goals: {done}/{len(level.goals)} done")
    lines.append(f"  moves used: {level.action_count}")
    lines.append("  Level complete!" if level.is_won() else "  Level not complete.")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hole_sokoban",
        description=(
            "Replay moves on a hole sokoban level. "
            f"Set {LEVEL_ENV_VAR} to use a custom level directory."
        ),
    )
    parser.add_argument("--list-levels", action="store_true", help="List available levels and exit.")
    parser.add_argument("--level", help="Level name; defaults to the first available level.")
    parser.add_argument(
        "--moves",
        default="",
        help="Moves to replay: N, S, W, E to move and Z to undo.",
    )
    parser.add_argument("--json", action="store_true", help="Print the final state as JSON.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        root = resolve_level_root()
    except FileNotFoundError as exc:
        print(f"Could not find levels: {exc}")
        return 2
    loader = LevelLoader(root)
    names = loader.available()

    if args.list_levels:
        print("Available levels:")
        for name in names:
            print(f"  {name}")
        return 0

    if not names and not args.level:
        parser.error("no levels available")
    try:
        commands = parse_moves(args.moves)
    except ValueError as exc:
        parser.error(str(exc))

    try:
        description = loader.load(args.level or names[0])
    except (FileNotFoundError, LevelLoadError) as exc:
        print(f"Could not load level: {exc}")
        return 2

    session = PlaySession([description])
    for command in commands:
        if session.level.is_won():
            break
        session.handle(command)

    if args.json:
        print(json.dumps(session.level.snapshot(), indent=2))
    else:
        print(format_summary(session))
    return 0
