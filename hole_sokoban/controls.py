"""Keyboard bindings translating pygame events into session commands."""

from __future__ import annotations

import os
from typing import Dict, Iterable, List, Optional

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402

from .session import Command

KEY_BINDINGS: Dict[int, Command] = {
    pygame.K_w: Command.MOVE_NORTH,
    pygame.K_UP: Command.MOVE_NORTH,
    pygame.K_s: Command.MOVE_SOUTH,
    pygame.K_DOWN: Command.MOVE_SOUTH,
    pygame.K_a: Command.MOVE_WEST,
    pygame.K_LEFT: Command.MOVE_WEST,
    pygame.K_d: Command.MOVE_EAST,
    pygame.K_RIGHT: Command.MOVE_EAST,
    pygame.K_q: Command.UNDO,
    pygame.K_r: Command.RESTART,
}


def command_for_event(event: object) -> Optional[Command]:
    """Return the command bound to a ``KEYDOWN`` event, if any."""

    if getattr(event, "type", None) != pygame.KEYDOWN:
        return None
    return KEY_BINDINGS.get(getattr(event, "key", None))


def commands_for_events(events: Iterable[object]) -> List[Command]:
    commands: List[Command] = []
    for event in events:
        command = command_for_event(event)
        if command is not None:
            commands.append(command)
    return commands
