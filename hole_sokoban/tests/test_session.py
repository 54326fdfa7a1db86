from __future__ import annotations

import random
from pathlib import Path

import pygame
import pytest

from hole_sokoban.controls import command_for_event, commands_for_events
from hole_sokoban.cues import NullCues, SoundCues
from hole_sokoban.loader import LevelLoader
from hole_sokoban.objects import Direction
from hole_sokoban.session import Command, PlaySession


@pytest.fixture
def descriptions(level_root: Path):
    return LevelLoader(level_root).load_all()


def play(session: PlaySession, moves: str) -> None:
    letters = {
        "N": Command.MOVE_NORTH,
        "S": Command.MOVE_SOUTH,
        "W": Command.MOVE_WEST,
        "E": Command.MOVE_EAST,
        "Z": Command.UNDO,
    }
    for letter in moves:
        session.handle(letters[letter])


def test_session_starts_on_first_level(descriptions):
    session = PlaySession(descriptions)

    assert session.description.name == "01_first_steps"
    assert session.level.player.position == (1, 1)
    assert not session.finished


def test_restart_returns_to_spawn(descriptions):
    session = PlaySession(descriptions)
    play(session, "EE")
    assert session.level.action_count == 2

    assert session.handle(Command.RESTART)

    assert session.level.player.position == (1, 1)
    assert session.level.action_count == 0
    assert session.level.crates[0].position == (3, 1)


def test_undo_through_session(descriptions):
    session = PlaySession(descriptions)
    play(session, "EEZ")

    assert session.level.player.position == (2, 1)
    assert session.level.crates[0].position == (3, 1)
    assert session.level.action_count == 1


def test_blocked_command_reports_no_change(descriptions):
    session = PlaySession(descriptions)

    assert not session.handle(Command.MOVE_NORTH)
    assert not session.handle(Command.UNDO)


def test_any_command_after_win_advances(descriptions):
    session = PlaySession(descriptions)
    play(session, "EEE")
    assert session.level.is_won()

    assert session.handle(Command.MOVE_WEST)

    assert session.description.name == "02_mind_the_gap"
    assert session.completed == {"01_first_steps"}
    assert session.level.action_count == 0


def test_advance_requires_win(descriptions):
    session = PlaySession(descriptions)

    assert not session.advance()
    assert session.index == 0


def test_session_finishes_after_last_level(descriptions):
    session = PlaySession(descriptions, start=2)
    play(session, "WWNSEEEEN")
    assert session.level.is_won()

    assert not session.handle(Command.MOVE_SOUTH)
    assert session.finished
    assert session.completed == {"03_sorting"}
    assert not session.handle(Command.MOVE_SOUTH)


def test_full_run_through_packaged_levels(descriptions):
    session = PlaySession(descriptions)
    for moves in ("EEE", "EEEE", "WWNSEEEEN"):
        play(session, moves)
        assert session.level.is_won()
        session.advance()

    assert session.finished
    assert session.completed == {"01_first_steps", "02_mind_the_gap", "03_sorting"}


def test_session_rejects_empty_or_bad_start(descriptions):
    with pytest.raises(ValueError):
        PlaySession([])
    with pytest.raises(IndexError):
        PlaySession(descriptions, start=len(descriptions))


def test_session_forwards_cues_to_each_level(descriptions):
    played = []
    cues = SoundCues(["walk1", "walk2"], ["undo1"], rng=random.Random(1), play=played.append)
    session = PlaySession(descriptions, cues=cues)

    play(session, "EEE")
    session.handle(Command.MOVE_NORTH)  # advances
    play(session, "EZ")

    assert len(played) == 5
    assert played[-1] == "undo1"
    assert set(played[:4]) <= {"walk1", "walk2"}


def test_sound_cue_choice_is_reproducible():
    first = SoundCues(["a", "b", "c"], rng=random.Random(7))
    second = SoundCues(["a", "b", "c"], rng=random.Random(7))
    for _ in range(10):
        first.on_move()
        second.on_move()

    assert first.history == second.history


def test_cues_without_variants_stay_silent():
    played = []
    cues = SoundCues(play=played.append)
    cues.on_move()
    cues.on_undo()
    NullCues().on_move()

    assert played == []
    assert cues.history == []


def test_command_directions():
    assert Command.MOVE_NORTH.direction is Direction.NORTH
    assert Command.UNDO.direction is None
    for direction in Direction:
        assert Command.move(direction).direction is direction


@pytest.mark.parametrize(
    "key, command",
    [
        (pygame.K_w, Command.MOVE_NORTH),
        (pygame.K_UP, Command.MOVE_NORTH),
        (pygame.K_s, Command.MOVE_SOUTH),
        (pygame.K_DOWN, Command.MOVE_SOUTH),
        (pygame.K_a, Command.MOVE_WEST),
        (pygame.K_LEFT, Command.MOVE_WEST),
        (pygame.K_d, Command.MOVE_EAST),
        (pygame.K_RIGHT, Command.MOVE_EAST),
        (pygame.K_q, Command.UNDO),
        (pygame.K_r, Command.RESTART),
    ],
)
def test_key_bindings(key, command):
    event = pygame.event.Event(pygame.KEYDOWN, key=key)

    assert command_for_event(event) is command


def test_unbound_events_are_ignored():
    events = [
        pygame.event.Event(pygame.KEYUP, key=pygame.K_w),
        pygame.event.Event(pygame.KEYDOWN, key=pygame.K_SPACE),
        pygame.event.Event(pygame.QUIT),
        pygame.event.Event(pygame.KEYDOWN, key=pygame.K_d),
    ]

    assert commands_for_events(events) == [Command.MOVE_EAST]
