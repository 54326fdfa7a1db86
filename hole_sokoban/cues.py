"""Sound cue collaborators notified by the level.

The simulation only signals that a move or an undo happened.  Choosing which
sound variant to play is delegated to :class:`SoundCues`, which uses an
injected random source so the choice is reproducible in tests.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional, Sequence

logger = logging.getLogger(__name__)


class NullCues:
    """Cue sink that ignores every notification."""

    def on_move(self) -> None:
        pass

    def on_undo(self) -> None:
        pass


class SoundCues(NullCues):
    """Pick a sound variant for each cue and hand it to ``play``."""

    def __init__(
        self,
        move_variants: Sequence[str] = (),
        undo_variants: Sequence[str] = (),
        *,
        rng: Optional[random.Random] = None,
        play: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.move_variants = list(move_variants)
        self.undo_variants = list(undo_variants)
        self.rng = rng or random.Random()
        self.play = play
        self.history: List[str] = []

    def _emit(self, variants: List[str], cue: str) -> Optional[str]:
        if not variants:
            logger.debug("No variants registered for %s cue", cue)
            return None
        choice = self.rng.choice(variants)
        self.history.append(choice)
        if self.play is not None:
            self.play(choice)
        return choice

    def on_move(self) -> None:
        self._emit(self.move_variants, "move")

    def on_undo(self) -> None:
        self._emit(self.undo_variants, "undo")
