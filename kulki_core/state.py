from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from .board import Color, Coord, Marble
from .config import GameConfig


class Phase(str, Enum):
    STARTUP = "startup"
    SPAWN = "spawn"
    RESOLVE_SPAWN_LINES = "resolve_spawn_lines"
    CHECK_FULL = "check_full"
    AWAIT_MOVE = "await_move"
    RESOLVE_MOVE_LINES = "resolve_move_lines"
    FINISHED = "finished"


@dataclass(frozen=True)
class GameSnapshot:
    """Everything needed to resume a session at the point it was waiting for a move."""
    config: GameConfig
    marbles: Tuple[Marble, ...]  # sorted by coordinate for consistent comparison
    next_colors: Tuple[Color, ...]
    score: int = 0
    phase: Phase = Phase.AWAIT_MOVE

    def cells(self) -> Dict[Coord, Color]:
        return dict(self.marbles)

    @property
    def finished(self) -> bool:
        return self.phase == Phase.FINISHED
