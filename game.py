from __future__ import annotations

# Facade module that re-exports the Kulki core functionality.
# Used by the Flask app and tests; single-responsibility modules live under kulki_core/*.

from kulki_core.board import COLOR_GLYPHS, Color, Coord, Grid, Marble
from kulki_core.config import GameConfig
from kulki_core.engine import Completion, Presenter, TurnEngine
from kulki_core.errors import (
    CellOccupied,
    GridError,
    InvalidConfiguration,
    KulkiError,
    NoPathExists,
    OutOfBounds,
    SourceEmpty,
)
from kulki_core.lines import LineRemoval, find_lines, remove_lines
from kulki_core.paths import direction_order, find_path, neighbors, reachable_from
from kulki_core.presenters import RecordingPresenter
from kulki_core.score import (
    HighScoreStore,
    MemoryHighScoreStore,
    ScoreKeeper,
    SqliteHighScoreStore,
)
from kulki_core.spawn import draw_colors, spawn_marbles
from kulki_core.state import GameSnapshot, Phase

__all__ = [
    "COLOR_GLYPHS", "Color", "Coord", "Grid", "Marble",
    "GameConfig",
    "Completion", "Presenter", "TurnEngine",
    "CellOccupied", "GridError", "InvalidConfiguration", "KulkiError",
    "NoPathExists", "OutOfBounds", "SourceEmpty",
    "LineRemoval", "find_lines", "remove_lines",
    "direction_order", "find_path", "neighbors", "reachable_from",
    "RecordingPresenter",
    "HighScoreStore", "MemoryHighScoreStore", "ScoreKeeper", "SqliteHighScoreStore",
    "draw_colors", "spawn_marbles",
    "GameSnapshot", "Phase",
]
