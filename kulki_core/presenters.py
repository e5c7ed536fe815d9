from __future__ import annotations

from typing import Any, Dict, List, Sequence

from .board import Color, Coord, Marble
from .engine import Completion


def _xy(c: Coord) -> List[int]:
    return [int(c[0]), int(c[1])]


class RecordingPresenter:
    """Presenter that completes every step at once and keeps a JSON-friendly event log."""

    def __init__(self) -> None:
        self.events: List[Dict[str, Any]] = []

    def clear(self) -> None:
        self.events = []

    def kinds(self) -> List[str]:
        return [e["type"] for e in self.events]

    def on_board_ready(self, completion: Completion) -> None:
        self.events.append({"type": "board_ready"})
        completion()

    def on_marbles_spawned(self, marbles: Sequence[Marble], next_colors: Sequence[Color],
                           completion: Completion) -> None:
        self.events.append({
            "type": "spawned",
            "marbles": [{"at": _xy(c), "color": int(color)} for c, color in marbles],
            "next": [int(c) for c in next_colors],
        })
        completion()

    def on_marbles_removed(self, coords: Sequence[Coord], completion: Completion) -> None:
        self.events.append({"type": "removed", "coords": [_xy(c) for c in coords]})
        completion()

    def on_score_changed(self, score: int) -> None:
        self.events.append({"type": "score", "score": int(score)})

    def on_marble_moved(self, start: Coord, path: Sequence[Coord], completion: Completion) -> None:
        self.events.append({"type": "moved", "from": _xy(start), "path": [_xy(c) for c in path]})
        completion()

    def on_marble_selected(self, coord: Coord) -> None:
        self.events.append({"type": "selected", "at": _xy(coord)})

    def on_marble_deselected(self, coord: Coord) -> None:
        self.events.append({"type": "deselected", "at": _xy(coord)})

    def on_game_finished(self, score: int, is_new_high_score: bool) -> None:
        self.events.append({"type": "finished", "score": int(score), "newHighScore": bool(is_new_high_score)})
