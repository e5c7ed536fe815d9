from __future__ import annotations

import logging
import random
from typing import Callable, Dict, List, Optional, Protocol, Sequence, Tuple

from .board import Color, Coord, Grid, Marble
from .config import GameConfig
from .errors import GridError, InvalidConfiguration, NoPathExists
from .lines import remove_lines
from .paths import find_path
from .score import HighScoreStore, MemoryHighScoreStore, ScoreKeeper
from .spawn import draw_colors, spawn_marbles
from .state import GameSnapshot, Phase

logger = logging.getLogger(__name__)

Completion = Callable[[], None]


class Presenter(Protocol):
    """Callbacks the engine drives. Methods taking a completion must call it once
    their effect has been shown; the engine does not advance until then."""

    def on_board_ready(self, completion: Completion) -> None: ...

    def on_marbles_spawned(self, marbles: Sequence[Marble], next_colors: Sequence[Color],
                           completion: Completion) -> None: ...

    def on_marbles_removed(self, coords: Sequence[Coord], completion: Completion) -> None: ...

    def on_score_changed(self, score: int) -> None: ...

    def on_marble_moved(self, start: Coord, path: Sequence[Coord], completion: Completion) -> None: ...

    def on_marble_selected(self, coord: Coord) -> None: ...

    def on_marble_deselected(self, coord: Coord) -> None: ...

    def on_game_finished(self, score: int, is_new_high_score: bool) -> None: ...


class TurnEngine:
    """
    Runs one session of the game as a state machine:
    startup -> spawn -> resolve spawn lines -> check full -> await move
    -> resolve move lines -> (await move | spawn) ... -> finished.

    Only AWAIT_MOVE waits for the player; every other phase runs straight
    through, pausing only while the presenter holds a completion callback.
    """

    def __init__(
        self,
        config: GameConfig,
        presenter: Presenter,
        high_scores: Optional[HighScoreStore] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._config = config.validate()
        self._presenter = presenter
        self._high_scores: HighScoreStore = high_scores if high_scores is not None else MemoryHighScoreStore()
        self._rng = rng or random.Random()
        self._grid = Grid(config.width, config.height)
        self._score = ScoreKeeper()
        self._phase: Optional[Phase] = None
        self._next_colors: List[Color] = []
        self._spawned: List[Marble] = []
        self._selected: Optional[Coord] = None
        self._moved_to: Optional[Coord] = None
        self._waiting = False
        # Bumped on every (re)start so completions from an older session are ignored.
        self._generation = 0
        self._handlers: Dict[Phase, Callable[[], None]] = {
            Phase.STARTUP: self._startup,
            Phase.SPAWN: self._spawn,
            Phase.RESOLVE_SPAWN_LINES: self._resolve_spawn_lines,
            Phase.CHECK_FULL: self._check_full,
            Phase.AWAIT_MOVE: self._await_move,
            Phase.RESOLVE_MOVE_LINES: self._resolve_move_lines,
            Phase.FINISHED: self._finished,
        }

    # ---------- Read access ----------

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def phase(self) -> Optional[Phase]:
        return self._phase

    @property
    def score(self) -> int:
        return self._score.score

    @property
    def selected(self) -> Optional[Coord]:
        return self._selected

    @property
    def next_colors(self) -> Tuple[Color, ...]:
        return tuple(self._next_colors)

    @property
    def is_waiting_for_move(self) -> bool:
        return self._waiting

    def high_score(self) -> int:
        return self._high_scores.load(self._config.score_key())

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            config=self._config,
            marbles=tuple(self._grid.marbles()),
            next_colors=tuple(self._next_colors),
            score=self._score.score,
            phase=self._phase or Phase.STARTUP,
        )

    # ---------- Control ----------

    def start(self) -> None:
        """Starts a new session, discarding any game in progress."""
        self._reset()
        self._enter(Phase.STARTUP)

    restart = start

    def resume(self, snapshot: GameSnapshot) -> None:
        """Continues a saved session: shows board and marbles, then picks up at CHECK_FULL."""
        if snapshot.config != self._config:
            raise InvalidConfiguration("snapshot was taken with a different configuration")
        self._reset()
        self._grid.reset(snapshot.cells())
        self._score.reset(snapshot.score)
        self._next_colors = list(snapshot.next_colors) or self._draw_colors()
        marbles = self._grid.marbles()

        def show_marbles() -> None:
            self._presenter.on_marbles_spawned(marbles, self.next_colors, self._advance(Phase.CHECK_FULL))

        self._phase = Phase.STARTUP
        self._presenter.on_board_ready(self._completion(show_marbles))

    def _reset(self) -> None:
        self._generation += 1
        self._grid.reset()
        self._score.reset()
        self._phase = None
        self._next_colors = []
        self._spawned = []
        self._selected = None
        self._moved_to = None
        self._waiting = False

    def _completion(self, action: Callable[[], None]) -> Completion:
        generation = self._generation
        fired = False

        def completion() -> None:
            nonlocal fired
            if fired or generation != self._generation:
                logger.debug("ignoring stale or repeated completion")
                return
            fired = True
            action()

        return completion

    def _advance(self, phase: Phase) -> Completion:
        return self._completion(lambda: self._enter(phase))

    def _enter(self, phase: Phase) -> None:
        logger.debug("entering %s", phase.value)
        self._phase = phase
        self._handlers[phase]()

    def _draw_colors(self) -> List[Color]:
        return draw_colors(self._rng, self._config.marbles_per_spawn, self._config.colors_count)

    def _report_removal(self, coords: Sequence[Coord], next_phase: Phase) -> None:
        # Score is reported before the removal completion can start the next phase.
        self._presenter.on_score_changed(self._score.score)
        self._presenter.on_marbles_removed(tuple(coords), self._advance(next_phase))

    # ---------- Phases ----------

    def _startup(self) -> None:
        self._next_colors = self._draw_colors()
        self._presenter.on_board_ready(self._advance(Phase.SPAWN))

    def _spawn(self) -> None:
        self._spawned = spawn_marbles(self._grid, self._next_colors, self._rng)
        self._next_colors = self._draw_colors()
        self._presenter.on_marbles_spawned(
            tuple(self._spawned), self.next_colors, self._advance(Phase.RESOLVE_SPAWN_LINES)
        )

    def _resolve_spawn_lines(self) -> None:
        removed: List[Coord] = []
        for coord, _color in self._spawned:
            # An earlier line in this batch may already have cleared the cell.
            if self._grid.occupant(coord) is None:
                continue
            removal = remove_lines(self._grid, coord, self._config.line_length)
            if removal:
                self._score.add_removed(removal.count)
                removed.extend(removal.coords)
        self._spawned = []
        if removed:
            self._report_removal(removed, Phase.CHECK_FULL)
        else:
            self._enter(Phase.CHECK_FULL)

    def _check_full(self) -> None:
        self._enter(Phase.FINISHED if self._grid.is_full else Phase.AWAIT_MOVE)

    def _await_move(self) -> None:
        self._selected = None
        self._moved_to = None
        if self._grid.is_empty:
            self._enter(Phase.RESOLVE_MOVE_LINES)
            return
        self._waiting = True

    def _resolve_move_lines(self) -> None:
        coord, self._moved_to = self._moved_to, None
        if coord is not None:
            removal = remove_lines(self._grid, coord, self._config.line_length)
            if removal:
                self._score.add_removed(removal.count)
                self._report_removal(removal.coords, Phase.AWAIT_MOVE)
                return
        self._enter(Phase.SPAWN)

    def _finished(self) -> None:
        self._waiting = False
        score = self._score.score
        key = self._config.score_key()
        is_new_high_score = score > self._high_scores.load(key)
        if is_new_high_score:
            self._high_scores.save(key, score)
        logger.info("game finished with score %d (new high score: %s)", score, is_new_high_score)
        self._presenter.on_game_finished(score, is_new_high_score)

    # ---------- Input ----------

    def request_select(self, coord: Coord) -> bool:
        """Selects the marble at coord; switching selection deselects the old one."""
        if not self._waiting or self._grid.occupant(coord) is None:
            return False
        if coord == self._selected:
            return False
        if self._selected is not None:
            self._presenter.on_marble_deselected(self._selected)
        self._selected = coord
        self._presenter.on_marble_selected(coord)
        return True

    def request_move(self, start: Coord, dest: Coord) -> bool:
        """Moves the selected marble at start to dest if a free route exists; otherwise does nothing."""
        if not self._waiting or self._selected is None or self._selected != start:
            return False
        if start == dest:
            return False
        try:
            path = find_path(self._grid, start, dest)
        except (GridError, NoPathExists) as e:
            logger.debug("rejected move %s -> %s: %s", start, dest, e)
            return False

        self._waiting = False
        self._grid.move(start, dest)
        self._selected = None
        self._moved_to = dest
        self._presenter.on_marble_deselected(start)
        self._presenter.on_marble_moved(start, tuple(path), self._advance(Phase.RESOLVE_MOVE_LINES))
        return True

    def tap(self, coord: Coord) -> bool:
        """Single-tap input: tapping a marble selects it, tapping an empty cell moves the selection there."""
        if not self._waiting:
            return False
        if self._grid.occupant(coord) is not None:
            return self.request_select(coord)
        if self._selected is None:
            return False
        return self.request_move(self._selected, coord)
