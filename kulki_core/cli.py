from __future__ import annotations

import argparse
import logging
import os
import random
from typing import List, Optional, Sequence

from .board import COLOR_GLYPHS, Color, Coord, Marble
from .config import GameConfig
from .engine import Completion, TurnEngine
from .errors import InvalidConfiguration
from .paths import reachable_from
from .score import SqliteHighScoreStore


def _glyphs(colors: Sequence[Color]) -> str:
    return " ".join(COLOR_GLYPHS[c % len(COLOR_GLYPHS)] for c in colors)


class ConsolePresenter:
    """Prints each engine event to the terminal and completes immediately."""

    def __init__(self, show_paths: bool = False) -> None:
        self.show_paths = show_paths
        self.engine: Optional[TurnEngine] = None
        self.finished = False

    def _board(self) -> None:
        if self.engine is not None:
            print(self.engine.grid.pretty(self.engine.selected))

    def on_board_ready(self, completion: Completion) -> None:
        print('New board.')
        completion()

    def on_marbles_spawned(self, marbles: Sequence[Marble], next_colors: Sequence[Color],
                           completion: Completion) -> None:
        print('Spawned:', ', '.join(f"{COLOR_GLYPHS[c % len(COLOR_GLYPHS)]}@{x},{y}" for (x, y), c in marbles))
        print('Next:', _glyphs(next_colors))
        completion()

    def on_marbles_removed(self, coords: Sequence[Coord], completion: Completion) -> None:
        print(f"Cleared {len(coords)} marbles.")
        completion()

    def on_score_changed(self, score: int) -> None:
        print('Score:', score)

    def on_marble_moved(self, start: Coord, path: Sequence[Coord], completion: Completion) -> None:
        if self.show_paths:
            print('Path:', list(path))
        completion()

    def on_marble_selected(self, coord: Coord) -> None:
        pass

    def on_marble_deselected(self, coord: Coord) -> None:
        pass

    def on_game_finished(self, score: int, is_new_high_score: bool) -> None:
        self.finished = True
        self._board()
        print(f"Board full. Final score: {score}")
        if is_new_high_score:
            print('New high score!')


def _parse_coord(text: str) -> Coord:
    x_s, y_s = [t for t in text.replace(',', ' ').split(' ') if t != '']
    return int(x_s), int(y_s)


def _parse_move(text: str) -> List[Coord]:
    """Accepts 'x,y' (select) or 'x,y x,y' (move)."""
    parts = [p for p in text.strip().split() if p]
    if len(parts) in (2, 4) and all(',' not in p for p in parts):
        parts = [f"{parts[i]},{parts[i + 1]}" for i in range(0, len(parts), 2)]
    if len(parts) not in (1, 2):
        raise ValueError(text)
    return [_parse_coord(p) for p in parts]


def main(argv: Optional[List[str]] = None) -> None:
    defaults = GameConfig()
    parser = argparse.ArgumentParser(description='Kulki: line up marbles of one colour to clear them')
    parser.add_argument('--width', type=int, default=defaults.width, help='Board width')
    parser.add_argument('--height', type=int, default=defaults.height, help='Board height')
    parser.add_argument('--colors', type=int, default=defaults.colors_count, help='Number of marble colours')
    parser.add_argument('--spawn', type=int, default=defaults.marbles_per_spawn, help='Marbles spawned per turn')
    parser.add_argument('--line', type=int, default=defaults.line_length, help='Line length that clears')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed')
    parser.add_argument('--db', default=os.getenv('KULKI_DB', 'data/kulki.db'), help='SQLite high score file')
    parser.add_argument('--show-paths', action='store_true', help='Print the route of every move')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log engine phase changes')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else os.getenv('KULKI_LOG_LEVEL', 'WARNING'))

    config = GameConfig(args.width, args.height, args.colors, args.spawn, args.line)
    presenter = ConsolePresenter(show_paths=args.show_paths)
    try:
        engine = TurnEngine(config, presenter, SqliteHighScoreStore(args.db), random.Random(args.seed))
    except InvalidConfiguration as e:
        parser.error(str(e))
    presenter.engine = engine
    print('High score:', engine.high_score())
    engine.start()

    while not presenter.finished:
        print(engine.grid.pretty(engine.selected))
        if engine.selected is not None:
            print('Reachable:', sorted(reachable_from(engine.grid, engine.selected)))
        try:
            text = input('Select x,y or move x,y x,y (q to quit): ').strip()
        except EOFError:
            return
        if text.lower() in ('q', 'quit'):
            return
        try:
            coords = _parse_move(text)
        except ValueError:
            print('Could not parse. Try again.')
            continue
        if len(coords) == 1:
            ok = engine.tap(coords[0]) or coords[0] == engine.selected
        else:
            start, dest = coords
            engine.request_select(start)
            ok = engine.request_move(start, dest)
        if not ok:
            print('Not allowed. Try again.')


if __name__ == '__main__':
    main()
