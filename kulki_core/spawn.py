from __future__ import annotations

import random
from typing import List, Optional, Sequence

from .board import Color, Grid, Marble


def draw_colors(rng: random.Random, count: int, colors_count: int) -> List[Color]:
    """Draws the colours of the next spawn batch (shown to the player as a preview)."""
    return [rng.randrange(colors_count) for _ in range(count)]


def spawn_marbles(grid: Grid, colors: Sequence[Color], rng: Optional[random.Random] = None) -> List[Marble]:
    """Places one marble per colour on random empty cells, in order, until the board is full."""
    spawned: List[Marble] = []
    for color in colors:
        coord = grid.random_empty_coordinate(rng)
        if coord is None:
            break
        grid.place(color, coord)
        spawned.append((coord, color))
    return spawned
