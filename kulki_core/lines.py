from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Set, Tuple

from .board import Color, Coord, Grid


@dataclass(frozen=True)
class LineRemoval:
    """Cells cleared by one resolution step; all of them held the same colour."""
    color: Optional[Color]
    coords: Tuple[Coord, ...] = ()

    @property
    def count(self) -> int:
        return len(self.coords)

    def __bool__(self) -> bool:
        return bool(self.coords)


def _run_extent(grid: Grid, coord: Coord, color: Color, dx: int, dy: int) -> Tuple[int, int]:
    """Returns (start, end) of the same-colour run through coord along one axis."""
    x, y = coord
    back = 0
    while grid.occupant((x - dx * (back + 1), y - dy * (back + 1))) == color:
        back += 1
    ahead = 0
    while grid.occupant((x + dx * (ahead + 1), y + dy * (ahead + 1))) == color:
        ahead += 1
    pos = x if dx else y
    return pos - back, pos + ahead


def find_lines(grid: Grid, coord: Coord, line_length: int) -> Set[Coord]:
    """Union of the horizontal and vertical runs through coord that are long enough to clear."""
    color = grid.occupant(coord)
    if color is None:
        return set()
    x, y = coord
    found: Set[Coord] = set()

    start_x, end_x = _run_extent(grid, coord, color, 1, 0)
    if end_x - start_x + 1 >= line_length:
        found.update((cx, y) for cx in range(start_x, end_x + 1))

    start_y, end_y = _run_extent(grid, coord, color, 0, 1)
    if end_y - start_y + 1 >= line_length:
        found.update((x, cy) for cy in range(start_y, end_y + 1))

    return found


def remove_lines(grid: Grid, coord: Coord, line_length: int) -> LineRemoval:
    """Clears every qualifying line through coord in a single step."""
    color = grid.occupant(coord)
    found = find_lines(grid, coord, line_length)
    if not found:
        return LineRemoval(color=color)
    grid.remove_many(found)
    return LineRemoval(color=color, coords=tuple(sorted(found)))
