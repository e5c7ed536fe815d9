from __future__ import annotations

from typing import Iterator, List, Set, Tuple

from .board import Coord, Grid
from .errors import CellOccupied, NoPathExists, OutOfBounds, SourceEmpty

UP = (0, 1)
DOWN = (0, -1)
LEFT = (-1, 0)
RIGHT = (1, 0)
DIRECTIONS: Tuple[Tuple[int, int], ...] = (UP, DOWN, LEFT, RIGHT)


def step(coord: Coord, direction: Tuple[int, int]) -> Coord:
    return coord[0] + direction[0], coord[1] + direction[1]


def neighbors(grid: Grid, coord: Coord) -> List[Coord]:
    """Gets the in-bounds orthogonal neighbors of a coordinate (up, down, left, right)."""
    return [n for n in (step(coord, d) for d in DIRECTIONS) if grid.in_bounds(n)]


def direction_order(current: Coord, dest: Coord) -> List[Tuple[int, int]]:
    """Directions that close the distance to dest come first, the rest after."""
    toward = {
        UP: dest[1] > current[1],
        DOWN: dest[1] < current[1],
        LEFT: dest[0] < current[0],
        RIGHT: dest[0] > current[0],
    }
    biased = [d for d in DIRECTIONS if toward[d]]
    return biased + [d for d in DIRECTIONS if not toward[d]]


def _check_endpoints(grid: Grid, start: Coord, dest: Coord) -> None:
    if not grid.in_bounds(start) or not grid.in_bounds(dest):
        raise OutOfBounds(f"path {start} -> {dest} leaves the board")
    if grid.occupant(start) is None:
        raise SourceEmpty(f"no marble at {start}")
    if grid.occupant(dest) is not None:
        raise CellOccupied(f"{dest} is already occupied")


def find_path(grid: Grid, start: Coord, dest: Coord) -> List[Coord]:
    """
    Finds a route of empty cells from start to dest, both ends included.
    Depth first with a shared visited set: from every cell the directions toward
    dest are tried before the others, so the first route found is usually direct
    but not guaranteed to be the shortest. Every reachable cell is visited at most
    once, so a route is found whenever one exists.
    """
    _check_endpoints(grid, start, dest)

    visited: Set[Coord] = {start}
    stack: List[Tuple[Coord, Iterator[Tuple[int, int]]]] = [
        (start, iter(direction_order(start, dest)))
    ]
    while stack:
        current, pending = stack[-1]
        for direction in pending:
            nxt = step(current, direction)
            if nxt in visited or not grid.in_bounds(nxt) or grid.occupant(nxt) is not None:
                continue
            visited.add(nxt)
            if nxt == dest:
                return [coord for coord, _ in stack] + [nxt]
            stack.append((nxt, iter(direction_order(nxt, dest))))
            break
        else:
            stack.pop()
    raise NoPathExists(f"no free route from {start} to {dest}")


def reachable_from(grid: Grid, start: Coord) -> Set[Coord]:
    """All empty cells a marble at start could travel to."""
    if not grid.in_bounds(start):
        raise OutOfBounds(f"{start} is outside the board")
    seen: Set[Coord] = {start}
    frontier = [start]
    while frontier:
        current = frontier.pop()
        for nxt in neighbors(grid, current):
            if nxt in seen or grid.occupant(nxt) is not None:
                continue
            seen.add(nxt)
            frontier.append(nxt)
    seen.discard(start)
    return seen
