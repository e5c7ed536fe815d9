from __future__ import annotations

import random
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .errors import CellOccupied, OutOfBounds, SourceEmpty

Coord = Tuple[int, int]  # (x, y), y grows upwards
Color = int
Marble = Tuple[Coord, Color]

# Glyphs used by Grid.pretty, indexed by colour.
COLOR_GLYPHS = "RGBYPCOWKM"


class Grid:
    """Rectangular board owning the mapping from coordinate to marble colour."""

    def __init__(self, width: int, height: int, cells: Optional[Mapping[Coord, Color]] = None) -> None:
        self.width = width
        self.height = height
        self._cells: Dict[Coord, Color] = {}
        if cells:
            self.reset(cells)

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def occupant_count(self) -> int:
        return len(self._cells)

    @property
    def is_full(self) -> bool:
        return len(self._cells) == self.area

    @property
    def is_empty(self) -> bool:
        return not self._cells

    def in_bounds(self, coord: Coord) -> bool:
        x, y = coord
        return 0 <= x < self.width and 0 <= y < self.height

    def coords(self) -> Iterable[Coord]:
        """Iterates over all coordinates row by row, bottom row first."""
        for y in range(self.height):
            for x in range(self.width):
                yield (x, y)

    def empty_coords(self) -> List[Coord]:
        return [c for c in self.coords() if c not in self._cells]

    def marbles(self) -> List[Tuple[Coord, Color]]:
        return sorted(self._cells.items())

    def occupant(self, coord: Coord) -> Optional[Color]:
        return self._cells.get(coord)

    def place(self, color: Color, coord: Coord) -> None:
        if not self.in_bounds(coord):
            raise OutOfBounds(f"{coord} is outside the {self.width}x{self.height} board")
        if coord in self._cells:
            raise CellOccupied(f"{coord} is already occupied")
        self._cells[coord] = color

    def remove(self, coord: Coord) -> Optional[Color]:
        return self._cells.pop(coord, None)

    def remove_many(self, coords: Iterable[Coord]) -> Dict[Coord, Color]:
        """Removes every occupied coordinate in coords and returns what was there."""
        removed = {c: self._cells[c] for c in set(coords) if c in self._cells}
        for c in removed:
            del self._cells[c]
        return removed

    def move(self, start: Coord, dest: Coord) -> None:
        if not self.in_bounds(start) or not self.in_bounds(dest):
            raise OutOfBounds(f"move {start} -> {dest} leaves the board")
        if start not in self._cells:
            raise SourceEmpty(f"no marble at {start}")
        if dest in self._cells:
            raise CellOccupied(f"{dest} is already occupied")
        self._cells[dest] = self._cells.pop(start)

    def random_empty_coordinate(self, rng: Optional[random.Random] = None) -> Optional[Coord]:
        """Picks an empty cell uniformly at random, or None when the board is full."""
        free = self.empty_coords()
        if not free:
            return None
        return (rng or random).choice(free)

    def reset(self, cells: Optional[Mapping[Coord, Color]] = None) -> None:
        self._cells = {}
        for coord, color in (cells or {}).items():
            self.place(int(color), (int(coord[0]), int(coord[1])))

    def pretty(self, selected: Optional[Coord] = None) -> str:
        """Generates a human-readable board, top row first, selection in brackets."""
        lines: List[str] = []
        for y in range(self.height - 1, -1, -1):
            row: List[str] = []
            for x in range(self.width):
                color = self._cells.get((x, y))
                glyph = "." if color is None else COLOR_GLYPHS[color % len(COLOR_GLYPHS)]
                row.append(f"[{glyph}]" if selected == (x, y) else f" {glyph} ")
            lines.append(f"{y:>2} " + "".join(row))
        lines.append("   " + "".join(f" {x} " if x < 10 else f"{x} " for x in range(self.width)))
        return "\n".join(lines)
