"""
A cell on the board plus the diagonal geometry every rule is built from.

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# (rows, columns). Standard checkers is 8x8, but nothing below depends on that.
BOARD_DIMENSIONS = (8, 8)


class Direction(Enum):
    """The four diagonal rays from a cell. Values are (row delta, column delta)."""

    LEFT_UP = (-1, -1)
    RIGHT_UP = (-1, 1)
    LEFT_DOWN = (1, -1)
    RIGHT_DOWN = (1, 1)


@dataclass(frozen=True)
class Position:
    row: int
    column: int

    def __str__(self) -> str:
        return f"({self.row}, {self.column})"

    def top_diagonal_neighbours(self) -> list[Position]:
        """Cells one step up the board (White's forward direction)"""
        return [
            Position(self.row - 1, self.column - 1),
            Position(self.row - 1, self.column + 1),
        ]

    def bottom_diagonal_neighbours(self) -> list[Position]:
        """Cells one step down the board (Black's forward direction)"""
        return [
            Position(self.row + 1, self.column - 1),
            Position(self.row + 1, self.column + 1),
        ]

    def diagonal_neighbours(self, steps: int) -> list[tuple[Position, Direction]]:
        """
        All cells on the diagonals through this cell, up to `steps` cells away.
        ----

        Ordered by distance first, then by direction. Every cell is tagged with the ray it lies on,
        so callers can stop scanning a ray once it is blocked.

        NOTE: cells may lie outside of the board. Filtering is up to the caller.
        """
        neighbours: list[tuple[Position, Direction]] = []
        for offset in range(1, steps + 1):
            for direction in Direction:
                d_row, d_column = direction.value
                neighbours.append(
                    (
                        Position(
                            self.row + offset * d_row, self.column + offset * d_column
                        ),
                        direction,
                    )
                )
        return neighbours

    def next_diagonal(self, direction: Direction) -> Position:
        d_row, d_column = direction.value
        return Position(self.row + d_row, self.column + d_column)

    def is_within_bounds(self, dimensions: tuple[int, int] = BOARD_DIMENSIONS) -> bool:
        rows, columns = dimensions
        return (0 <= self.row < rows) and (0 <= self.column < columns)

    def is_dark_cell(self) -> bool:
        """Pieces only ever stand on the dark cells. The top-left corner is a light cell."""
        return (self.row + self.column) % 2 == 1
