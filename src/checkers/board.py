"""The Board holds the pieces of both sides and whose turn it is, and implements all rules that act on them."""

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Iterable, Optional, Self

from src.checkers.notation import parse_notation, write_notation
from src.checkers.pieces import Piece, Side
from src.checkers.position import BOARD_DIMENSIONS, Position
from src.checkers.routes import (
    Movement,
    Route,
    Taking,
    movement_routes,
    taking_routes,
)
from src.core.exceptions import BoardStateError, PieceNotFoundError


@dataclass
class Board:
    white_pieces: dict[Position, Piece]
    black_pieces: dict[Position, Piece]
    current_move: Side = Side.WHITE
    dimensions: tuple[int, int] = field(default=BOARD_DIMENSIONS)

    def __post_init__(self) -> None:
        """Refuse to construct a board that breaks the invariants"""
        overlapping = self.white_pieces.keys() & self.black_pieces.keys()
        if overlapping:
            raise BoardStateError(
                f"Cells occupied by both sides: {', '.join(str(p) for p in sorted(overlapping, key=_sort_key))}"
            )

        for position in [*self.white_pieces, *self.black_pieces]:
            if not self.is_inside_board(position):
                raise BoardStateError(f"Piece outside of the board: {position}")
            if not position.is_dark_cell():
                raise BoardStateError(f"Piece on a light cell: {position}")

    @classmethod
    def starting_position(cls, dimensions: tuple[int, int] = BOARD_DIMENSIONS) -> Self:
        """
        Men on the dark cells of the rows nearest to each edge: Black on top, White at the bottom.
        ----

        Two rows in the middle stay empty. On the standard 8x8 board: three rows each, so 12 pieces per side.
        """
        num_rows, num_columns = dimensions
        rows_per_side = (num_rows - 2) // 2
        dark_cells = [
            Position(row, column)
            for row in range(num_rows)
            for column in range(num_columns)
            if Position(row, column).is_dark_cell()
        ]
        black_pieces = {
            position: Piece.MAN
            for position in dark_cells
            if position.row < rows_per_side
        }
        white_pieces = {
            position: Piece.MAN
            for position in dark_cells
            if position.row >= num_rows - rows_per_side
        }
        return cls(white_pieces, black_pieces, Side.WHITE, dimensions)

    @classmethod
    def from_notation(
        cls, notation: str, dimensions: tuple[int, int] = BOARD_DIMENSIONS
    ) -> Self:
        """Construct a board from its text notation (see notation.py)"""
        white_pieces, black_pieces, current_move = parse_notation(notation, dimensions)
        return cls(white_pieces, black_pieces, current_move, dimensions)

    def to_notation(self) -> str:
        return write_notation(
            self.white_pieces, self.black_pieces, self.current_move, self.dimensions
        )

    def copy(self) -> Self:
        """Fully independent copy: mutating the copy never changes this board"""
        return deepcopy(self)

    # --- QUERIES ---
    @property
    def home_rows(self) -> dict[Side, int]:
        """The edge row each side starts from. A man reaching the opponent's home row gets promoted."""
        return {Side.BLACK: 0, Side.WHITE: self.dimensions[0] - 1}

    def pieces(self, side: Side) -> dict[Position, Piece]:
        return self.white_pieces if side == Side.WHITE else self.black_pieces

    def is_inside_board(self, position: Position) -> bool:
        return position.is_within_bounds(self.dimensions)

    def is_cell_empty(self, position: Position) -> bool:
        return (
            position not in self.white_pieces and position not in self.black_pieces
        )

    def piece_at(self, position: Position) -> Optional[tuple[Side, Piece]]:
        for side in Side:
            piece = self.pieces(side).get(position)
            if piece is not None:
                return side, piece
        return None

    def is_game_ended(self) -> bool:
        return not self.white_pieces or not self.black_pieces

    def winner(self) -> Optional[Side]:
        """The side that still has pieces once the other one ran out."""
        if not self.is_game_ended():
            return None
        if self.white_pieces:
            return Side.WHITE
        if self.black_pieces:
            return Side.BLACK
        return None

    def count_pieces(self) -> dict[Side, dict[Piece, int]]:
        """Tally men and kings for both sides"""
        return {
            side: {
                piece: sum(1 for p in self.pieces(side).values() if p == piece)
                for piece in Piece
            }
            for side in Side
        }

    # --- ROUTE GENERATION ---
    def get_movement_routes(
        self, position: Position, piece: Piece, side: Side
    ) -> list[Movement]:
        return movement_routes(position, piece, side, self)

    def get_taking_routes(
        self, position: Position, piece: Piece, side: Side
    ) -> list[Taking]:
        return taking_routes(position, piece, side, self)

    def get_available_routes(self, position: Position, piece: Piece) -> list[Route]:
        """
        Every route for the piece on `position`, played by the side whose turn it is.

        NOTE: plain moves are returned even when a capture exists. Enforcing mandatory captures is a policy of the caller.
        """
        routes: list[Route] = []
        routes.extend(self.get_movement_routes(position, piece, self.current_move))
        routes.extend(self.get_taking_routes(position, piece, self.current_move))
        return routes

    # --- STATE UPDATES ---
    def move_piece(self, side: Side, from_position: Position, to_position: Position) -> None:
        """Relocate a piece. Only call with a destination validated by get_available_routes()"""
        pieces = self.pieces(side)
        if from_position not in pieces:
            raise PieceNotFoundError(
                f"No {side.name.lower()} piece to move on {from_position}"
            )
        pieces[to_position] = pieces.pop(from_position)

    def remove_pieces(self, positions: Iterable[Position], side: Side) -> None:
        """Captured pieces get removed before the capturing piece is moved"""
        pieces = self.pieces(side)
        for position in positions:
            pieces.pop(position, None)

    def is_turning_to_king_condition_satisfied(
        self, side: Side, position: Position
    ) -> bool:
        """A man reached the home row of the opponent. (A king never gets promoted again)"""
        piece = self.pieces(side).get(position)
        if piece is None:
            raise PieceNotFoundError(
                f"No {side.name.lower()} piece to promote on {position}"
            )
        if piece.is_king():
            return False
        return position.row == self.home_rows[side.opposite()]

    def turn_man_to_king(self, side: Side, position: Position) -> None:
        pieces = self.pieces(side)
        if position not in pieces:
            raise PieceNotFoundError(
                f"No {side.name.lower()} piece to promote on {position}"
            )
        pieces[position] = Piece.KING

    def pass_the_move(self) -> None:
        self.current_move = self.current_move.opposite()


def _sort_key(position: Position) -> tuple[int, int]:
    return position.row, position.column
