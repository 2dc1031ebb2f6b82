"""Defines the kinds of checkers pieces and the two sides"""

from enum import Enum, auto


class Piece(Enum):
    MAN = auto()
    KING = auto()

    def is_man(self) -> bool:
        return self == Piece.MAN

    def is_king(self) -> bool:
        return self == Piece.KING


class Side(Enum):
    """White starts at the bottom of the board and moves up (decreasing rows), Black moves down."""

    WHITE = auto()
    BLACK = auto()

    def opposite(self) -> "Side":
        return Side.BLACK if self == Side.WHITE else Side.WHITE


# Letters used in the board notation: lower case for men, upper case for kings.
NOTATION_TO_PIECE: dict[str, tuple[Side, Piece]] = {
    "w": (Side.WHITE, Piece.MAN),
    "W": (Side.WHITE, Piece.KING),
    "b": (Side.BLACK, Piece.MAN),
    "B": (Side.BLACK, Piece.KING),
}

PIECE_TO_NOTATION: dict[tuple[Side, Piece], str] = {
    value: key for key, value in NOTATION_TO_PIECE.items()
}

NOTATION_TO_SIDE: dict[str, Side] = {"w": Side.WHITE, "b": Side.BLACK}
SIDE_TO_NOTATION: dict[Side, str] = {
    value: key for key, value in NOTATION_TO_SIDE.items()
}
