"""
Text encoding of a full board state. Modelled after FEN for chess.
----

<rows><side to move>

* Rows are separated by slashes, starting with row 0 (the top of the board, Black's home row).
* Within a row, read left-to-right: a letter is a piece, a number counts consecutive empty cells.
    w = white man, W = white king, b = black man, B = black king
* The side to move is either "w" or "b"

ex) The starting position:
1b1b1b1b/b1b1b1b1/1b1b1b1b/8/8/w1w1w1w1/1w1w1w1w/w1w1w1w1 w

This is the format in which snapshots get persisted.
"""

from src.checkers.pieces import (
    NOTATION_TO_PIECE,
    NOTATION_TO_SIDE,
    PIECE_TO_NOTATION,
    SIDE_TO_NOTATION,
    Piece,
    Side,
)
from src.checkers.position import BOARD_DIMENSIONS, Position
from src.core.exceptions import InvalidNotationError

STARTING_NOTATION = "1b1b1b1b/b1b1b1b1/1b1b1b1b/8/8/w1w1w1w1/1w1w1w1w/w1w1w1w1 w"

PieceMap = dict[Position, Piece]


def is_valid_notation(
    notation: str, dimensions: tuple[int, int] = BOARD_DIMENSIONS
) -> bool:
    """Check if the string can be parsed into a board of the given dimensions."""
    parts = notation.split(" ")
    if len(parts) != 2:
        return False

    layout, side = parts
    return is_valid_layout(layout, dimensions) and is_valid_side_code(side)


def is_valid_layout(layout: str, dimensions: tuple[int, int] = BOARD_DIMENSIONS) -> bool:
    """Only check the part of the notation encoding the pieces."""
    num_rows, num_columns = dimensions
    row_notations = layout.split("/")
    if len(row_notations) != num_rows:
        return False

    for row_notation in row_notations:
        column_count = 0
        number = ""
        for character in row_notation:
            if character.isdigit():
                # NOTE: empty runs can be longer than 9 on larger boards, so digits are accumulated
                number += character
                continue
            if number:
                column_count += int(number)
                number = ""
            if character not in NOTATION_TO_PIECE:
                return False
            column_count += 1
        if number:
            column_count += int(number)

        if column_count != num_columns:
            return False
    return True


def is_valid_side_code(side: str) -> bool:
    return side in NOTATION_TO_SIDE


def parse_notation(
    notation: str, dimensions: tuple[int, int] = BOARD_DIMENSIONS
) -> tuple[PieceMap, PieceMap, Side]:
    """Decode into (white pieces, black pieces, side to move)"""
    if not is_valid_notation(notation, dimensions):
        raise InvalidNotationError(
            f"Cannot interpret supplied string as a board notation: {notation!r}"
        )

    layout, side_code = notation.split(" ")
    pieces: dict[Side, PieceMap] = {Side.WHITE: {}, Side.BLACK: {}}
    for row, row_notation in enumerate(layout.split("/")):
        column = 0
        number = ""
        for character in row_notation:
            if character.isdigit():
                number += character
                continue
            if number:
                column += int(number)
                number = ""
            side, piece = NOTATION_TO_PIECE[character]
            pieces[side][Position(row, column)] = piece
            column += 1

    return pieces[Side.WHITE], pieces[Side.BLACK], NOTATION_TO_SIDE[side_code]


def write_notation(
    white_pieces: PieceMap,
    black_pieces: PieceMap,
    current_move: Side,
    dimensions: tuple[int, int] = BOARD_DIMENSIONS,
) -> str:
    """reverse operation: write the notation for the given pieces"""
    num_rows, _ = dimensions
    layout = "/".join(
        _row_to_notation(row, white_pieces, black_pieces, dimensions)
        for row in range(num_rows)
    )
    return f"{layout} {SIDE_TO_NOTATION[current_move]}"


def _row_to_notation(
    row: int,
    white_pieces: PieceMap,
    black_pieces: PieceMap,
    dimensions: tuple[int, int],
) -> str:
    characters: list[str] = []
    empty_count = 0
    _, num_columns = dimensions
    for column in range(num_columns):
        position = Position(row, column)
        if position in white_pieces:
            key = (Side.WHITE, white_pieces[position])
        elif position in black_pieces:
            key = (Side.BLACK, black_pieces[position])
        else:
            empty_count += 1
            continue

        if empty_count > 0:
            characters.append(str(empty_count))
            empty_count = 0
        characters.append(PIECE_TO_NOTATION[key])

    # if the entire row is empty, then we still place this number in the string
    if empty_count > 0:
        characters.append(str(empty_count))
    return "".join(characters)
