"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define the candidate cells for each piece type,
then filter them down into routes.

A route is everything the caller needs to apply a move: its destination and (for captures)
the pieces taken on the way. Choosing between routes is up to the caller (see Game).
"""

from dataclasses import dataclass
from typing import Callable, Protocol

from src.checkers.pieces import Piece, Side
from src.checkers.position import Direction, Position


class Board(Protocol):
    """Just the parts the route generation needs"""

    dimensions: tuple[int, int]

    def is_inside_board(self, position: Position) -> bool: ...
    def is_cell_empty(self, position: Position) -> bool: ...
    def pieces(self, side: Side) -> dict[Position, Piece]: ...


@dataclass(frozen=True)
class Movement:
    """Plain move to an empty cell"""

    destination: Position

    def position(self) -> Position:
        return self.destination


@dataclass(frozen=True)
class Taking:
    """Capture chain: ends on `destination`, opponent pieces in `captured` get removed (in the order they were jumped)"""

    destination: Position
    captured: tuple[Position, ...]

    def position(self) -> Position:
        return self.destination


Route = Movement | Taking


# --- SHARED HELPERS ---
def max_ray_length(board: Board) -> int:
    """A King can slide at most across the whole board"""
    return max(board.dimensions)


def is_capturable(
    position: Position, direction: Direction, side: Side, board: Board
) -> bool:
    """
    The piece on `position` can be taken by `side` when jumping over it along `direction`

    * it belongs to the opponent
    * the cell right behind it (same direction) is on the board and empty
    """
    enemy_pieces = board.pieces(side.opposite())
    landing = position.next_diagonal(direction)
    return (
        position in enemy_pieces
        and board.is_inside_board(landing)
        and board.is_cell_empty(landing)
    )


def unblocked_diagonal_cells(
    position: Position, board: Board
) -> list[tuple[Position, Direction]]:
    """
    Raycasting along the four diagonals
    -----

    Walk outward along every ray and stop at the first occupied cell or at the edge of the board.
    The occupied cell is NOT included.
    """
    cells: list[tuple[Position, Direction]] = []
    blocked: set[Direction] = set()
    for cell, direction in position.diagonal_neighbours(max_ray_length(board)):
        if direction in blocked:
            continue
        if not board.is_inside_board(cell) or not board.is_cell_empty(cell):
            blocked.add(direction)
            continue
        cells.append((cell, direction))
    return cells


# --- MOVEMENT RULES ---
def candidate_man_cells(position: Position, side: Side, board: Board) -> list[Position]:
    """A man only steps forward: up the board for White, down for Black"""
    if side == Side.WHITE:
        return position.top_diagonal_neighbours()
    return position.bottom_diagonal_neighbours()


def candidate_king_cells(position: Position, side: Side, board: Board) -> list[Position]:
    """A king slides over any number of empty cells, but cannot pass through a piece."""
    return [cell for cell, _ in unblocked_diagonal_cells(position, board)]


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateCellsFn = Callable[[Position, Side, Board], list[Position]]
MOVEMENT_RULES: dict[Piece, CandidateCellsFn] = {
    Piece.MAN: candidate_man_cells,
    Piece.KING: candidate_king_cells,
}


def movement_routes(
    position: Position, piece: Piece, side: Side, board: Board
) -> list[Movement]:
    """Candidate cells that are empty and on the board"""
    movement_rule = MOVEMENT_RULES[piece]
    return [
        Movement(cell)
        for cell in movement_rule(position, side, board)
        if board.is_cell_empty(cell) and board.is_inside_board(cell)
    ]


# --- CAPTURING RULES ---
def man_capture_candidates(
    position: Position, side: Side, board: Board
) -> list[tuple[Position, Direction]]:
    """A man captures in any of the four diagonal directions, not just forward."""
    return position.diagonal_neighbours(1)


def king_capture_candidates(
    position: Position, side: Side, board: Board
) -> list[tuple[Position, Direction]]:
    """
    Raycasting for captures
    ----

    The first occupied cell on a ray ends the ray. It is only a candidate when it can actually be captured:
    a king cannot look through a piece it cannot take, nor pick a piece further down the same ray.
    """
    candidates: list[tuple[Position, Direction]] = []
    blocked: set[Direction] = set()
    for cell, direction in position.diagonal_neighbours(max_ray_length(board)):
        if direction in blocked:
            continue
        if board.is_cell_empty(cell):
            continue
        blocked.add(direction)
        if is_capturable(cell, direction, side, board):
            candidates.append((cell, direction))
    return candidates


# --- STRATEGY PATTERN: CAPTURING RULES ---
CaptureCandidatesFn = Callable[
    [Position, Side, Board], list[tuple[Position, Direction]]
]
CAPTURE_SCANS: dict[Piece, CaptureCandidatesFn] = {
    Piece.MAN: man_capture_candidates,
    Piece.KING: king_capture_candidates,
}


def taking_routes(
    position: Position,
    piece: Piece,
    side: Side,
    board: Board,
    captured: tuple[Position, ...] = (),
) -> list[Taking]:
    """
    Depth first search for capture chains
    ----

    ----
    From `position`, find every piece that can be jumped. For each of them:

    1. land right behind the captured piece
    2. emit a route that stops the chain there
    3. continue searching from the landing cell with the captured piece added to `captured`

    So a chain of two captures yields two routes: the single capture and the double capture.

    NOTE: The board is not updated during the search. Pieces captured earlier in the chain stay where they are
    (and keep blocking rays), but can never be captured a second time.
    """
    routes: list[Taking] = []
    capture_scan = CAPTURE_SCANS[piece]
    for enemy_position, direction in capture_scan(position, side, board):
        if enemy_position in captured:
            continue
        if enemy_position in board.pieces(side):
            continue
        if not is_capturable(enemy_position, direction, side, board):
            continue

        landing = enemy_position.next_diagonal(direction)
        chain = captured + (enemy_position,)
        routes.append(Taking(landing, chain))
        routes.extend(taking_routes(landing, piece, side, board, chain))
    return routes


# --- ROUTE SELECTION HELPERS ---
def captured_count(route: Route) -> int:
    return len(route.captured) if isinstance(route, Taking) else 0


def route_to(routes: list[Route], destination: Position) -> Route | None:
    """
    Find the route ending in the cell the player picked.

    Different chains can end on the same cell. The one taking the most pieces wins (first one found on a tie).
    """
    candidates = [route for route in routes if route.position() == destination]
    if not candidates:
        return None
    return max(candidates, key=captured_count)


def only_takings(routes: list[Route]) -> list[Route]:
    """Mandatory capture policy: if any capture is available, plain moves are not allowed."""
    takings: list[Route] = [route for route in routes if isinstance(route, Taking)]
    return takings or routes
