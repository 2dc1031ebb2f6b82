"""
The Game class is the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating the rules required to play a turn:
pick the route the player asked for, apply it to the Board, promote / pass the turn, and restart once the game is over.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from src.checkers.board import Board
from src.checkers.pieces import Side
from src.checkers.position import Position
from src.checkers.routes import Route, Taking, only_takings, route_to
from src.core.exceptions import IllegalMoveError

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TurnOutcome:
    """What happened when a route got applied. Lets the caller decide what to redraw / report."""

    route: Route
    side: Side
    promoted: bool
    move_passed: bool
    game_ended: bool
    winner: Optional[Side] = None


@dataclass
class Game:
    board: Board = field(default_factory=Board.starting_position)
    captures_mandatory: bool = False

    def available_routes(self, position: Position) -> list[Route]:
        """
        Routes the player to move can choose from, for their piece on `position`.
        ----

        ----
        1. No piece of the side to move on that cell? Nothing to choose from.
        2. Generate movement and capture routes.
        3. If captures are mandatory and any piece of this side can capture, keep only captures.
        """
        side = self.board.current_move
        piece = self.board.pieces(side).get(position)
        if piece is None:
            return []

        routes = self.board.get_available_routes(position, piece)
        if self.captures_mandatory and self._side_can_capture(side):
            return only_takings(routes) if self._has_taking(routes) else []
        return routes

    def make_move(self, from_position: Position, to_position: Position) -> TurnOutcome:
        """
        Attempt to make a move
        -----

        1. find the route ending on the target cell (reject the move if there is none)
        2. remove the captured pieces, then move the piece
        3. promote (the turn is NOT passed: the promoted king's next action belongs to the same player) or pass the turn
        4. restart if one of the sides ran out of pieces
        """
        route = route_to(self.available_routes(from_position), to_position)
        if route is None:
            raise IllegalMoveError(
                f"No route from {from_position} to {to_position} for {self.board.current_move.name.lower()}"
            )

        side = self.board.current_move
        if isinstance(route, Taking):
            self.board.remove_pieces(route.captured, side.opposite())
        self.board.move_piece(side, from_position, to_position)

        promoted = self.board.is_turning_to_king_condition_satisfied(side, to_position)
        if promoted:
            self.board.turn_man_to_king(side, to_position)
            _LOGGER.debug("%s man promoted on %s", side.name.lower(), to_position)
        else:
            self.board.pass_the_move()

        game_ended = self.board.is_game_ended()
        winner = self.board.winner()
        if game_ended:
            _LOGGER.info("Game ended, %s wins. Restarting.", _side_name(winner))
            self.restart()

        return TurnOutcome(
            route=route,
            side=side,
            promoted=promoted,
            move_passed=not promoted,
            game_ended=game_ended,
            winner=winner,
        )

    def restart(self) -> None:
        """Back to the starting layout, White to move"""
        self.board = Board.starting_position(self.board.dimensions)

    def replace_board(self, board: Board) -> None:
        """Swap in a board restored from version control"""
        self.board = board

    # -- PRIVATE HELPERS ---
    def _side_can_capture(self, side: Side) -> bool:
        return any(
            self.board.get_taking_routes(position, piece, side)
            for position, piece in self.board.pieces(side).items()
        )

    def _has_taking(self, routes: list[Route]) -> bool:
        return any(isinstance(route, Taking) for route in routes)


def _side_name(side: Optional[Side]) -> str:
    return side.name.lower() if side else "nobody"
