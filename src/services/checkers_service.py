"""
Orchestration of communication from the front end (GUI) to the rules, version control and persistence layers (and the reverse direction).

The service is the single owner of the live Game and the Vcs: every mutation goes through one of its methods.
"""

import logging
from typing import Optional, Self
from uuid import UUID

from src.api.models import (
    BoardResponse,
    CreateBranchRequest,
    CreateCommitRequest,
    MoveRequest,
    PieceResponse,
    PositionModel,
    RouteResponse,
    RoutesRequest,
    RoutesResponse,
    SwitchToBranchRequest,
    SwitchToCommitRequest,
    TurnResponse,
    VcsResponse,
)
from src.checkers.board import Board
from src.checkers.game import Game
from src.checkers.position import Position
from src.checkers.routes import Route, Taking
from src.core.config import CheckersConfig, get_config
from src.core.exceptions import (
    CheckersError,
    CommitNotAllowedError,
    RepositoryError,
)
from src.core.shared_types import PieceKind, RouteKind, Side
from src.db.repository import VcsRepository
from src.vcs.vcs import Vcs

_LOGGER = logging.getLogger(__name__)


class CheckersService:
    """Orchestration of layers for a checkers game with version control."""

    def __init__(
        self,
        repository: VcsRepository,
        game: Optional[Game] = None,
        vcs: Optional[Vcs] = None,
        settings: Optional[CheckersConfig] = None,
    ) -> None:
        self.repo = repository
        self.settings = settings or get_config()
        self.game = game or Game(captures_mandatory=self.settings.rules.captures_mandatory)
        self.vcs = vcs or Vcs.new(self.settings.vcs.default_branch_name)

    @classmethod
    def start(
        cls,
        repository: VcsRepository,
        vcs_id: Optional[UUID] = None,
        settings: Optional[CheckersConfig] = None,
    ) -> Self:
        """
        Application start-up.
        ----
        Restore the stored history if an ID is given. If that fails, keep playing with a fresh history.
        """
        service = cls(repository, settings=settings)
        if vcs_id is None:
            return service
        try:
            service.load_vcs(vcs_id)
        except CheckersError as error:
            _LOGGER.warning(
                "Could not restore version control history %s, starting a new one: %s",
                vcs_id,
                error,
            )
        return service

    # -- GAME ---
    def board_state(self) -> BoardResponse:
        return self._create_board_response(self.game.board)

    def available_routes(self, request: RoutesRequest) -> RoutesResponse:
        """Routes for the piece of the player to move on the requested cell (used to highlight cells)"""
        routes = self.game.available_routes(self._to_position(request.position))
        return RoutesResponse(
            position=request.position,
            routes=[self._create_route_response(route) for route in routes],
        )

    def make_move(self, request: MoveRequest) -> TurnResponse:
        """Make a move attempt."""
        outcome = self.game.make_move(
            self._to_position(request.from_position),
            self._to_position(request.to_position),
        )
        return TurnResponse(
            route=self._create_route_response(outcome.route),
            promoted=outcome.promoted,
            move_passed=outcome.move_passed,
            game_ended=outcome.game_ended,
            winner=Side[outcome.winner.name] if outcome.winner else None,
            board=self.board_state(),
        )

    def restart(self) -> BoardResponse:
        self.game.restart()
        return self.board_state()

    # -- VERSION CONTROL ---
    def vcs_state(self) -> VcsResponse:
        return VcsResponse(
            current_branch=self.vcs.current_branch_name,
            branches=self.vcs.branch_names(),
            current_commit_header=self.vcs.current_commit_header(),
            commit_headers=self.vcs.commit_headers(),
            commit_creation_allowed=self.vcs.is_commit_creation_allowed(),
        )

    def create_branch(self, request: CreateBranchRequest) -> VcsResponse:
        self.vcs.create_branch(request.name)
        return self.vcs_state()

    def create_commit(self, request: CreateCommitRequest) -> VcsResponse:
        """Snapshot the live board. Refused while looking at a commit in the middle of history."""
        if not self.vcs.is_commit_creation_allowed():
            raise CommitNotAllowedError(
                f"Commit {self.vcs.current_commit_header()} is not the tip of any branch. Create a branch first."
            )
        self.vcs.create_commit(request.message, self.game.board)
        return self.vcs_state()

    def switch_to_branch(self, request: SwitchToBranchRequest) -> BoardResponse:
        """Nothing committed on the branch yet? Continue from a fresh board."""
        board = self.vcs.switch_to_branch(request.name)
        if board is None:
            board = Board.starting_position(self.game.board.dimensions)
        self.game.replace_board(board)
        return self.board_state()

    def switch_to_commit(self, request: SwitchToCommitRequest) -> BoardResponse:
        board = self.vcs.switch_to_commit(request.commit_id)
        self.game.replace_board(board)
        return self.board_state()

    # -- PERSISTENCE ---
    def save_vcs(self, vcs_id: Optional[UUID] = None) -> UUID:
        """Store the history. Creates a new record unless the ID of an existing one is given."""
        model = self.vcs.to_model()
        if vcs_id is None:
            _, vcs_id = self.repo.create_vcs(model)
            return vcs_id

        if self.repo.update_vcs(vcs_id, model) is None:
            raise RepositoryError(f"Version control history with {vcs_id=} not found.")
        return vcs_id

    def load_vcs(self, vcs_id: UUID) -> VcsResponse:
        """Replace the history by a stored one. The live board switches to its current commit (if any)."""
        model = self.repo.get_vcs(vcs_id)
        if model is None:
            raise RepositoryError(f"Version control history with {vcs_id=} not found.")
        self.vcs = Vcs.from_model(model)
        board = self.vcs.current_state()
        if board is not None:
            self.game.replace_board(board)
        _LOGGER.info("Restored version control history %s", vcs_id)
        return self.vcs_state()

    # -- Internal helpers --
    def _to_position(self, position: PositionModel) -> Position:
        return Position(position.row, position.column)

    def _to_position_model(self, position: Position) -> PositionModel:
        return PositionModel(row=position.row, column=position.column)

    def _create_route_response(self, route: Route) -> RouteResponse:
        if isinstance(route, Taking):
            return RouteResponse(
                kind=RouteKind.TAKING,
                destination=self._to_position_model(route.destination),
                captured=[self._to_position_model(p) for p in route.captured],
            )
        return RouteResponse(
            kind=RouteKind.MOVEMENT,
            destination=self._to_position_model(route.destination),
            captured=[],
        )

    def _create_board_response(self, board: Board) -> BoardResponse:
        pieces = [
            PieceResponse(
                position=self._to_position_model(position),
                side=Side[side.name],
                kind=PieceKind[piece.name],
            )
            for side in (board.current_move, board.current_move.opposite())
            for position, piece in sorted(
                board.pieces(side).items(),
                key=lambda item: (item[0].row, item[0].column),
            )
        ]
        return BoardResponse(
            notation=board.to_notation(),
            current_move=Side[board.current_move.name],
            pieces=pieces,
            piece_counts={
                Side[side.name]: {PieceKind[piece.name]: count for piece, count in counts.items()}
                for side, counts in board.count_pieces().items()
            },
        )
