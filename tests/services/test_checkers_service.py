"""Unit tests for src/services/checkers_service.py"""

import logging
from typing import Generator
from uuid import UUID, uuid4

import pytest
from sqlalchemy.orm import Session

from src.api.models import (
    BoardResponse,
    CreateBranchRequest,
    CreateCommitRequest,
    MoveRequest,
    PositionModel,
    RouteResponse,
    RoutesRequest,
    SwitchToBranchRequest,
    SwitchToCommitRequest,
    TurnResponse,
    VcsResponse,
)
from src.checkers.board import Board
from src.checkers.game import Game
from src.checkers.notation import STARTING_NOTATION
from src.core.config import CheckersConfig, RulesSettings, VcsSettings
from src.core.exceptions import (
    CheckersError,
    CommitNotAllowedError,
    RepositoryError,
)
from src.core.models import BranchModel, CommitModel, VcsModel
from src.core.shared_types import PieceKind, RouteKind, Side
from src.db.sql_repository import SQLVcsRepository
from src.services.checkers_service import CheckersService

AFTER_FIRST_MOVE = "1b1b1b1b/b1b1b1b1/1b1b1b1b/8/3w4/w3w1w1/1w1w1w1w/w1w1w1w1 b"


# --- MOCK DEPENDENCIES ----
class MockRepository:
    """Mock the VcsRepository using a dictionary of version control models."""

    def __init__(self) -> None:
        self._histories: dict[UUID, VcsModel] = {}

    def create_vcs(self, vcs: VcsModel) -> tuple[VcsModel, UUID]:
        """Store new history and return the stored data + newly created ID."""
        vcs_id = uuid4()
        self._histories[vcs_id] = vcs
        return vcs, vcs_id

    def get_vcs(self, vcs_id: UUID) -> VcsModel | None:
        """Get history by ID, if record exists."""
        return self._histories.get(vcs_id)

    def update_vcs(self, vcs_id: UUID, vcs: VcsModel) -> VcsModel | None:
        """Replace existing record."""
        if vcs_id not in self._histories:
            return None
        self._histories[vcs_id] = vcs
        return vcs

    def delete_vcs(self, vcs_id: UUID) -> VcsModel | None:
        """Remove a history's record."""
        return self._histories.pop(vcs_id, None)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._histories.clear()


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def service(mock_repository: MockRepository) -> CheckersService:
    """Service with default settings (independent of the environment)"""
    return CheckersService(mock_repository, settings=CheckersConfig())


def move(from_cell: tuple[int, int], to_cell: tuple[int, int]) -> MoveRequest:
    return MoveRequest(
        from_position=PositionModel(row=from_cell[0], column=from_cell[1]),
        to_position=PositionModel(row=to_cell[0], column=to_cell[1]),
    )


# --- SERVICE - GAME ----
def test_board_state(service: CheckersService) -> None:
    response = service.board_state()

    assert isinstance(response, BoardResponse)
    assert response.notation == STARTING_NOTATION
    assert response.current_move == Side.WHITE
    assert len(response.pieces) == 24
    # pieces of the side to move come first
    assert response.pieces[0].side == Side.WHITE
    assert response.piece_counts[Side.BLACK] == {PieceKind.MAN: 12, PieceKind.KING: 0}


def test_available_routes(service: CheckersService) -> None:
    request = RoutesRequest(position=PositionModel(row=5, column=2))
    response = service.available_routes(request)

    assert response.position == request.position
    assert response.routes == [
        RouteResponse(kind=RouteKind.MOVEMENT, destination=PositionModel(row=4, column=1), captured=[]),
        RouteResponse(kind=RouteKind.MOVEMENT, destination=PositionModel(row=4, column=3), captured=[]),
    ]


def test_available_routes_of_the_waiting_side(service: CheckersService) -> None:
    """Black pieces cannot be selected on white's turn"""
    response = service.available_routes(RoutesRequest(position=PositionModel(row=2, column=1)))
    assert response.routes == []


def test_make_move(service: CheckersService) -> None:
    response = service.make_move(move((5, 2), (4, 3)))

    assert isinstance(response, TurnResponse)
    assert response.route.kind == RouteKind.MOVEMENT
    assert response.move_passed
    assert not response.promoted
    assert not response.game_ended
    assert response.winner is None
    assert response.board.current_move == Side.BLACK
    assert response.board.notation == AFTER_FIRST_MOVE


def test_capture_response(mock_repository: MockRepository) -> None:
    game = Game(Board.from_notation("7b/8/8/2b5/1w6/8/8/8 w"))
    service = CheckersService(mock_repository, game=game, settings=CheckersConfig())
    response = service.make_move(move((4, 1), (2, 3)))

    assert response.route.kind == RouteKind.TAKING
    assert response.route.captured == [PositionModel(row=3, column=2)]
    assert response.board.piece_counts[Side.BLACK][PieceKind.MAN] == 1


def test_game_end_response(mock_repository: MockRepository) -> None:
    game = Game(Board.from_notation("8/8/8/2b5/1w6/8/8/8 w"))
    service = CheckersService(mock_repository, game=game, settings=CheckersConfig())
    response = service.make_move(move((4, 1), (2, 3)))

    assert response.game_ended
    assert response.winner == Side.WHITE
    assert response.board.notation == STARTING_NOTATION


def test_illegal_move(service: CheckersService) -> None:
    """Make sure service propagates the exceptions."""
    with pytest.raises(CheckersError):
        service.make_move(move((5, 2), (3, 4)))
    assert service.board_state().notation == STARTING_NOTATION


def test_restart(service: CheckersService) -> None:
    service.make_move(move((5, 2), (4, 3)))
    assert service.restart().notation == STARTING_NOTATION


def test_mandatory_captures_from_settings(mock_repository: MockRepository) -> None:
    settings = CheckersConfig(rules=RulesSettings(captures_mandatory=True))
    service = CheckersService(mock_repository, settings=settings)
    assert service.game.captures_mandatory


# --- SERVICE - VERSION CONTROL ----
def test_fresh_vcs_state(service: CheckersService) -> None:
    response = service.vcs_state()

    assert isinstance(response, VcsResponse)
    assert response.current_branch == "default"
    assert response.branches == ["default"]
    assert response.current_commit_header is None
    assert response.commit_headers == []
    assert response.commit_creation_allowed


def test_default_branch_name_from_settings(mock_repository: MockRepository) -> None:
    settings = CheckersConfig(vcs=VcsSettings(default_branch_name="main"))
    service = CheckersService(mock_repository, settings=settings)
    assert service.vcs_state().branches == ["main"]


def test_create_commits(service: CheckersService) -> None:
    service.create_commit(CreateCommitRequest(message="start"))
    service.make_move(move((5, 2), (4, 3)))
    response = service.create_commit(CreateCommitRequest(message="first move"))

    assert response.current_commit_header == "1-first move"
    assert response.commit_headers == ["1-first move", "0-start"]


def test_commit_in_the_middle_of_history(service: CheckersService) -> None:
    """Refused until a branch is created on the commit"""
    service.create_commit(CreateCommitRequest(message="start"))
    service.make_move(move((5, 2), (4, 3)))
    service.create_commit(CreateCommitRequest(message="first move"))

    board = service.switch_to_commit(SwitchToCommitRequest(commit_id=0))
    assert board.notation == STARTING_NOTATION
    assert not service.vcs_state().commit_creation_allowed
    with pytest.raises(CommitNotAllowedError):
        service.create_commit(CreateCommitRequest(message="refused"))

    service.create_branch(CreateBranchRequest(name="b1"))
    response = service.create_commit(CreateCommitRequest(message="other"))
    assert response.current_branch == "b1"
    assert response.commit_headers == ["2-other", "0-start"]


def test_switch_to_branch(service: CheckersService) -> None:
    service.create_commit(CreateCommitRequest(message="start"))
    service.create_branch(CreateBranchRequest(name="b1"))
    service.make_move(move((5, 2), (4, 3)))
    service.create_commit(CreateCommitRequest(message="first move"))

    board = service.switch_to_branch(SwitchToBranchRequest(name="default"))
    assert board.notation == STARTING_NOTATION
    board = service.switch_to_branch(SwitchToBranchRequest(name="b1"))
    assert board.notation == AFTER_FIRST_MOVE
    assert service.game.board.to_notation() == AFTER_FIRST_MOVE


def test_switch_to_branch_without_commits(service: CheckersService) -> None:
    """The live board is replaced by a fresh board"""
    service.make_move(move((5, 2), (4, 3)))
    service.create_branch(CreateBranchRequest(name="b1"))
    board = service.switch_to_branch(SwitchToBranchRequest(name="b1"))
    assert board.notation == STARTING_NOTATION


def test_switch_to_unknown_branch(service: CheckersService) -> None:
    with pytest.raises(CheckersError):
        service.switch_to_branch(SwitchToBranchRequest(name="nope"))


def test_switch_to_unknown_commit(service: CheckersService) -> None:
    with pytest.raises(CheckersError):
        service.switch_to_commit(SwitchToCommitRequest(commit_id=3))


# --- SERVICE - PERSISTENCE ----
def test_save_and_load(mock_repository: MockRepository) -> None:
    service = CheckersService(mock_repository, settings=CheckersConfig())
    service.create_commit(CreateCommitRequest(message="start"))
    service.make_move(move((5, 2), (4, 3)))
    service.create_commit(CreateCommitRequest(message="first move"))
    vcs_id = service.save_vcs()

    stored = mock_repository.get_vcs(vcs_id)
    assert stored is not None
    assert stored.next_commit_id == 2

    other = CheckersService(mock_repository, settings=CheckersConfig())
    response = other.load_vcs(vcs_id)
    assert response.commit_headers == ["1-first move", "0-start"]
    assert other.vcs == service.vcs
    assert other.board_state().notation == AFTER_FIRST_MOVE


def test_save_updates_existing_record(service: CheckersService, mock_repository: MockRepository) -> None:
    vcs_id = service.save_vcs()
    service.create_commit(CreateCommitRequest(message="start"))
    assert service.save_vcs(vcs_id) == vcs_id

    stored = mock_repository.get_vcs(vcs_id)
    assert stored is not None
    assert len(stored.commits) == 1


def test_save_unknown_record(service: CheckersService) -> None:
    with pytest.raises(RepositoryError):
        service.save_vcs(uuid4())


def test_load_unknown_record(service: CheckersService) -> None:
    with pytest.raises(RepositoryError):
        service.load_vcs(uuid4())


def test_start_restores_history(mock_repository: MockRepository) -> None:
    first = CheckersService(mock_repository, settings=CheckersConfig())
    first.make_move(move((5, 2), (4, 3)))
    first.create_commit(CreateCommitRequest(message="first move"))
    vcs_id = first.save_vcs()

    service = CheckersService.start(mock_repository, vcs_id, settings=CheckersConfig())
    assert service.vcs_state().current_commit_header == "0-first move"
    assert service.board_state().notation == AFTER_FIRST_MOVE


def test_start_falls_back_to_new_history(
    mock_repository: MockRepository, caplog: pytest.LogCaptureFixture
) -> None:
    """Unknown or corrupt stored history: keep playing with a fresh one"""
    corrupt = VcsModel(current_branch_name="gone", current_commit_id=None, next_commit_id=0)
    _, corrupt_id = mock_repository.create_vcs(corrupt)

    for vcs_id in [uuid4(), corrupt_id]:
        with caplog.at_level(logging.WARNING):
            service = CheckersService.start(mock_repository, vcs_id, settings=CheckersConfig())
        assert service.vcs_state().branches == ["default"]
        assert service.board_state().notation == STARTING_NOTATION
    assert "Could not restore" in caplog.text


def test_start_without_id(mock_repository: MockRepository) -> None:
    service = CheckersService.start(mock_repository, settings=CheckersConfig())
    assert service.vcs_state().commit_headers == []


def test_start_falls_back_when_database_fails(db_session_without_tables: Session) -> None:
    """A failing database is treated like a missing history"""
    repository = SQLVcsRepository(db_session_without_tables)
    service = CheckersService.start(repository, uuid4(), settings=CheckersConfig())
    assert service.vcs_state().branches == ["default"]
    assert service.board_state().notation == STARTING_NOTATION


def test_start_falls_back_on_cyclic_history(mock_repository: MockRepository) -> None:
    """Stored parents pointing at each other are refused instead of followed forever"""
    cyclic = VcsModel(
        current_branch_name="default",
        current_commit_id=1,
        next_commit_id=2,
        commits=[
            CommitModel(id=0, parent_commit_id=1, message="first", board=STARTING_NOTATION),
            CommitModel(id=1, parent_commit_id=0, message="second", board=STARTING_NOTATION),
        ],
        branches=[BranchModel(name="default", commit_id=1)],
    )
    _, vcs_id = mock_repository.create_vcs(cyclic)
    service = CheckersService.start(mock_repository, vcs_id, settings=CheckersConfig())
    assert service.vcs_state().commit_headers == []
