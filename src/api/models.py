"""Requests and Response models"""

from typing import Optional

from pydantic import BaseModel, field_validator

from src.checkers.position import BOARD_DIMENSIONS
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import PieceKind, RouteKind, Side


# --- REQUEST MODELS ---
class PositionModel(BaseModel):
    row: int
    column: int

    @field_validator("row")
    @classmethod
    def validate_row(cls, value: int) -> int:
        if not (0 <= value < BOARD_DIMENSIONS[0]):
            raise InvalidRequestError(f"Row {value} is outside of the board.")
        return value

    @field_validator("column")
    @classmethod
    def validate_column(cls, value: int) -> int:
        if not (0 <= value < BOARD_DIMENSIONS[1]):
            raise InvalidRequestError(f"Column {value} is outside of the board.")
        return value


class RoutesRequest(BaseModel):
    position: PositionModel


class MoveRequest(BaseModel):
    from_position: PositionModel
    to_position: PositionModel


def _validate_name(value: str) -> str:
    name = value.strip()
    if not name:
        raise InvalidRequestError("Branch name cannot be empty.")
    return name


class CreateBranchRequest(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _validate_name(value)


class SwitchToBranchRequest(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _validate_name(value)


class CreateCommitRequest(BaseModel):
    message: str


class SwitchToCommitRequest(BaseModel):
    commit_id: int

    @field_validator("commit_id")
    @classmethod
    def validate_commit_id(cls, value: int) -> int:
        if value < 0:
            raise InvalidRequestError(f"Commit ids are never negative: {value}")
        return value


# --- RESPONSE MODELS ---
class PieceResponse(BaseModel):
    position: PositionModel
    side: Side
    kind: PieceKind


class BoardResponse(BaseModel):
    notation: str
    current_move: Side
    pieces: list[PieceResponse]
    piece_counts: dict[Side, dict[PieceKind, int]]


class RouteResponse(BaseModel):
    kind: RouteKind
    destination: PositionModel
    captured: list[PositionModel]


class RoutesResponse(BaseModel):
    position: PositionModel
    routes: list[RouteResponse]


class TurnResponse(BaseModel):
    route: RouteResponse
    promoted: bool
    move_passed: bool
    game_ended: bool
    winner: Optional[Side]
    board: BoardResponse


class VcsResponse(BaseModel):
    current_branch: str
    branches: list[str]
    current_commit_header: Optional[str]
    commit_headers: list[str]
    commit_creation_allowed: bool
