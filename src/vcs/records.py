"""Records stored by the version control: branches and commits"""

from dataclasses import dataclass
from typing import Optional

from src.checkers.board import Board


@dataclass
class Branch:
    """
    Movable named pointer into the commit history.

    A branch without a commit is a line of history that has not recorded any snapshot yet.
    """

    name: str
    commit_id: Optional[int] = None


@dataclass(frozen=True)
class Commit:
    """
    Snapshot of the full board state + link to the commit it was created on top of.

    NOTE: The parent is referenced by id. The Vcs resolves ids against its commit table.
    """

    id: int
    parent_id: Optional[int]
    message: str
    snapshot: Board

    def header(self) -> str:
        return f"{self.id}-{self.message}"

    def __str__(self) -> str:
        return self.header()
