"""
Boundary layer data model(s).

These objects are used to move version control history across boundaries:
the Service hands them to the persistence layer (SQL / file) and receives them back.
(Decouples the object graph of the version control from the way it is stored)

References between commits and branches are plain integer ids, never nested objects:
a commit shared by several branches is stored exactly once.
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make the models easier to read
BoardNotation = str
CommitId = int


@dataclass
class CommitModel:
    """Transport-safe representation of a single commit. The snapshot is stored in board notation."""

    id: CommitId
    parent_commit_id: Optional[CommitId]
    message: str
    board: BoardNotation


@dataclass
class BranchModel:
    name: str
    commit_id: Optional[CommitId]


@dataclass
class VcsModel:
    """Transport-safe representation of the full version control state."""

    current_branch_name: str
    current_commit_id: Optional[CommitId]
    next_commit_id: CommitId
    commits: list[CommitModel] = field(default_factory=list)
    branches: list[BranchModel] = field(default_factory=list)
