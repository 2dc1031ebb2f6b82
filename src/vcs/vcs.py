"""
Version control over board snapshots.
----

Works like a (very) small git:
* a commit stores a full copy of the board, and points to its parent commit
* a branch is a named pointer to a commit
* switching to a commit that is not the tip of any branch gives a "detached" view of history:
    you can look, but you cannot commit on top of it until you create a branch there.

Commits and branches live in tables (dicts) keyed by id / name. All references between them are ids.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from src.checkers.board import Board
from src.core.exceptions import (
    CheckersError,
    UnknownBranchError,
    UnknownCommitError,
    VcsStateError,
)
from src.core.models import BranchModel, CommitModel, VcsModel
from src.vcs.records import Branch, Commit

_LOGGER = logging.getLogger(__name__)

DEFAULT_BRANCH_NAME = "default"


@dataclass
class Vcs:
    current_branch_name: str = DEFAULT_BRANCH_NAME
    current_commit_id: Optional[int] = None
    branches: dict[str, Branch] = field(default_factory=dict)
    commits: dict[int, Commit] = field(default_factory=dict)
    next_commit_id: int = 0

    def __post_init__(self) -> None:
        # a fresh history still has a branch to commit on
        if self.current_branch_name not in self.branches:
            self.branches[self.current_branch_name] = Branch(self.current_branch_name)

    # --- BRANCHES ---
    def create_branch(self, name: str) -> None:
        """New branch on the current commit (if any). Replaces a branch with the same name, and becomes the current branch."""
        self.branches[name] = Branch(name, self.current_commit_id)
        self.current_branch_name = name
        _LOGGER.info("Created branch %r at commit %s", name, self.current_commit_id)

    def switch_to_branch(self, name: str) -> Optional[Board]:
        """
        Make the branch the current one, and return a copy of the board stored in the commit it points to.

        Returns None when nothing has been committed on that branch yet.
        """
        branch = self._get_branch(name)
        self.current_branch_name = name
        self.current_commit_id = branch.commit_id
        _LOGGER.info("Switched to branch %r", name)
        return self.current_state()

    def branch_names(self) -> list[str]:
        return list(self.branches.keys())

    def current_branch(self) -> Branch:
        return self._get_branch(self.current_branch_name)

    # --- COMMITS ---
    def is_commit_creation_allowed(self) -> bool:
        """
        Commits may only be created at the tip of a branch
        ----

        Allowed if nothing has been committed yet, or if some branch points to the current commit.
        Otherwise the user is browsing history and must create a branch first.
        """
        if self.current_commit_id is None:
            return True
        return any(
            branch.commit_id == self.current_commit_id
            for branch in self.branches.values()
        )

    def create_commit(self, message: str, board: Board) -> int:
        """
        Store a copy of the board as a new commit on top of the current commit.

        NOTE: Does not check is_commit_creation_allowed(). That is the caller's call.
        """
        commit = Commit(
            id=self.next_commit_id,
            parent_id=self.current_commit_id,
            message=message,
            snapshot=board.copy(),
        )
        self.commits[commit.id] = commit
        self.current_branch().commit_id = commit.id
        self.current_commit_id = commit.id
        self.next_commit_id += 1
        _LOGGER.info(
            "Created commit %s on branch %r", commit.header(), self.current_branch_name
        )
        return commit.id

    def switch_to_commit(self, commit_id: int) -> Board:
        """Make the commit the current one (the branch pointer does not move) and return a copy of its board."""
        commit = self.get_commit(commit_id)
        self.current_commit_id = commit.id
        _LOGGER.info("Switched to commit %s", commit.header())
        return commit.snapshot.copy()

    def current_state(self) -> Optional[Board]:
        commit = self.current_commit()
        if commit is None:
            return None
        return commit.snapshot.copy()

    def current_commit(self) -> Optional[Commit]:
        if self.current_commit_id is None:
            return None
        return self.get_commit(self.current_commit_id)

    def current_commit_header(self) -> Optional[str]:
        commit = self.current_commit()
        return commit.header() if commit else None

    def commit_headers(self) -> list[str]:
        """History of the current branch: its tip first, down to the very first commit."""
        return [commit.header() for commit in self.commit_chain(self.current_branch().commit_id)]

    def commit_chain(self, commit_id: Optional[int]) -> list[Commit]:
        """Follow the parent links from the given commit to the root"""
        chain: list[Commit] = []
        while commit_id is not None:
            commit = self.get_commit(commit_id)
            chain.append(commit)
            commit_id = commit.parent_id
        return chain

    def get_commit(self, commit_id: int) -> Commit:
        commit = self.commits.get(commit_id)
        if commit is None:
            raise UnknownCommitError(f"No commit with id {commit_id}")
        return commit

    # --- CONVERSION FROM/TO TRANSPORT MODEL ---
    @classmethod
    def new(cls, default_branch_name: str = DEFAULT_BRANCH_NAME) -> Self:
        """Empty history with a single branch without commits"""
        return cls(current_branch_name=default_branch_name)

    @classmethod
    def from_model(cls, model: VcsModel) -> Self:
        """
        Rebuild the commit graph from flat records
        ----

        Every id a record refers to has to resolve against the stored commits.
        Anything else means the stored data is corrupt.
        """
        try:
            commits = {
                record.id: Commit(
                    id=record.id,
                    parent_id=record.parent_commit_id,
                    message=record.message,
                    snapshot=Board.from_notation(record.board),
                )
                for record in model.commits
            }
        except CheckersError as error:
            raise VcsStateError(f"Cannot restore commit snapshot: {error}") from error
        branches = {
            record.name: Branch(record.name, record.commit_id)
            for record in model.branches
        }

        for commit in commits.values():
            if commit.parent_id is None:
                continue
            if commit.parent_id not in commits:
                raise VcsStateError(
                    f"Commit {commit.id} refers to unknown parent {commit.parent_id}"
                )
            # ids are handed out in increasing order, so a parent is always older (no cycles)
            if commit.parent_id >= commit.id:
                raise VcsStateError(
                    f"Commit {commit.id} refers to parent {commit.parent_id}, which is not older"
                )
        for branch in branches.values():
            if branch.commit_id is not None and branch.commit_id not in commits:
                raise VcsStateError(
                    f"Branch {branch.name!r} refers to unknown commit {branch.commit_id}"
                )
        if model.current_branch_name not in branches:
            raise VcsStateError(f"Unknown current branch {model.current_branch_name!r}")
        if (
            model.current_commit_id is not None
            and model.current_commit_id not in commits
        ):
            raise VcsStateError(f"Unknown current commit {model.current_commit_id}")
        if commits and model.next_commit_id <= max(commits):
            raise VcsStateError(
                f"Next commit id {model.next_commit_id} is already in use"
            )

        return cls(
            current_branch_name=model.current_branch_name,
            current_commit_id=model.current_commit_id,
            branches=branches,
            commits=commits,
            next_commit_id=model.next_commit_id,
        )

    def to_model(self) -> VcsModel:
        """Encode into the flat format the persistence layer uses"""
        return VcsModel(
            current_branch_name=self.current_branch_name,
            current_commit_id=self.current_commit_id,
            next_commit_id=self.next_commit_id,
            commits=[
                CommitModel(
                    id=commit.id,
                    parent_commit_id=commit.parent_id,
                    message=commit.message,
                    board=commit.snapshot.to_notation(),
                )
                for commit in self.commits.values()
            ],
            branches=[
                BranchModel(name=branch.name, commit_id=branch.commit_id)
                for branch in self.branches.values()
            ],
        )

    # -- PRIVATE HELPERS ---
    def _get_branch(self, name: str) -> Branch:
        branch = self.branches.get(name)
        if branch is None:
            raise UnknownBranchError(f"No branch named {name!r}")
        return branch
