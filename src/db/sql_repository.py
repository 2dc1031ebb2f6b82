"""Implementation of (Vcs)Repository using SQLAlchemy"""

import logging
from contextlib import contextmanager
from typing import Iterator
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.exceptions import PersistenceError
from src.core.models import BranchModel, CommitModel, VcsModel
from src.db.schema import DBBranch, DBCommit, DBVcs

_LOGGER = logging.getLogger(__name__)


class SQLVcsRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_vcs(self, vcs_id: UUID) -> VcsModel | None:
        """Get stored version control history by ID, if record exists."""
        with self._database_access("read", vcs_id):
            vcs_db = self._fetch_vcs(vcs_id)
            if vcs_db:
                return self._to_model(vcs_db)
            return None

    def create_vcs(self, vcs: VcsModel) -> tuple[VcsModel, UUID]:
        """Store new history and return the stored data + newly created ID."""
        new_id = uuid4()
        with self._database_access("store", new_id):
            vcs_db = DBVcs(
                id=new_id,
                current_branch_name=vcs.current_branch_name,
                current_commit_id=vcs.current_commit_id,
                next_commit_id=vcs.next_commit_id,
                commits=[self._to_db_commit(commit) for commit in vcs.commits],
                branches=[
                    self._to_db_branch(branch, position)
                    for position, branch in enumerate(vcs.branches)
                ],
            )
            self.db.add(vcs_db)
            self.db.commit()
            self.db.refresh(vcs_db)
            stored = self._to_model(vcs_db)
        _LOGGER.info("Stored version control history %s", new_id)
        return stored, new_id

    def update_vcs(self, vcs_id: UUID, vcs: VcsModel) -> VcsModel | None:
        """
        Replace the stored history of an existing record.
        ---

        Rows are synced instead of recreated:
        * commits: rows no longer present are removed, new ones inserted, changed ones rewritten
        * branches: moved, added or removed
        """
        with self._database_access("update", vcs_id):
            vcs_db = self._fetch_vcs(vcs_id)
            if not vcs_db:
                return None

            vcs_db.current_branch_name = vcs.current_branch_name
            vcs_db.current_commit_id = vcs.current_commit_id
            vcs_db.next_commit_id = vcs.next_commit_id
            self._sync_commits(vcs_db, vcs.commits)
            self._sync_branches(vcs_db, vcs.branches)

            self.db.commit()
            self.db.refresh(vcs_db)
            updated = self._to_model(vcs_db)
        _LOGGER.info("Updated version control history %s", vcs_id)
        return updated

    def delete_vcs(self, vcs_id: UUID) -> VcsModel | None:
        """Remove a record (commits and branches included)."""
        with self._database_access("delete", vcs_id):
            vcs_db = self._fetch_vcs(vcs_id)
            if not vcs_db:
                return None
            vcs_model = self._to_model(vcs_db)
            self.db.delete(vcs_db)
            self.db.commit()
        return vcs_model

    # -- PRIVATE HELPERS ---
    @contextmanager
    def _database_access(self, action: str, vcs_id: UUID) -> Iterator[None]:
        """Any failure of the database (reads included) rolls back the session and surfaces as PersistenceError"""
        try:
            yield
        except SQLAlchemyError as error:
            self.db.rollback()
            raise PersistenceError(
                f"Could not {action} version control history {vcs_id}: {error}"
            ) from error

    def _fetch_vcs(self, vcs_id: UUID) -> DBVcs | None:
        query = select(DBVcs).where(DBVcs.id == vcs_id)
        return self.db.scalar(query)

    def _sync_commits(self, vcs_db: DBVcs, commits: list[CommitModel]) -> None:
        new_commits = {commit.id: commit for commit in commits}
        for commit_db in list(vcs_db.commits):
            commit = new_commits.pop(commit_db.commit_id, None)
            if commit is None:
                vcs_db.commits.remove(commit_db)
                continue
            # same id, but possibly a different history saved under this record
            commit_db.parent_commit_id = commit.parent_commit_id
            commit_db.message = commit.message
            commit_db.board = commit.board
        for commit in new_commits.values():
            vcs_db.commits.append(self._to_db_commit(commit))

    def _sync_branches(self, vcs_db: DBVcs, branches: list[BranchModel]) -> None:
        positions = {branch.name: position for position, branch in enumerate(branches)}
        new_branches = {branch.name: branch for branch in branches}
        for branch_db in list(vcs_db.branches):
            branch = new_branches.pop(branch_db.name, None)
            if branch is None:
                vcs_db.branches.remove(branch_db)
                continue
            branch_db.commit_id = branch.commit_id
            branch_db.position = positions[branch.name]
        for branch in new_branches.values():
            vcs_db.branches.append(self._to_db_branch(branch, positions[branch.name]))

    def _to_db_commit(self, commit: CommitModel) -> DBCommit:
        return DBCommit(
            commit_id=commit.id,
            parent_commit_id=commit.parent_commit_id,
            message=commit.message,
            board=commit.board,
        )

    def _to_db_branch(self, branch: BranchModel, position: int) -> DBBranch:
        return DBBranch(name=branch.name, commit_id=branch.commit_id, position=position)

    def _to_model(self, vcs_db: DBVcs) -> VcsModel:
        """Convert SQLAlchemy model to data transfer model."""
        return VcsModel(
            current_branch_name=vcs_db.current_branch_name,
            current_commit_id=vcs_db.current_commit_id,
            next_commit_id=vcs_db.next_commit_id,
            commits=[
                CommitModel(
                    id=commit_db.commit_id,
                    parent_commit_id=commit_db.parent_commit_id,
                    message=commit_db.message,
                    board=commit_db.board,
                )
                for commit_db in vcs_db.commits
            ],
            branches=[
                BranchModel(name=branch_db.name, commit_id=branch_db.commit_id)
                for branch_db in vcs_db.branches
            ],
        )
