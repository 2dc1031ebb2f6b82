"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import ForeignKey
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBVcs(Base):
    """One saved version control history. Commits and branches are stored in their own tables."""

    __tablename__ = "vcs"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    current_branch_name: Mapped[str]
    current_commit_id: Mapped[Optional[int]]
    next_commit_id: Mapped[int]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)

    commits: Mapped[list["DBCommit"]] = relationship(
        back_populates="vcs",
        cascade="all, delete-orphan",
        order_by="DBCommit.commit_id",
    )
    branches: Mapped[list["DBBranch"]] = relationship(
        back_populates="vcs",
        cascade="all, delete-orphan",
        order_by="DBBranch.position",
    )


class DBCommit(Base):
    """A commit references its parent by id (within the same history), never by a nested copy."""

    __tablename__ = "commits"
    vcs_id: Mapped[UUID] = mapped_column(ForeignKey("vcs.id"), primary_key=True)
    commit_id: Mapped[int] = mapped_column(primary_key=True)
    parent_commit_id: Mapped[Optional[int]]
    message: Mapped[str]
    board: Mapped[str]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)

    vcs: Mapped[DBVcs] = relationship(back_populates="commits")


class DBBranch(Base):
    """Branches keep the order in which they were created (`position`)."""

    __tablename__ = "branches"
    vcs_id: Mapped[UUID] = mapped_column(ForeignKey("vcs.id"), primary_key=True)
    name: Mapped[str] = mapped_column(primary_key=True)
    commit_id: Mapped[Optional[int]]
    position: Mapped[int]

    vcs: Mapped[DBVcs] = relationship(back_populates="branches")
