"""
Custom exceptions shared across layers.

Split into:
* contract violations: the caller asked for something that must never happen if it validated through the queries first
* rejections: a legitimate request that the rules / version control policy refuse
* invalid input and persistence failures
"""


class CheckersError(Exception):
    """Top-level exception: every error raised by this application derives from it."""


# --- CONTRACT VIOLATIONS ---
class BoardStateError(CheckersError):
    """Board would break one of its invariants (overlapping pieces, piece off the board / on a light cell)."""


class PieceNotFoundError(CheckersError):
    """No piece of the requested side on the requested position."""


class VcsError(CheckersError):
    """Base class for version control errors."""


class UnknownBranchError(VcsError):
    pass


class UnknownCommitError(VcsError):
    pass


class VcsStateError(VcsError):
    """Stored history cannot be turned back into a consistent commit graph."""


# --- REJECTIONS ---
class IllegalMoveError(CheckersError):
    pass


class CommitNotAllowedError(VcsError):
    """Creating a commit in the middle of history (current commit is not the tip of any branch)."""


# --- INPUT ---
class InvalidNotationError(CheckersError):
    pass


class InvalidRequestError(CheckersError):
    pass


# --- PERSISTENCE ---
class RepositoryError(CheckersError):
    """Record not found."""


class PersistenceError(CheckersError):
    """Reading / writing the stored data failed."""
