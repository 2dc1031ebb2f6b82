"""Protocol repository (implemented for SQL Alchemy and for plain JSON files)"""

from typing import Protocol
from uuid import UUID

from src.core.models import VcsModel


class VcsRepository(Protocol):
    """Persistence layer orchestration"""

    def get_vcs(self, vcs_id: UUID) -> VcsModel | None:
        """Get stored version control history by ID, if record exists."""
        ...

    def create_vcs(self, vcs: VcsModel) -> tuple[VcsModel, UUID]:
        """Store new history and return the stored data + newly created ID."""
        ...

    def update_vcs(self, vcs_id: UUID, vcs: VcsModel) -> VcsModel | None:
        """Replace the stored history of an existing record."""
        ...

    def delete_vcs(self, vcs_id: UUID) -> VcsModel | None:
        """Remove a record."""
        ...
