"""
Implementation of (Vcs)Repository storing every history as a JSON document in a directory.

<directory>/<vcs id>.json
"""

import logging
from pathlib import Path
from uuid import UUID, uuid4

from pydantic import TypeAdapter, ValidationError

from src.core.exceptions import PersistenceError
from src.core.models import VcsModel

_LOGGER = logging.getLogger(__name__)

VCS_ADAPTER = TypeAdapter(VcsModel)


class FileVcsRepository:
    """Data stored as JSON files / (de)serialization done by pydantic"""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def get_vcs(self, vcs_id: UUID) -> VcsModel | None:
        """Get stored history by ID, if the file exists."""
        path = self._path(vcs_id)
        if not path.is_file():
            return None
        return self._read(path)

    def create_vcs(self, vcs: VcsModel) -> tuple[VcsModel, UUID]:
        """Store new history and return the stored data + newly created ID."""
        new_id = uuid4()
        self._write(self._path(new_id), vcs)
        _LOGGER.info("Stored version control history %s in %s", new_id, self.directory)
        return self._read(self._path(new_id)), new_id

    def update_vcs(self, vcs_id: UUID, vcs: VcsModel) -> VcsModel | None:
        """Overwrite the file of an existing record."""
        path = self._path(vcs_id)
        if not path.is_file():
            return None
        self._write(path, vcs)
        return self._read(path)

    def delete_vcs(self, vcs_id: UUID) -> VcsModel | None:
        """Remove a record's file."""
        path = self._path(vcs_id)
        if not path.is_file():
            return None
        vcs_model = self._read(path)
        try:
            path.unlink()
        except OSError as error:
            raise PersistenceError(f"Could not delete {path}: {error}") from error
        return vcs_model

    def _path(self, vcs_id: UUID) -> Path:
        return self.directory / f"{vcs_id}.json"

    def _read(self, path: Path) -> VcsModel:
        try:
            return VCS_ADAPTER.validate_json(path.read_bytes())
        except OSError as error:
            raise PersistenceError(f"Could not read {path}: {error}") from error
        except ValidationError as error:
            raise PersistenceError(f"Corrupt version control file {path}: {error}") from error

    def _write(self, path: Path, vcs: VcsModel) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_bytes(VCS_ADAPTER.dump_json(vcs, indent=2))
        except OSError as error:
            raise PersistenceError(f"Could not write {path}: {error}") from error
