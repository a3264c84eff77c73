"""Read-only access to inventory rows."""

import json
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Generic, Protocol, TypeVar

import structlog
from pydantic import ValidationError

from inventory_search.inventory.domain import RECORD_MODELS, EntityType, InventoryRecord

logger = structlog.get_logger()

R = TypeVar("R", bound=InventoryRecord, covariant=True)
M = TypeVar("M", bound=InventoryRecord)


class RepositoryError(Exception):
    """Raised when a repository cannot be read."""

    def __init__(self, message: str, source: str) -> None:
        """Initialize repository error.

        Args:
            message: Error description.
            source: File or store that failed.
        """
        super().__init__(message)
        self.source = source


class Repository(Protocol[R]):
    """Anything that can list every row of one entity type."""

    def find_all(self) -> Sequence[R]: ...


class InMemoryRepository(Generic[M]):
    """Repository over a fixed list of rows."""

    def __init__(self, rows: Iterable[M] = ()) -> None:
        self._rows = list(rows)

    def find_all(self) -> Sequence[M]:
        return list(self._rows)

    def add(self, row: M) -> None:
        self._rows.append(row)


class JsonFileRepository(Generic[M]):
    """Repository backed by a JSON array of rows on disk.

    The file is re-read on every call so a rebuild always sees the current
    export. A missing file means no rows; rows that fail validation are
    skipped with a warning.
    """

    def __init__(self, path: Path, model: type[M]) -> None:
        """Initialize JSON repository.

        Args:
            path: Location of the JSON export.
            model: Row model used to validate each element.
        """
        self.path = path
        self.model = model

    def find_all(self) -> Sequence[M]:
        """Load and validate every row.

        Returns:
            Valid rows in file order.

        Raises:
            RepositoryError: If the file exists but cannot be read or parsed.
        """
        if not self.path.exists():
            logger.warning("repository_file_missing", path=str(self.path))
            return []

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise RepositoryError(f"Failed to read {self.path}: {e}", str(self.path)) from e

        if not isinstance(data, list):
            raise RepositoryError(f"Expected a JSON array in {self.path}", str(self.path))

        rows: list[M] = []
        for position, item in enumerate(data):
            try:
                rows.append(self.model.model_validate(item))
            except ValidationError as e:
                logger.warning(
                    "repository_row_invalid",
                    path=str(self.path),
                    position=position,
                    errors=e.error_count(),
                )
        return rows


def load_repositories(data_dir: Path) -> dict[EntityType, Repository[InventoryRecord]]:
    """Create one JSON repository per entity type.

    Args:
        data_dir: Directory holding ``<entityType>.json`` exports.

    Returns:
        Repositories keyed by entity type, in entity declaration order.
    """
    return {
        entity: JsonFileRepository(data_dir / f"{entity.value}.json", model)
        for entity, model in RECORD_MODELS.items()
    }
