"""Change events that keep the search index in sync with the inventory."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

from inventory_search.inventory.domain import EntityType, InventoryRecord


class IndexAction(str, Enum):
    """What an index event asks the pipeline to do."""

    UPSERT = "upsert"
    DELETE = "delete"
    REINDEX = "reindex"


class IndexEvent(BaseModel):
    """Typed change event for the indexing pipeline.

    Attributes:
        id: Unique event identifier (UUID).
        action: Upsert a row, delete a row, or rebuild everything.
        timestamp: Event timestamp in UTC.
        entity_type: Entity type of the affected row.
        record: Row payload for upserts, validated against the entity model.
        record_id: Row identifier for deletes.
        reason: Free-form trigger description, mostly for rebuilds.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique event identifier (UUID)")
    action: IndexAction = Field(description="Requested index operation")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Event timestamp (UTC)")
    entity_type: EntityType | None = Field(default=None, description="Entity type of the row")
    record: dict[str, Any] | None = Field(default=None, description="Row payload for upserts")
    record_id: str | None = Field(default=None, description="Row identifier for deletes")
    reason: str | None = Field(default=None, description="What triggered the event")

    @model_validator(mode="after")
    def _check_payload(self) -> "IndexEvent":
        if self.action is IndexAction.UPSERT and (self.entity_type is None or self.record is None):
            raise ValueError("upsert events need entity_type and record")
        if self.action is IndexAction.DELETE and not (self.record_id or "").strip():
            raise ValueError("delete events need record_id")
        return self

    @classmethod
    def upsert(cls, record: InventoryRecord) -> "IndexEvent":
        """Build an upsert event from a row model."""
        return cls(
            action=IndexAction.UPSERT,
            entity_type=record.entity_type,
            record=record.model_dump(mode="json"),
        )

    @classmethod
    def delete(cls, record_id: str, entity_type: EntityType | None = None) -> "IndexEvent":
        """Build a delete event; all entity types when none is given."""
        return cls(action=IndexAction.DELETE, entity_type=entity_type, record_id=record_id)

    @classmethod
    def reindex(cls, reason: str) -> "IndexEvent":
        """Build a full rebuild event."""
        return cls(action=IndexAction.REINDEX, reason=reason)
