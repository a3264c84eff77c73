"""Pydantic schemas for indexed documents, search hits and rebuild progress."""

from pydantic import BaseModel, ConfigDict, Field


class IndexedDocument(BaseModel):
    """Document as stored in the full-text index.

    Attributes:
        id: Source row identifier, unique within its type.
        type: Lower-cased type key used for filtering.
        type_display: Entity tag as shown to users (e.g. serviceContract).
        content: Type key followed by every non-blank field.
        display_text: Short label for result lists.
        snippet: Content excerpt without the type key and display text.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    type_display: str
    content: str
    display_text: str
    snippet: str = ""


class SearchHit(BaseModel):
    """Single search result.

    Attributes:
        id: Source row identifier.
        type: Entity tag as shown to users.
        text: Display text of the matched document.
        snippet: Context excerpt, omitted when empty.
    """

    id: str
    type: str
    text: str
    snippet: str | None = None


class ProgressStatus(BaseModel):
    """Snapshot of a full rebuild in progress.

    Attributes:
        active: Whether a rebuild is currently running.
        totals: Planned document count per entity type.
        done: Documents indexed so far per entity type.
        grand_total: Sum of all totals.
        total_done: Sum of all done counters.
        percent: Completion percentage, 100 when no rebuild is running.
        started_at_ms: Epoch milliseconds when the last rebuild started.
        now_ms: Epoch milliseconds when the snapshot was taken.
    """

    model_config = ConfigDict(frozen=True)

    active: bool
    totals: dict[str, int] = Field(default_factory=dict)
    done: dict[str, int] = Field(default_factory=dict)
    grand_total: int = 0
    total_done: int = 0
    percent: int = Field(default=100, ge=0, le=100)
    started_at_ms: int = 0
    now_ms: int = 0
