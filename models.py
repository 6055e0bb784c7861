"""Result and record models for the photo gallery."""
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field


class DateInfo(BaseModel):
    """Resolved capture date used for ordering. Unknown dates carry timestamp 0."""
    timestamp: float = 0.0
    source: str = "unknown"

    def iso(self) -> Optional[str]:
        if self.source == "unknown":
            return None
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc).isoformat()


class PhotoRecord(BaseModel):
    """One gallery entry, rebuilt from the directory on every listing."""
    original: str
    thumb: Optional[str] = None
    date_taken: Optional[str] = None
    date_source: str = "unknown"


class ThumbnailOutcome(BaseModel):
    """Result of one thumbnail render; never raised as an error."""
    ok: bool
    name: Optional[str] = None
    error: Optional[str] = None


class StoreResult(BaseModel):
    """Outcome of storing one original. Thumbnail failure does not fail the store."""
    filename: str
    thumb: Optional[str] = None
    skipped: bool = False
    thumbnail_error: Optional[str] = None

    def item(self) -> dict:
        data = {"filename": self.filename, "thumb": self.thumb}
        if self.thumbnail_error:
            data["warning"] = "Thumbnail generation failed"
        return data


class ItemError(BaseModel):
    """Per-file failure inside an upload batch."""
    original: Optional[str] = None
    error: str
    kind: str


class BatchResult(BaseModel):
    """Stored items and per-file errors of one upload."""
    items: List[StoreResult] = Field(default_factory=list)
    errors: List[ItemError] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return len(self.items) > 0


class FixtureResult(BaseModel):
    """One fixture written or found already present."""
    fixture: str
    filename: str
    thumb: Optional[str] = None
    skipped: bool = False


class FixtureError(BaseModel):
    """A fixture that could not be stored."""
    fixture: str
    error: str
    kind: str


class FixtureImportResult(BaseModel):
    """Outcome of seeding the embedded fixtures."""
    results: List[FixtureResult] = Field(default_factory=list)
    errors: List[FixtureError] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return any(not r.skipped for r in self.results)


class DeleteResult(BaseModel):
    """What a delete removed."""
    photo_deleted: bool
    thumbnail_deleted: bool = False
