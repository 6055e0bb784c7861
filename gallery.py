"""Gallery listing: enumerate originals, match thumbnails, order newest first."""
from typing import List, Union

from dates import DEFAULT_BATCH_SIZE, resolve_dates
from errors import InternalListingError
from imaging import thumbnail_candidates
from logging_config import get_logger
from models import PhotoRecord
from store import PhotoStore

logger = get_logger(__name__)


class GalleryService:
    """Rebuilds the catalogue from the directory on every call."""

    def __init__(self, store: PhotoStore, batch_size: int = DEFAULT_BATCH_SIZE):
        self.store = store
        self.batch_size = batch_size

    def list(self, include_metadata: bool = False) -> Union[List[str], List[PhotoRecord]]:
        """Originals sorted by resolved date, newest first; unknown dates last."""
        try:
            originals = sorted(self.store.iter_originals(), key=lambda p: p.name)
        except OSError as exc:
            logger.error("Unable to list photo directory: %s", exc)
            raise InternalListingError()

        dates = resolve_dates(originals, batch_size=self.batch_size)
        ordered = sorted(
            zip(originals, dates),
            key=lambda pair: (pair[1].source != "unknown", pair[1].timestamp),
            reverse=True,
        )

        if not include_metadata:
            return [path.name for path, _ in ordered]

        thumbs = self.store.thumbnail_names()
        records = []
        for path, info in ordered:
            thumb = next((c for c in thumbnail_candidates(path.name) if c in thumbs), None)
            records.append(
                PhotoRecord(
                    original=path.name,
                    thumb=thumb,
                    date_taken=info.iso(),
                    date_source=info.source,
                )
            )
        return records
