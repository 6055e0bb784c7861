"""Filesystem-backed photo store: validate, persist, thumbnail."""
import base64
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from errors import (
    GalleryError,
    NotFound,
    PayloadTooLarge,
    ProcessingFailed,
    ThumbnailGenerationFailed,
    UnsupportedType,
)
from imaging import (
    DEFAULT_THUMB_QUALITY,
    DEFAULT_THUMB_WIDTH,
    make_thumbnail,
    thumbnail_candidates,
    thumbnail_name,
)
from logging_config import get_logger
from models import (
    BatchResult,
    DeleteResult,
    FixtureError,
    FixtureImportResult,
    FixtureResult,
    ItemError,
    StoreResult,
)
from utils import extension_of, generate_filename, resolve_under_root, sanitize_basename
from validation import check, is_accepted_extension

logger = get_logger(__name__)


class PhotoStore:
    """Originals live in photo_dir, thumbnails in thumbs_dir; the directories are the catalogue."""

    def __init__(
        self,
        photo_dir: Path,
        thumbs_dir: Path,
        thumb_width: int = DEFAULT_THUMB_WIDTH,
        thumb_quality: int = DEFAULT_THUMB_QUALITY,
    ):
        self.photo_dir = Path(photo_dir)
        self.thumbs_dir = Path(thumbs_dir)
        self.thumb_width = thumb_width
        self.thumb_quality = thumb_quality

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def iter_originals(self) -> Iterable[Path]:
        """Files in photo_dir with an accepted extension. OSError propagates."""
        for p in self.photo_dir.iterdir():
            if is_accepted_extension(p.suffix) and p.is_file():
                yield p

    def thumbnail_names(self) -> set:
        """One listing of thumbs_dir; an unreadable directory yields an empty set."""
        try:
            return {p.name for p in self.thumbs_dir.iterdir()}
        except OSError as exc:
            logger.warning("Unable to list thumbnail directory: %s", exc)
            return set()

    def original_path(self, name: str) -> Path:
        """Path of an existing original; NotFound for anything else."""
        if not is_accepted_extension(extension_of(name)):
            raise NotFound()
        path = resolve_under_root(self.photo_dir, self.photo_dir / name)
        if path.parent != self.photo_dir.resolve() or not path.is_file():
            raise NotFound()
        return path

    def _thumb_path(self, name: str) -> Optional[Path]:
        try:
            path = resolve_under_root(self.thumbs_dir, self.thumbs_dir / name)
        except NotFound:
            return None
        return path if path.is_file() else None

    def existing_thumbnail(self, original: str) -> Optional[Path]:
        """First thumbnail candidate present on disk for an original."""
        for candidate in thumbnail_candidates(original):
            path = self._thumb_path(candidate)
            if path is not None:
                return path
        return None

    def find_thumbnail(self, name: str) -> Optional[Path]:
        """A thumbnail requested by its own name, or mapped from an original name."""
        if not is_accepted_extension(extension_of(name)):
            raise NotFound()
        direct = self._thumb_path(name)
        if direct is not None:
            return direct
        return self.existing_thumbnail(name)

    def thumbnail_for(self, name: str) -> Path:
        """Serve an existing thumbnail, generating it from the original when missing."""
        found = self.find_thumbnail(name)
        if found is not None:
            return found
        original = self.original_path(name)
        dest = self.thumbs_dir / thumbnail_name(original.name)
        outcome = make_thumbnail(original, dest, self.thumb_width, self.thumb_quality)
        if not outcome.ok:
            raise ThumbnailGenerationFailed()
        logger.info("Generated missing thumbnail %s", dest.name)
        return dest

    # ------------------------------------------------------------------
    # Store
    # ------------------------------------------------------------------
    def store(
        self,
        data: bytes,
        original_name: Optional[str],
        force_basename: Optional[str] = None,
        overwrite: bool = True,
    ) -> StoreResult:
        """Validate and persist one original, then try to thumbnail it."""
        source_name = force_basename or original_name or "upload"
        ext = extension_of(source_name)
        if not ext:
            raise UnsupportedType("Unable to determine file type")
        check(data, ext)

        if force_basename:
            target_name = f"{sanitize_basename(force_basename, ext)}{ext}"
        else:
            target_name = generate_filename(ext)
        dest = self.photo_dir / target_name

        if not overwrite and dest.is_file():
            thumb = self.existing_thumbnail(target_name)
            thumb_error = None
            if thumb is None:
                outcome = self._thumbnail_from(data, target_name)
                thumb_error = outcome.error
                thumb_name = outcome.name
            else:
                thumb_name = thumb.name
            logger.info("Skipped existing %s", target_name)
            return StoreResult(
                filename=target_name, thumb=thumb_name, skipped=True, thumbnail_error=thumb_error
            )

        dest.write_bytes(data)
        outcome = self._thumbnail_from(data, target_name)
        logger.info("Stored %s (%d bytes)", target_name, len(data))
        return StoreResult(
            filename=target_name, thumb=outcome.name, skipped=False, thumbnail_error=outcome.error
        )

    def _thumbnail_from(self, data: bytes, original: str):
        dest = self.thumbs_dir / thumbnail_name(original)
        return make_thumbnail(data, dest, self.thumb_width, self.thumb_quality)

    def store_batch(
        self, uploads: Iterable[Tuple[str, bytes]], max_file_bytes: Optional[int] = None
    ) -> BatchResult:
        """Store each upload independently; failures become per-item errors."""
        result = BatchResult()
        for name, data in uploads:
            try:
                if max_file_bytes is not None and len(data) > max_file_bytes:
                    raise PayloadTooLarge()
                result.items.append(self.store(data, name))
            except GalleryError as exc:
                result.errors.append(ItemError(original=name, error=exc.message, kind=exc.kind))
            except Exception:
                logger.exception("Error processing file %s", name)
                err = ProcessingFailed()
                result.errors.append(ItemError(original=name or "unknown", error=err.message, kind=err.kind))
        return result

    def import_fixtures(self, fixtures: List[dict]) -> FixtureImportResult:
        """Idempotently seed the embedded fixtures under stable names."""
        result = FixtureImportResult()
        for fixture in fixtures:
            slug = fixture["slug"]
            try:
                data = base64.b64decode(fixture["base64"])
                stored = self.store(
                    data,
                    fixture["filename"],
                    force_basename=fixture["filename"],
                    overwrite=False,
                )
            except GalleryError as exc:
                result.errors.append(FixtureError(fixture=slug, error=exc.message, kind=exc.kind))
                continue
            except Exception:
                logger.exception("Error loading test fixture %s", slug)
                err = ProcessingFailed()
                result.errors.append(FixtureError(fixture=slug, error=err.message, kind=err.kind))
                continue
            result.results.append(
                FixtureResult(
                    fixture=slug,
                    filename=stored.filename,
                    thumb=stored.thumb,
                    skipped=stored.skipped,
                )
            )
        return result

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------
    def delete(self, name: str) -> DeleteResult:
        """Remove an original and, best-effort, its thumbnail."""
        original = self.original_path(name)
        try:
            original.unlink()
        except FileNotFoundError:
            raise NotFound()
        logger.info("Deleted %s", original.name)

        thumbnail_deleted = False
        thumb = self.existing_thumbnail(original.name)
        if thumb is None:
            logger.info("No thumbnail to delete for %s", original.name)
        else:
            try:
                thumb.unlink()
                thumbnail_deleted = True
            except OSError as exc:
                logger.warning("Could not delete thumbnail %s: %s", thumb.name, exc)
        return DeleteResult(photo_deleted=True, thumbnail_deleted=thumbnail_deleted)
