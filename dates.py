"""Capture-date resolution used to order the gallery.

Priority, first success wins:

1. EXIF parsed from the first 64 KiB of the file.
2. EXIF blob extracted by Pillow from the full file.
3. Filesystem modification time.
4. Epoch zero with source ``unknown`` so the photo sorts last.

EXIF timestamps carry no zone and are interpreted as naive local time.
"""
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

import piexif
from PIL import Image as PILImage

from logging_config import get_logger
from models import DateInfo

logger = get_logger(__name__)

# Configuration
EXIF_PREFIX_BYTES = 64 * 1024
DEFAULT_BATCH_SIZE = 10
EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"

# (label, IFD, tag) in priority order
DATE_FIELDS = [
    ("DateTimeOriginal", "Exif", piexif.ExifIFD.DateTimeOriginal),
    ("CreateDate", "Exif", piexif.ExifIFD.DateTimeDigitized),
    ("ModifyDate", "0th", piexif.ImageIFD.DateTime),
    ("ThumbnailDateTime", "1st", piexif.ImageIFD.DateTime),
]


def _looks_like_exif_container(data: bytes) -> bool:
    return (
        data[:2] == b"\xff\xd8"
        or data[:2] in (b"II", b"MM")
        or (data[:4] == b"RIFF" and data[8:12] == b"WEBP")
        or data[:4] == b"Exif"
    )


def parse_exif_timestamp(value) -> Optional[float]:
    """Parse an EXIF date string as naive local time."""
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    if not isinstance(value, str):
        return None
    value = value.strip().strip("\x00")
    if not value:
        return None
    try:
        return datetime.strptime(value[:19], EXIF_DATE_FORMAT).timestamp()
    except (ValueError, OverflowError, OSError):
        return None


def timestamp_from_exif(data: bytes) -> Optional[float]:
    """First parseable capture date from an EXIF-bearing byte string, or None."""
    if not data or not _looks_like_exif_container(data):
        return None
    try:
        exif = piexif.load(data)
    except Exception as exc:
        logger.debug("EXIF parse failed: %s", exc)
        return None
    for label, ifd, tag in DATE_FIELDS:
        ts = parse_exif_timestamp((exif.get(ifd) or {}).get(tag))
        if ts is not None:
            logger.debug("Using EXIF %s", label)
            return ts
    return None


def _read_prefix(path: Path) -> bytes:
    with path.open("rb") as f:
        return f.read(EXIF_PREFIX_BYTES)


def embedded_exif_blob(path: Path) -> Optional[bytes]:
    """EXIF blob as extracted by Pillow from the whole file."""
    with PILImage.open(path) as im:
        blob = im.info.get("exif")
        if blob:
            return blob
        exif = im.getexif()
        return exif.tobytes() if exif else None


def resolve_date(path: Path) -> DateInfo:
    """Resolve the ordering date of one file. Never raises."""
    path = Path(path)
    try:
        ts = timestamp_from_exif(_read_prefix(path))
        if ts is not None:
            return DateInfo(timestamp=ts, source="exif")
    except OSError as exc:
        logger.debug("Could not read header of %s: %s", path.name, exc)

    try:
        ts = timestamp_from_exif(embedded_exif_blob(path))
        if ts is not None:
            return DateInfo(timestamp=ts, source="exif")
    except Exception as exc:
        logger.debug("Pillow metadata unavailable for %s: %s", path.name, exc)

    try:
        return DateInfo(timestamp=path.stat().st_mtime, source="mtime")
    except OSError as exc:
        logger.debug("Could not stat %s: %s", path.name, exc)
    return DateInfo(timestamp=0.0, source="unknown")


def resolve_dates(paths: Iterable[Path], batch_size: int = DEFAULT_BATCH_SIZE) -> List[DateInfo]:
    """Resolve dates in fixed-size batches; each batch finishes before the next starts."""
    paths = list(paths)
    batch_size = max(1, int(batch_size))
    results: List[DateInfo] = []
    with ThreadPoolExecutor(max_workers=min(batch_size, max(1, len(paths)))) as ex:
        for start in range(0, len(paths), batch_size):
            batch = paths[start:start + batch_size]
            results.extend(ex.map(resolve_date, batch))
    return results
