"""Thumbnail generation with Pillow."""
import contextlib
import io
import os
import secrets
from pathlib import Path
from typing import List, Union

from PIL import Image as PILImage, ImageOps

from logging_config import get_logger
from models import ThumbnailOutcome

logger = get_logger(__name__)

# Configuration
THUMB_SUFFIX = ".thumb.jpg"
LEGACY_THUMB_SUFFIX = ".jpg"
DEFAULT_THUMB_WIDTH = 450
DEFAULT_THUMB_QUALITY = 80


def thumbnail_name(original: str) -> str:
    """Name written for the thumbnail of an original."""
    return f"{Path(original).stem}{THUMB_SUFFIX}"


def thumbnail_candidates(original: str) -> List[str]:
    """Names tried on lookup: current pattern first, then the legacy one."""
    base = Path(original).stem
    return [f"{base}{THUMB_SUFFIX}", f"{base}{LEGACY_THUMB_SUFFIX}"]


def render_thumbnail(
    source: Union[bytes, Path],
    width: int = DEFAULT_THUMB_WIDTH,
    quality: int = DEFAULT_THUMB_QUALITY,
) -> bytes:
    """Return JPEG bytes of source scaled to width, upright per its EXIF orientation."""
    fp = io.BytesIO(source) if isinstance(source, (bytes, bytearray)) else source
    with PILImage.open(fp) as im:
        im = ImageOps.exif_transpose(im)
        height = max(1, round(im.height * width / im.width))
        im = im.resize((width, height), PILImage.LANCZOS)
        rgb = im.convert("RGB")
        out = io.BytesIO()
        rgb.save(out, format="JPEG", quality=quality)
    return out.getvalue()


def make_thumbnail(
    source: Union[bytes, Path],
    dest: Path,
    width: int = DEFAULT_THUMB_WIDTH,
    quality: int = DEFAULT_THUMB_QUALITY,
) -> ThumbnailOutcome:
    """Write a thumbnail to dest. Failures are logged and reported, never raised."""
    tmp = dest.with_name(f".{dest.name}.{secrets.token_hex(4)}.tmp")
    try:
        data = render_thumbnail(source, width=width, quality=quality)
        tmp.write_bytes(data)
        # readers never observe a partially written thumbnail
        os.replace(tmp, dest)
    except Exception as exc:
        logger.warning("Error generating thumbnail %s: %s", dest.name, exc, exc_info=True)
        with contextlib.suppress(OSError):
            tmp.unlink()
        return ThumbnailOutcome(ok=False, name=None, error=str(exc) or exc.__class__.__name__)
    return ThumbnailOutcome(ok=True, name=dest.name)
