"""Cheap magic-byte sniffing for uploaded images.

This is a first line of defence against obviously wrong uploads, not a full
format check: no chunk structure or checksum is verified.
"""
from typing import Optional

from errors import InvalidImage, UnsupportedType

ACCEPTED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
MIN_SIGNATURE_BYTES = 12

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"

EXTENSION_FORMATS = {
    ".jpg": "jpeg",
    ".jpeg": "jpeg",
    ".png": "png",
    ".gif": "gif",
    ".webp": "webp",
}


def is_accepted_extension(ext: Optional[str]) -> bool:
    return bool(ext) and ext.lower() in ACCEPTED_EXTENSIONS


def detect_format(buffer: bytes) -> Optional[str]:
    """Return the image format named by the leading bytes, or None."""
    if not isinstance(buffer, (bytes, bytearray)) or len(buffer) < MIN_SIGNATURE_BYTES:
        return None
    if buffer[:3] == b"\xff\xd8\xff":
        return "jpeg"
    if buffer[:8] == PNG_MAGIC:
        return "png"
    if buffer[:6] in (b"GIF87a", b"GIF89a"):
        return "gif"
    if buffer[:4] == b"RIFF" and buffer[8:12] == b"WEBP":
        return "webp"
    return None


def validate(buffer: bytes, claimed_extension: Optional[str]) -> bool:
    """True when the extension is accepted and the signature matches its format."""
    if not is_accepted_extension(claimed_extension):
        return False
    detected = detect_format(buffer)
    return detected is not None and detected == EXTENSION_FORMATS[claimed_extension.lower()]


def check(buffer: bytes, claimed_extension: Optional[str]) -> None:
    """Raise UnsupportedType or InvalidImage when validate() would fail."""
    if not claimed_extension:
        raise UnsupportedType("Unable to determine file type")
    if not is_accepted_extension(claimed_extension):
        raise UnsupportedType("Unsupported file type")
    if not validate(buffer, claimed_extension):
        raise InvalidImage("Uploaded file is not a valid image")
