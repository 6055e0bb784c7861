"""Error taxonomy for the photo gallery."""
from typing import Optional


class GalleryError(Exception):
    """Base error carrying the kind and HTTP status it maps to."""

    kind = "GalleryError"
    status_code = 500
    default_message = "Unexpected error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message, "kind": self.kind}


class UnsupportedType(GalleryError):
    kind = "UnsupportedType"
    status_code = 400
    default_message = "Unsupported file type"


class InvalidImage(GalleryError):
    kind = "InvalidImage"
    status_code = 400
    default_message = "Uploaded file is not a valid image"


class Unauthorized(GalleryError):
    kind = "Unauthorized"
    status_code = 401
    default_message = "Missing or invalid Authorization header"


class NotFound(GalleryError):
    kind = "NotFound"
    status_code = 404
    default_message = "Not found"


class PayloadTooLarge(GalleryError):
    kind = "PayloadTooLarge"
    status_code = 413
    default_message = "File too large"


class TooManyFiles(GalleryError):
    kind = "TooManyFiles"
    status_code = 400
    default_message = "Too many files in one upload"


class RateLimited(GalleryError):
    kind = "RateLimited"
    status_code = 429
    default_message = "Too many upload attempts. Please try again later."

    def __init__(self, message: Optional[str] = None, retry_after: int = 0):
        super().__init__(message)
        self.retry_after = retry_after


class ProcessingFailed(GalleryError):
    kind = "ProcessingFailed"
    status_code = 500
    default_message = "Processing failed"


class ThumbnailGenerationFailed(GalleryError):
    kind = "ThumbnailGenerationFailed"
    status_code = 500
    default_message = "Thumbnail generation failed"


class InternalListingError(GalleryError):
    kind = "InternalListingError"
    status_code = 500
    default_message = "Unable to list photos"
