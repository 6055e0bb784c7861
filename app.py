"""
Photo Gallery – self-hosted photo gallery (FastAPI + Pillow), no database

Quick start
-----------
1) python -m venv .venv && source .venv/bin/activate  # or .venv\\Scripts\\activate on Windows
2) pip install -e .
3) UPLOAD_TOKEN=secret python app.py  # auto-writes templates/static and the photo directories
4) Open http://localhost:3000 → Upload

Notes
-----
• Originals live in $PHOTO_DIR, thumbnails in $PHOTO_DIR/thumbs/.
• The directory listing is the catalogue; there is no index to rebuild.
• Uploads and deletes need `Authorization: Bearer $UPLOAD_TOKEN`.
• Set ENABLE_TEST_FIXTURES=1 to expose POST /api/test/fixtures.
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from jinja2 import Environment, FileSystemLoader, select_autoescape

from config import DEFAULT_UPLOAD_TOKEN, Settings
from errors import GalleryError, RateLimited
from gallery import GalleryService
from logging_config import configure_logging, get_logger
from routes import (
    delete_photo,
    import_test_fixtures,
    index,
    list_photos,
    serve_original,
    serve_thumbnail,
    upload_photos,
)
from security import RateLimiter
from store import PhotoStore
from templates_static import ensure_assets

logger = get_logger(__name__)


async def gallery_error_handler(request: Request, exc: GalleryError) -> JSONResponse:
    """Map domain errors to `{"error", "kind"}` JSON bodies."""
    headers = None
    if isinstance(exc, RateLimited) and exc.retry_after:
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(exc.to_dict(), status_code=exc.status_code, headers=headers)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create the FastAPI app wired to the given settings."""
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    settings.ensure_dirs()
    ensure_assets(settings.templates_dir, settings.static_dir)
    if settings.upload_token == DEFAULT_UPLOAD_TOKEN:
        logger.warning("UPLOAD_TOKEN is not set; using the default token")

    app = FastAPI(title="Photo Gallery")
    app.state.settings = settings
    app.state.store = PhotoStore(
        settings.photo_dir,
        settings.thumbs_dir,
        thumb_width=settings.thumb_width,
        thumb_quality=settings.thumb_quality,
    )
    app.state.gallery = GalleryService(app.state.store, batch_size=settings.date_batch_size)
    app.state.limiter = RateLimiter(settings.upload_rate_limit, settings.upload_rate_window)
    app.state.jinja_env = Environment(
        loader=FileSystemLoader(str(settings.templates_dir)),
        autoescape=select_autoescape(["html", "xml"]),
    )

    app.add_exception_handler(GalleryError, gallery_error_handler)

    # Mount static files
    app.mount("/static", StaticFiles(directory=str(settings.static_dir)), name="static")

    # Routes
    app.get("/", response_class=HTMLResponse)(index)
    app.get("/api/photos")(list_photos)
    app.delete("/api/photos/{name}")(delete_photo)
    app.post("/api/upload")(upload_photos)
    app.post("/api/test/fixtures")(import_test_fixtures)

    app.get("/files/thumbs/{name}")(serve_thumbnail)
    app.get("/files/{name}")(serve_original)

    logger.info(
        "Serving photos from %s (thumbnails in %s, fixtures %s)",
        settings.photo_dir,
        settings.thumbs_dir,
        "enabled" if settings.enable_test_fixtures else "disabled",
    )
    return app


if __name__ == "__main__":
    import uvicorn

    settings = Settings.from_env()
    print(f"→ Open http://localhost:{settings.port}")
    uvicorn.run("app:create_app", factory=True, host=settings.host, port=settings.port)
