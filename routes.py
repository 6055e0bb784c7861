"""FastAPI routes for the photo gallery."""
from typing import List, Optional

from fastapi import File, Header, Request, UploadFile
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse

from errors import NotFound, TooManyFiles
from fixtures import TEST_FIXTURES
from logging_config import get_logger
from security import require_token

logger = get_logger(__name__)

# Configuration
CACHE_HEADERS = {"Cache-Control": "public, max-age=31536000, immutable"}


def render(request: Request, name: str, **ctx) -> HTMLResponse:
    """Render template with context."""
    template = request.app.state.jinja_env.get_template(name)
    ctx.setdefault("title", "Photos")
    ctx.setdefault("prefix", request.scope.get("root_path", ""))
    return HTMLResponse(template.render(**ctx))


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def index(request: Request):
    """Gallery page."""
    settings = request.app.state.settings
    return render(
        request,
        "index.html",
        max_files=settings.max_files_per_upload,
    )


def list_photos(request: Request):
    """Originals newest first; `?meta` adds thumbnail and date info."""
    include_meta = "meta" in request.query_params
    photos = request.app.state.gallery.list(include_metadata=include_meta)
    if include_meta:
        return [p.model_dump() for p in photos]
    return photos


def serve_original(request: Request, name: str):
    """Serve an original with immutable cache headers."""
    path = request.app.state.store.original_path(name)
    return FileResponse(path, headers=CACHE_HEADERS)


def serve_thumbnail(request: Request, name: str):
    """Serve a thumbnail by its own name or its original's, generating it if missing."""
    path = request.app.state.store.thumbnail_for(name)
    return FileResponse(path, media_type="image/jpeg", headers=CACHE_HEADERS)


def upload_photos(
    request: Request,
    photo: Optional[List[UploadFile]] = File(None),
    authorization: Optional[str] = Header(None),
):
    """Store 1..N uploaded images; per-file failures do not abort the batch."""
    state = request.app.state
    settings = state.settings
    state.limiter.hit(_client_ip(request))
    require_token(authorization, settings.upload_token)

    files = [f for f in (photo or []) if f is not None]
    if not files:
        return JSONResponse({"error": "No file uploaded"}, status_code=400)
    if len(files) > settings.max_files_per_upload:
        raise TooManyFiles(f"At most {settings.max_files_per_upload} files per upload")

    # At most one byte past the cap; store_batch rejects anything longer than it
    uploads = [(f.filename, f.file.read(settings.max_file_bytes + 1)) for f in files]
    result = state.store.store_batch(uploads, max_file_bytes=settings.max_file_bytes)
    errors = [e.model_dump() for e in result.errors]
    logger.info(
        "Upload from %s: %d stored, %d failed", _client_ip(request), len(result.items), len(errors)
    )

    if not result.success:
        return JSONResponse({"success": False, "errors": errors}, status_code=400)
    payload = {"success": True, "items": [item.item() for item in result.items]}
    if errors:
        payload["errors"] = errors
    return payload


def delete_photo(
    request: Request,
    name: str,
    authorization: Optional[str] = Header(None),
):
    """Delete an original and, best-effort, its thumbnail."""
    state = request.app.state
    state.limiter.hit(_client_ip(request))
    require_token(authorization, state.settings.upload_token)
    result = state.store.delete(name)
    return {"success": True, **result.model_dump()}


def import_test_fixtures(
    request: Request,
    authorization: Optional[str] = Header(None),
):
    """Idempotently seed the embedded sample images."""
    state = request.app.state
    settings = state.settings
    if not settings.enable_test_fixtures:
        raise NotFound()
    require_token(authorization, settings.fixture_token)

    result = state.store.import_fixtures(TEST_FIXTURES)
    payload = {
        "success": result.success,
        "results": [r.model_dump() for r in result.results],
    }
    if result.errors:
        payload["errors"] = [e.model_dump() for e in result.errors]
    return payload
