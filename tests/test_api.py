"""End-to-end tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from app import create_app

from conftest import SAMPLE_PNG, TOKEN, auth, make_png


def upload(client, *files, headers=None):
    return client.post(
        "/api/upload",
        files=[("photo", (name, data, "image/png")) for name, data in files],
        headers=auth() if headers is None else headers,
    )


# ---------------------------------------------------------------------------
# Listing and serving
# ---------------------------------------------------------------------------


def test_photos_empty_initially(client):
    response = client.get("/api/photos")
    assert response.status_code == 200
    assert response.json() == []


def test_index_page_renders(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "uploadForm" in response.text
    assert client.get("/static/script.js").status_code == 200


def test_upload_list_and_fetch(client, settings):
    response = upload(client, ("sample.png", SAMPLE_PNG))
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert len(body["items"]) == 1
    saved = body["items"][0]["filename"]
    assert (settings.photo_dir / saved).exists()

    listing = client.get("/api/photos?meta=1").json()
    assert len(listing) == 1
    assert listing[0]["original"] == saved
    assert listing[0]["date_source"] == "mtime"
    assert listing[0]["date_taken"]

    assert client.get("/api/photos").json() == [saved]

    original = client.get(f"/files/{saved}")
    assert original.status_code == 200
    assert len(original.content) > 0
    assert original.headers["cache-control"] == "public, max-age=31536000, immutable"


def test_serving_rejects_unknown_names(client, settings):
    (settings.photo_dir / "secret.txt").write_text("nope")
    assert client.get("/files/secret.txt").status_code == 404
    assert client.get("/files/missing.png").status_code == 404
    assert client.get("/files/thumbs/missing.png").status_code == 404
    assert client.get("/files/thumbs/secret.txt").status_code == 404


def test_thumbnail_generated_on_demand_then_cached(client, settings):
    (settings.photo_dir / "a.png").write_bytes(make_png())

    first = client.get("/files/thumbs/a.png")
    assert first.status_code == 200
    assert first.content[:3] == b"\xff\xd8\xff"
    thumb = settings.thumbs_dir / "a.thumb.jpg"
    mtime = thumb.stat().st_mtime_ns

    second = client.get("/files/thumbs/a.png")
    assert second.status_code == 200
    assert second.content == first.content
    assert thumb.stat().st_mtime_ns == mtime

    direct = client.get("/files/thumbs/a.thumb.jpg")
    assert direct.status_code == 200
    assert direct.content == first.content


def test_thumbnail_generation_failure_is_500(client, settings):
    (settings.photo_dir / "broken.png").write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 32)
    response = client.get("/files/thumbs/broken.png")
    assert response.status_code == 500
    assert response.json()["kind"] == "ThumbnailGenerationFailed"


# ---------------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------------


def test_upload_without_authorization_is_401(client):
    response = upload(client, ("missing-auth.png", make_png()), headers={})
    assert response.status_code == 401
    assert "Authorization" in response.json()["error"]


def test_upload_with_wrong_token_is_401(client, settings):
    response = upload(client, ("a.png", make_png()), headers=auth("test-tokex"))
    assert response.status_code == 401
    assert response.json()["kind"] == "Unauthorized"
    assert list(settings.photo_dir.glob("*.png")) == []


def test_upload_without_files_is_400(client):
    response = client.post("/api/upload", data={"note": "x"}, headers=auth())
    assert response.status_code == 400
    assert response.json()["error"] == "No file uploaded"


def test_partial_failure(client):
    response = upload(
        client,
        ("good.png", make_png()),
        ("notes.png", b"these are my notes, not a picture"),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert len(body["items"]) == 1
    assert len(body["errors"]) == 1
    assert body["errors"][0]["original"] == "notes.png"
    assert body["errors"][0]["kind"] == "InvalidImage"


def test_all_files_failing_is_400(client):
    response = upload(client, ("notes.png", b"these are my notes, not a picture"))
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["errors"][0]["kind"] == "InvalidImage"


def test_too_many_files_is_400(settings):
    settings.max_files_per_upload = 1
    with TestClient(create_app(settings)) as client:
        response = upload(client, ("a.png", make_png()), ("b.png", make_png()))
    assert response.status_code == 400
    assert response.json()["kind"] == "TooManyFiles"


def test_oversize_file_is_reported(settings):
    settings.max_file_bytes = 16
    with TestClient(create_app(settings)) as client:
        response = upload(client, ("a.png", make_png()))
    assert response.status_code == 400
    assert response.json()["errors"][0]["kind"] == "PayloadTooLarge"


def test_oversize_upload_is_read_only_up_to_the_cap(settings):
    settings.max_file_bytes = 16
    app = create_app(settings)
    store = app.state.store
    real_store_batch = store.store_batch
    seen = []

    def store_batch(uploads, max_file_bytes=None):
        uploads = list(uploads)
        seen.extend(len(data) for _, data in uploads)
        return real_store_batch(uploads, max_file_bytes=max_file_bytes)

    store.store_batch = store_batch
    with TestClient(app) as client:
        response = upload(client, ("a.png", make_png() + b"\x00" * 4096))

    assert response.status_code == 400
    assert response.json()["errors"][0]["kind"] == "PayloadTooLarge"
    assert seen == [17]


def test_upload_is_rate_limited(settings):
    settings.upload_rate_limit = 2
    with TestClient(create_app(settings)) as client:
        assert upload(client, ("a.png", make_png())).status_code == 200
        assert upload(client, ("b.png", make_png())).status_code == 200
        limited = upload(client, ("c.png", make_png()))
    assert limited.status_code == 429
    assert "Retry-After" in limited.headers


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


def test_delete_photo(client, settings):
    saved = upload(client, ("a.png", make_png())).json()["items"][0]

    response = client.delete(f"/api/photos/{saved['filename']}", headers=auth())
    assert response.status_code == 200
    assert response.json() == {"success": True, "photo_deleted": True, "thumbnail_deleted": True}
    assert client.get("/api/photos").json() == []
    assert not (settings.thumbs_dir / saved["thumb"]).exists()

    again = client.delete(f"/api/photos/{saved['filename']}", headers=auth())
    assert again.status_code == 404


def test_delete_requires_auth(client, settings):
    (settings.photo_dir / "a.png").write_bytes(make_png())
    assert client.delete("/api/photos/a.png").status_code == 401
    assert client.delete("/api/photos/a.png", headers=auth("nope")).status_code == 401
    assert (settings.photo_dir / "a.png").exists()


def test_delete_rejects_unlisted_extension(client, settings):
    (settings.photo_dir / "a.txt").write_text("x")
    assert client.delete("/api/photos/a.txt", headers=auth()).status_code == 404
    assert (settings.photo_dir / "a.txt").exists()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def test_fixtures_disabled_by_default(client):
    response = client.post("/api/test/fixtures", headers=auth())
    assert response.status_code == 404


@pytest.fixture
def fixture_client(settings):
    settings.enable_test_fixtures = True
    settings.test_fixture_token = "fixture-token"
    with TestClient(create_app(settings)) as client:
        yield client


def test_fixtures_use_their_own_token(fixture_client):
    assert fixture_client.post("/api/test/fixtures", headers=auth(TOKEN)).status_code == 401


def test_fixture_seeding_is_idempotent(fixture_client):
    first = fixture_client.post("/api/test/fixtures", headers=auth("fixture-token"))
    assert first.status_code == 200
    body = first.json()
    assert body["success"] is True
    assert [r["fixture"] for r in body["results"]] == ["fixture-red", "fixture-green", "fixture-blue"]
    assert not any(r["skipped"] for r in body["results"])

    second = fixture_client.post("/api/test/fixtures", headers=auth("fixture-token")).json()
    assert second["success"] is False
    assert all(r["skipped"] for r in second["results"])
    assert len(fixture_client.get("/api/photos").json()) == 3
