"""Shared fixtures for the photo gallery tests."""

import base64
import io

import piexif
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from app import create_app
from config import Settings
from store import PhotoStore

TOKEN = "test-token"

# 1x1 PNG used by the end-to-end upload scenario
SAMPLE_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mP8/x8AAuMBg5v4vBYAAAAASUVORK5CYII="
)


def make_png(color="red", size=(8, 6)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def make_jpeg(date_taken=None, size=(16, 12)) -> bytes:
    """JPEG bytes, optionally carrying an EXIF DateTimeOriginal."""
    buf = io.BytesIO()
    kwargs = {}
    if date_taken:
        kwargs["exif"] = piexif.dump({"Exif": {piexif.ExifIFD.DateTimeOriginal: date_taken.encode()}})
    Image.new("RGB", size, "blue").save(buf, format="JPEG", **kwargs)
    return buf.getvalue()


def auth(token=TOKEN) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def settings(tmp_path):
    return Settings(
        photo_dir=tmp_path / "photos",
        upload_token=TOKEN,
        templates_dir=tmp_path / "templates",
        static_dir=tmp_path / "static",
        upload_rate_limit=1000,
    )


@pytest.fixture
def store(settings):
    settings.ensure_dirs()
    return PhotoStore(settings.photo_dir, settings.thumbs_dir)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client
