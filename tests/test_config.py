"""Tests for environment-driven settings."""

from pathlib import Path

from config import DEFAULT_UPLOAD_TOKEN, Settings


def test_defaults(monkeypatch):
    for name in (
        "PHOTO_DIR",
        "UPLOAD_TOKEN",
        "PORT",
        "MAX_FILE_BYTES",
        "MAX_FILES_PER_UPLOAD",
        "ENABLE_TEST_FIXTURES",
        "TEST_FIXTURE_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()
    assert settings.upload_token == DEFAULT_UPLOAD_TOKEN
    assert settings.port == 3000
    assert settings.max_file_bytes == 10 * 1024 * 1024
    assert settings.max_files_per_upload == 10
    assert settings.enable_test_fixtures is False
    assert settings.fixture_token == DEFAULT_UPLOAD_TOKEN
    assert settings.thumbs_dir == settings.photo_dir / "thumbs"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("PHOTO_DIR", str(tmp_path / "pics"))
    monkeypatch.setenv("UPLOAD_TOKEN", "abc")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("MAX_FILES_PER_UPLOAD", "3")
    monkeypatch.setenv("ENABLE_TEST_FIXTURES", "Yes")
    monkeypatch.setenv("TEST_FIXTURE_TOKEN", "fixtures")

    settings = Settings.from_env()
    assert settings.photo_dir == Path(tmp_path / "pics")
    assert settings.upload_token == "abc"
    assert settings.port == 8080
    assert settings.max_files_per_upload == 3
    assert settings.enable_test_fixtures is True
    assert settings.fixture_token == "fixtures"


def test_fixture_flag_accepts_only_truthy_words(monkeypatch):
    monkeypatch.setenv("ENABLE_TEST_FIXTURES", "0")
    assert Settings.from_env().enable_test_fixtures is False
    monkeypatch.setenv("ENABLE_TEST_FIXTURES", "TRUE")
    assert Settings.from_env().enable_test_fixtures is True


def test_ensure_dirs(tmp_path):
    settings = Settings(photo_dir=tmp_path / "a" / "b")
    settings.ensure_dirs()
    assert settings.thumbs_dir.is_dir()
