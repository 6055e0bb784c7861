"""Application configuration loaded from the environment."""
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables from .env file.
load_dotenv()

# Configuration
APP_DIR = Path(__file__).resolve().parent
DEFAULT_PHOTO_DIR = APP_DIR / "photos"
DEFAULT_UPLOAD_TOKEN = "changeme"
THUMBS_DIRNAME = "thumbs"


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


class Settings(BaseModel):
    """Settings shared by the store, the listing service and the HTTP layer."""

    photo_dir: Path = Field(default=DEFAULT_PHOTO_DIR, description="Directory holding originals.")
    upload_token: str = Field(default=DEFAULT_UPLOAD_TOKEN, description="Bearer token for upload and delete.")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)
    max_file_bytes: int = Field(default=10 * 1024 * 1024, description="Per-file upload limit.")
    max_files_per_upload: int = Field(default=10, description="Files accepted in one upload request.")
    enable_test_fixtures: bool = Field(default=False)
    test_fixture_token: Optional[str] = Field(default=None, description="Falls back to the upload token.")
    upload_rate_limit: int = Field(default=10, description="Requests per client IP per window.")
    upload_rate_window: int = Field(default=15 * 60, description="Rate limit window in seconds.")
    thumb_width: int = Field(default=450)
    thumb_quality: int = Field(default=80)
    date_batch_size: int = Field(default=10, description="Concurrent date resolutions per batch.")
    log_level: str = Field(default="INFO")
    templates_dir: Path = Field(default=APP_DIR / "templates")
    static_dir: Path = Field(default=APP_DIR / "static")

    @property
    def thumbs_dir(self) -> Path:
        return self.photo_dir / THUMBS_DIRNAME

    @property
    def fixture_token(self) -> str:
        return self.test_fixture_token or self.upload_token

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, keeping defaults for anything unset."""
        return cls(
            photo_dir=Path(os.getenv("PHOTO_DIR") or DEFAULT_PHOTO_DIR),
            upload_token=os.getenv("UPLOAD_TOKEN") or DEFAULT_UPLOAD_TOKEN,
            host=os.getenv("HOST", "0.0.0.0"),
            port=_env_int("PORT", 3000),
            max_file_bytes=_env_int("MAX_FILE_BYTES", 10 * 1024 * 1024),
            max_files_per_upload=_env_int("MAX_FILES_PER_UPLOAD", 10),
            enable_test_fixtures=_env_flag("ENABLE_TEST_FIXTURES"),
            test_fixture_token=os.getenv("TEST_FIXTURE_TOKEN") or None,
            upload_rate_limit=_env_int("UPLOAD_RATE_LIMIT", 10),
            upload_rate_window=_env_int("UPLOAD_RATE_WINDOW", 15 * 60),
            thumb_width=_env_int("THUMB_WIDTH", 450),
            thumb_quality=_env_int("THUMB_QUALITY", 80),
            date_batch_size=_env_int("DATE_BATCH_SIZE", 10),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def ensure_dirs(self) -> None:
        """Create the originals and thumbnail directories."""
        self.photo_dir.mkdir(parents=True, exist_ok=True)
        self.thumbs_dir.mkdir(parents=True, exist_ok=True)


__all__ = ["Settings", "DEFAULT_UPLOAD_TOKEN"]
