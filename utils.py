"""Utility functions."""
import re
import secrets
from datetime import datetime, timezone
from pathlib import Path

from errors import NotFound

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def resolve_under_root(root: Path, candidate: Path) -> Path:
    """Resolve a path ensuring it's under the root directory."""
    root = root.resolve()
    real = candidate.resolve()
    if root not in real.parents and real != root:
        raise NotFound()
    return real


def extension_of(name: str) -> str:
    """Lower-cased extension including the dot, or an empty string."""
    return Path(name).suffix.lower()


def generate_filename(ext: str) -> str:
    """Timestamped random name, e.g. 20250101123456_abcdef123456.jpg."""
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"{timestamp}_{secrets.token_hex(6)}{ext}"


def sanitize_basename(name: str, ext: str) -> str:
    """Final path component of name without ext, restricted to filesystem-safe characters."""
    base = Path(name.replace("\\", "/")).name
    if ext and base.lower().endswith(ext.lower()):
        base = base[: -len(ext)]
    base = _UNSAFE_CHARS.sub("_", base).strip(".")
    return base or "upload"
