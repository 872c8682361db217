from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Optional


def now_timestamp_str() -> str:
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def normalize_str(s: str | None) -> str:
    return (s or "").strip().lower()


def safe_int(value: str | int | None) -> int | None:
    if value is None:
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back to default when unset or invalid."""
    v = safe_int(os.getenv(name))
    return default if v is None else v


def env_flag(name: str) -> bool:
    return normalize_str(os.getenv(name)) in {"1", "true", "yes", "on"}


def env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v else default
