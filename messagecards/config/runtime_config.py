"""Runtime configuration helpers."""
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional

DEFAULT_SHARE_BASE_URL = "http://localhost:8081"
DEFAULT_CARDS_API_BASE_URL = "http://localhost:8000"


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(name, default)


def get_env() -> str:
    return (_get_env("ENV") or _get_env("APP_ENV") or "dev").lower()


def get_log_level() -> str:
    return (_get_env("LOG_LEVEL") or "INFO").upper()


def get_cards_backend() -> str:
    return (_get_env("CARDS_BACKEND") or "memory").lower()


def get_cards_fs_dir() -> Path:
    raw = _get_env("CARDS_BACKEND_FS_DIR")
    return Path(raw) if raw else Path(tempfile.gettempdir()) / "message_cards"


def get_view_state_dir() -> Path:
    raw = _get_env("VIEW_STATE_DIR")
    return Path(raw) if raw else Path.home() / ".messagecards"


def get_firestore_project() -> Optional[str]:
    return _get_env("GCP_PROJECT_ID") or _get_env("GCP_PROJECT")


def get_share_base_url() -> str:
    return (_get_env("SHARE_BASE_URL") or DEFAULT_SHARE_BASE_URL).rstrip("/")


def get_cards_api_base_url() -> str:
    return (_get_env("CARDS_API_BASE_URL") or DEFAULT_CARDS_API_BASE_URL).rstrip("/")
