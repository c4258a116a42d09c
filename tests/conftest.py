from __future__ import annotations

import sys
from pathlib import Path

import pytest

SDK_SRC = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SDK_SRC))

BASE_URL = "https://api.example.com/api"

_ENV_KEYS = (
    "POS_ADMIN_ENV",
    "POS_ADMIN_API_BASE_URL_DEV",
    "POS_ADMIN_TIMEOUT_SECONDS",
    "POS_ADMIN_CONNECT_TIMEOUT_SECONDS",
    "POS_ADMIN_READ_TIMEOUT_SECONDS",
    "POS_ADMIN_RETRIES",
    "POS_ADMIN_MAX_CONNECTIONS",
    "POS_ADMIN_VERIFY_SSL",
    "POS_ADMIN_CACHE_TTL_SECONDS",
    "POS_ADMIN_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("POS_ADMIN_API_BASE_URL", BASE_URL)
    monkeypatch.setenv("POS_ADMIN_RETRY_BACKOFF_SECONDS", "0")
    session_dir = tmp_path / "session"
    monkeypatch.setattr("pos_admin_sdk.auth_store.user_data_dir", lambda *args, **kwargs: str(session_dir))
    return session_dir
