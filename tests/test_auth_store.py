from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from pos_admin_sdk.auth_store import AuthStore
from pos_admin_sdk.models import SessionData, SessionUser


def _session() -> SessionData:
    return SessionData(
        token="jwt-token",
        user=SessionUser(
            email="admin@store.test",
            role="Admin",
            user_id="u-1",
            expires=datetime(2030, 1, 1, tzinfo=timezone.utc),
        ),
        env_name="dev",
    )


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    store = AuthStore(directory=tmp_path)
    store.save(_session())

    loaded = store.load()

    assert loaded is not None
    assert loaded.token == "jwt-token"
    assert loaded.user is not None
    assert loaded.user.user_id == "u-1"
    assert loaded.user.expires == datetime(2030, 1, 1, tzinfo=timezone.utc)


def test_missing_file_loads_none(tmp_path: Path) -> None:
    assert AuthStore(directory=tmp_path).load() is None


def test_corrupt_file_is_cleared(tmp_path: Path) -> None:
    store = AuthStore(directory=tmp_path)
    path = tmp_path / "session.json"
    path.write_text("{not json")

    assert store.load() is None
    assert not path.exists()


def test_schema_invalid_file_is_cleared(tmp_path: Path) -> None:
    store = AuthStore(directory=tmp_path)
    path = tmp_path / "session.json"
    path.write_text('{"user": {"email": "x"}}')

    assert store.load() is None
    assert not path.exists()


def test_default_location_uses_platform_data_dir(_isolated_env: Path) -> None:
    store = AuthStore()
    store.save(_session())
    assert (_isolated_env / "session.json").exists()
    store.clear()
    assert not (_isolated_env / "session.json").exists()
