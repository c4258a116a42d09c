from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_data_dir
from pydantic import ValidationError

from .models import SessionData

PRIVATE_FILE_MODE = 0o600


@dataclass
class AuthStore:
    """Token plus cached user, kept between console runs."""

    app_name: str = "pos-admin"
    filename: str = "session.json"
    directory: Path | None = None

    @property
    def path(self) -> Path:
        folder = self.directory or Path(user_data_dir(self.app_name, "POSAdmin"))
        return folder / self.filename

    def save(self, session: SessionData) -> None:
        target = self.path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(session.model_dump_json(indent=2), encoding="utf-8")
        if os.name == "posix":
            target.chmod(PRIVATE_FILE_MODE)

    def load(self) -> SessionData | None:
        """Return the stored session; an unreadable or stale-format file is removed."""
        target = self.path
        if not target.is_file():
            return None
        try:
            return SessionData.model_validate_json(target.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError):
            self.clear()
            return None

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
