from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_data_dir

TOKEN_KEY = "admin_token"


class TokenStore:
    """Persists the admin bearer token under a fixed key in a small JSON file."""

    def __init__(self, path: str | Path | None = None, app_name: str = "loyalty-admin") -> None:
        self._path = Path(path) if path else Path(user_data_dir(app_name, "LoyaltyAdmin")) / "session.json"
        self._token: str | None = None
        self._loaded = False

    @property
    def path(self) -> Path:
        return self._path

    def get_token(self) -> str | None:
        if not self._loaded:
            self._token = self._read()
            self._loaded = True
        return self._token

    def set_token(self, token: str) -> None:
        self._token = token
        self._loaded = True
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps({TOKEN_KEY: token}), encoding="utf-8")
        try:
            self._path.chmod(0o600)
        except OSError:
            pass

    def clear(self) -> None:
        self._token = None
        self._loaded = True
        if self._path.exists():
            self._path.unlink()

    def _read(self) -> str | None:
        if not self._path.exists():
            return None
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (ValueError, OSError):
            self.clear()
            return None
        token = payload.get(TOKEN_KEY) if isinstance(payload, dict) else None
        return token if isinstance(token, str) and token else None


class MemoryTokenStore(TokenStore):
    def __init__(self, token: str | None = None) -> None:
        self._token = token
        self._loaded = True

    @property
    def path(self) -> Path:
        raise AttributeError("MemoryTokenStore has no backing file")

    def set_token(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None
