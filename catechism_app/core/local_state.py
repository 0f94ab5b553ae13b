"""Device-local key/value state kept in a small JSON file.

Remembers the identity chosen on this device and the points each guest has
accumulated. A missing or unreadable file never stops the application: it
is treated as empty state.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from threading import Lock
from typing import Any

from catechism_app.constants.storage_constants import (
    LOCAL_STATE_GUEST_POINTS_KEY,
    LOCAL_STATE_IDENTITY_KEY,
    LOCAL_STATE_PLAYER_GUEST_POINTS_KEY,
)

logger = logging.getLogger(__name__)


class LocalStateStorage:
    """Load/save a flat JSON object at ``path``."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = Lock()

    @property
    def path(self) -> Path:
        return self._path

    def load_state(self) -> dict[str, Any]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            logger.warning("Failed to read saved state from %s: %s", self._path, exc)
            return {}
        try:
            state = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as exc:
            logger.warning("Failed to parse saved state in %s: %s", self._path, exc)
            return {}
        if not isinstance(state, dict):
            logger.warning("Ignoring saved state in %s: expected a JSON object", self._path)
            return {}
        return state

    def save_state(self, state: dict[str, Any]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(state, indent=2), encoding="utf-8")
        except OSError as exc:
            logger.warning("Failed to save state to %s: %s", self._path, exc)

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self.load_state().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            state = self.load_state()
            if value is None:
                state.pop(key, None)
            else:
                state[key] = value
            self.save_state(state)

    # --- Identity and guest points ---

    def remembered_identity(self) -> str | None:
        identity = self.get(LOCAL_STATE_IDENTITY_KEY)
        return identity if isinstance(identity, str) and identity else None

    def remember_identity(self, identity: str | None) -> None:
        self.set(LOCAL_STATE_IDENTITY_KEY, identity)

    def guest_points(self, player_id: str | None = None) -> int:
        """Guest total for this device, or for the browser ``player_id`` when one is given."""
        with self._lock:
            return _guest_total(self.load_state(), player_id)

    def add_guest_points(self, points: int, player_id: str | None = None) -> int:
        with self._lock:
            state = self.load_state()
            total = _guest_total(state, player_id) + points
            if player_id is None:
                state[LOCAL_STATE_GUEST_POINTS_KEY] = total
            else:
                by_player = state.get(LOCAL_STATE_PLAYER_GUEST_POINTS_KEY)
                if not isinstance(by_player, dict):
                    by_player = {}
                by_player[player_id] = total
                state[LOCAL_STATE_PLAYER_GUEST_POINTS_KEY] = by_player
            self.save_state(state)
            return total


def _guest_total(state: dict[str, Any], player_id: str | None) -> int:
    if player_id is None:
        value = state.get(LOCAL_STATE_GUEST_POINTS_KEY, 0)
    else:
        by_player = state.get(LOCAL_STATE_PLAYER_GUEST_POINTS_KEY)
        value = by_player.get(player_id, 0) if isinstance(by_player, dict) else 0
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0
