"""Service for awarding points and reading the leaderboard."""

from __future__ import annotations

import logging
from typing import Any

from catechism_app.constants.game_constants import GUEST_IDENTITY, LEADERBOARD_SIZE
from catechism_app.constants.storage_constants import USERS_PATH_KEY
from catechism_app.core.document_store import DocumentStore
from catechism_app.core.identity import is_sentinel, user_key
from catechism_app.core.local_state import LocalStateStorage
from catechism_app.core.models import LeaderboardRow

logger = logging.getLogger(__name__)


class ScoringLedger:
    """Per-identity point totals.

    Named identities are credited in the shared store inside a transaction on
    ``users/<key>``, so awards from several devices for the same nickname never
    overwrite each other. Each entry keeps the nickname as entered next to its
    points. Guest points stay in local device storage, one total per guest
    player, and are not ranked; the admin identity earns nothing.
    """

    def __init__(self, store: DocumentStore, local_state: LocalStateStorage | None = None) -> None:
        self._store = store
        self._local_state = local_state

    def award(self, user_id: str | None, points: int, guest_player: str | None = None) -> int:
        """Credit ``points`` to ``user_id`` and return the points actually credited.

        ``guest_player`` picks whose guest total is credited; ``None`` means this device.
        """
        if points < 0:
            raise ValueError("Points must be non-negative.")
        if user_id == GUEST_IDENTITY:
            if self._local_state is None:
                return 0
            self._local_state.add_guest_points(points, guest_player)
            return points
        if is_sentinel(user_id):
            return 0
        entry = self._store.transaction(self._entry_path(user_id), _credit(user_id, points))
        logger.debug("Awarded %d points to %s (total %d)", points, user_id, entry["points"])
        return points

    def points_for(self, user_id: str | None, guest_player: str | None = None) -> int:
        if user_id == GUEST_IDENTITY:
            return self._local_state.guest_points(guest_player) if self._local_state is not None else 0
        if is_sentinel(user_id):
            return 0
        return _as_points(self._store.get(f"{self._entry_path(user_id)}/points", 0))

    def register(self, user_id: str) -> None:
        """Make sure a named identity has a points entry so it appears on the leaderboard."""
        if is_sentinel(user_id):
            return
        self._store.transaction(self._entry_path(user_id), _credit(user_id, 0))

    def leaderboard(self, limit: int = LEADERBOARD_SIZE) -> list[LeaderboardRow]:
        """Return the top ``limit`` identities by points; ties keep store order."""
        users: dict[str, Any] = self._store.get(USERS_PATH_KEY, {}) or {}
        totals = []
        for key, entry in users.items():
            if not isinstance(entry, dict):
                continue
            name = entry.get("name") if isinstance(entry.get("name"), str) else key
            if not is_sentinel(name):
                totals.append((name, _as_points(entry.get("points"))))
        ranked = sorted(totals, key=lambda item: -item[1])
        return [
            LeaderboardRow(rank=rank, user_id=name, points=points)
            for rank, (name, points) in enumerate(ranked[:limit], start=1)
        ]

    @staticmethod
    def _entry_path(user_id: str) -> str:
        return f"{USERS_PATH_KEY}/{user_key(user_id)}"


def _credit(user_id: str, points: int):
    def update(entry: Any) -> dict[str, Any]:
        current = entry if isinstance(entry, dict) else {}
        return {**current, "name": user_id, "points": _as_points(current.get("points")) + points}

    return update


def _as_points(value: Any) -> int:
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError):
        return 0
