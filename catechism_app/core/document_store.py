"""Document store capability interface and its in-process implementation.

The application only needs a handful of operations from its backing store:
subscribe to a path, read a path, overwrite a path, and apply an atomic
read-modify-write to a path. ``DocumentStore`` names that surface so the
question pool and the scoring ledger can be driven by any store offering it,
and ``InMemoryDocumentStore`` provides it for a single process.

Paths are slash separated (``users/alice/points``). A subscriber to a path is
notified when that path, one of its ancestors or one of its descendants is
written, and receives the current value at its own path.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from itertools import count
from threading import RLock
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[Any], None]


@dataclass(slots=True, frozen=True)
class SubscriptionToken:
    """Handle returned by ``subscribe``; pass it to ``unsubscribe`` to stop updates."""

    subscription_id: int
    path: str


class DocumentStore(Protocol):
    def subscribe(self, path: str, on_change: ChangeCallback) -> SubscriptionToken: ...

    def unsubscribe(self, token: SubscriptionToken) -> None: ...

    def get(self, path: str, default: Any = None) -> Any: ...

    def write(self, path: str, value: Any) -> None: ...

    def transaction(self, path: str, update: Callable[[Any], Any]) -> Any: ...

    def atomic_increment(self, path: str, delta: int) -> int: ...


def split_path(path: str) -> tuple[str, ...]:
    parts = tuple(part for part in path.strip("/").split("/") if part)
    if not parts:
        raise ValueError("Store path must not be empty.")
    return parts


def _is_related(changed: tuple[str, ...], watched: tuple[str, ...]) -> bool:
    shortest = min(len(changed), len(watched))
    return changed[:shortest] == watched[:shortest]


class InMemoryDocumentStore:
    """Thread-safe nested-dict document tree with push-style subscriptions."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._lock = RLock()
        self._root: dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self._subscribers: dict[int, tuple[tuple[str, ...], ChangeCallback]] = {}
        self._ids = count(1)

    # --- Subscriptions ---

    def subscribe(self, path: str, on_change: ChangeCallback) -> SubscriptionToken:
        """Register ``on_change`` for ``path`` and deliver the current value immediately."""
        parts = split_path(path)
        with self._lock:
            subscription_id = next(self._ids)
            self._subscribers[subscription_id] = (parts, on_change)
            snapshot = self._read(parts)
        on_change(snapshot)
        return SubscriptionToken(subscription_id=subscription_id, path=path)

    def unsubscribe(self, token: SubscriptionToken) -> None:
        with self._lock:
            self._subscribers.pop(token.subscription_id, None)

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    # --- Reads and writes ---

    def get(self, path: str, default: Any = None) -> Any:
        with self._lock:
            value = self._read(split_path(path))
        return default if value is None else value

    def write(self, path: str, value: Any) -> None:
        """Overwrite ``path`` with ``value``; ``None`` removes the entry."""
        parts = split_path(path)
        with self._lock:
            self._assign(parts, copy.deepcopy(value))
            pending = self._collect_notifications(parts)
        self._notify(pending)

    def transaction(self, path: str, update: Callable[[Any], Any]) -> Any:
        """Atomically replace the value at ``path`` with ``update(current)``."""
        parts = split_path(path)
        with self._lock:
            new_value = update(self._read(parts))
            self._assign(parts, copy.deepcopy(new_value))
            pending = self._collect_notifications(parts)
        self._notify(pending)
        return new_value

    def atomic_increment(self, path: str, delta: int) -> int:
        return self.transaction(path, lambda current: int(current or 0) + delta)

    # --- Internals ---

    def _read(self, parts: tuple[str, ...]) -> Any:
        node: Any = self._root
        for part in parts:
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return copy.deepcopy(node)

    def _assign(self, parts: tuple[str, ...], value: Any) -> None:
        node = self._root
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        if value is None:
            node.pop(parts[-1], None)
        else:
            node[parts[-1]] = value

    def _collect_notifications(self, changed: tuple[str, ...]) -> list[tuple[ChangeCallback, Any]]:
        return [
            (callback, self._read(watched))
            for watched, callback in self._subscribers.values()
            if _is_related(changed, watched)
        ]

    @staticmethod
    def _notify(pending: list[tuple[ChangeCallback, Any]]) -> None:
        for callback, value in pending:
            try:
                callback(value)
            except Exception:
                logger.exception("Store subscriber raised while handling a change")
