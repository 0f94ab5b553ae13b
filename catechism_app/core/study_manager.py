"""Business logic shared between the admin console and the learner API."""

from __future__ import annotations

import random
from dataclasses import dataclass
from threading import Lock
from typing import Callable, TypeVar

from catechism_app.constants.game_constants import (
    GUEST_IDENTITY,
    LEADERBOARD_SIZE,
    POINTS_PER_CORRECT_ANSWER,
)
from catechism_app.core.document_store import DocumentStore
from catechism_app.core.identity import normalize_nickname, verify_admin_passphrase
from catechism_app.core.local_state import LocalStateStorage
from catechism_app.core.models import GameMode, LeaderboardRow, Question, SelectionResult
from catechism_app.core.services.game_session import (
    FillBlankSession,
    FlashcardSession,
    GameSession,
    MultipleChoiceSession,
    create_session,
)
from catechism_app.core.services.question_pool import QuestionPool
from catechism_app.core.services.scoring_ledger import ScoringLedger
from catechism_app.core.shuffle import RandomSource

LOCAL_PLAYER_ID = "local"

S = TypeVar("S", bound=GameSession)
T = TypeVar("T")


class PoolChangedError(RuntimeError):
    """Raised when a learner acts on a session whose unlocked pool has since changed."""


@dataclass(slots=True)
class PlayerState:
    """Identity and active game for one learner (a browser, or the local device)."""

    player_id: str
    identity: str | None = None
    session: GameSession | None = None
    pool_signature: tuple[int, ...] = ()


class StudyManager:
    """Facade for the study services: QuestionPool, ScoringLedger and game sessions."""

    def __init__(
        self,
        store: DocumentStore,
        local_state: LocalStateStorage | None = None,
        rng_factory: Callable[[], RandomSource] | None = None,
        admin_passphrase: str | None = None,
    ) -> None:
        self._lock = Lock()
        self._store = store
        self._local_state = local_state
        self._rng_factory = rng_factory or random.Random
        self._admin_passphrase = admin_passphrase

        self._pool = QuestionPool(store)
        self._pool.open()
        self._ledger = ScoringLedger(store, local_state)
        self._players: dict[str, PlayerState] = {}

        if local_state is not None:
            remembered = local_state.remembered_identity()
            if remembered:
                self._players[LOCAL_PLAYER_ID] = PlayerState(LOCAL_PLAYER_ID, identity=remembered)

    def close(self) -> None:
        self._pool.close()

    # --- Question pool delegation ---

    def get_questions(self) -> list[Question]:
        return self._pool.get_questions()

    def get_learn_cards(self) -> list[Question]:
        return self._pool.get_eligible_questions()

    def get_unlocked_ids(self) -> set[int]:
        return self._pool.get_unlocked_ids()

    def get_pool_version(self) -> int:
        return self._pool.get_version()

    def verify_admin(self, passphrase: str) -> bool:
        if self._admin_passphrase is None:
            return verify_admin_passphrase(passphrase)
        return verify_admin_passphrase(passphrase, self._admin_passphrase)

    def unlock_next(self) -> Question | None:
        return self._pool.unlock_next()

    def unlock_all(self) -> None:
        self._pool.unlock_all()

    def lock_all(self) -> None:
        self._pool.lock_all()

    def set_unlocked(self, question_id: int, unlocked: bool) -> None:
        self._pool.set_unlocked(question_id, unlocked)

    def toggle_unlocked(self, question_id: int) -> bool:
        return self._pool.toggle_unlocked(question_id)

    def set_media_link(self, question_id: int, kind: str, url: str | None) -> Question:
        return self._pool.set_media_link(question_id, kind, url)

    # --- Identity ---

    def get_identity(self, player_id: str) -> str | None:
        with self._lock:
            return self._player(player_id).identity

    def choose_identity(self, player_id: str, nickname: str | None) -> str | None:
        """Adopt ``nickname`` for the player; an empty nickname leaves things unchanged."""
        cleaned = normalize_nickname(nickname)
        with self._lock:
            player = self._player(player_id)
            if cleaned is None:
                return player.identity
            self._ledger.register(cleaned)
            player.identity = cleaned
        self._remember(player_id, cleaned)
        return cleaned

    def play_as_guest(self, player_id: str) -> str:
        with self._lock:
            self._player(player_id).identity = GUEST_IDENTITY
        self._remember(player_id, GUEST_IDENTITY)
        return GUEST_IDENTITY

    def get_points(self, player_id: str) -> int:
        with self._lock:
            return self._points(self._player(player_id))

    def get_leaderboard(self, limit: int = LEADERBOARD_SIZE) -> list[LeaderboardRow]:
        return self._ledger.leaderboard(limit)

    def _remember(self, player_id: str, identity: str) -> None:
        if player_id == LOCAL_PLAYER_ID and self._local_state is not None:
            self._local_state.remember_identity(identity)

    # --- Game sessions ---

    def start_game(self, player_id: str, mode: GameMode) -> GameSession:
        """Begin a fresh session in ``mode``, discarding whatever the player was playing."""
        with self._lock:
            player = self._player(player_id)
            player.session = None
            questions = self._pool.get_eligible_questions()
            session = create_session(
                mode,
                questions,
                rng=self._rng_factory(),
                on_correct=self._award_callback(player),
            )
            session.start()
            player.session = session
            player.pool_signature = tuple(q.id for q in questions)
            return session

    def get_game(self, player_id: str, mode: GameMode) -> GameSession:
        """Return the player's session in ``mode``, restarting it if the unlocked pool changed."""
        with self._lock:
            player = self._player(player_id)
            session = self._session(player, mode)
            if not self._is_stale(player):
                return session
        return self.start_game(player_id, mode)

    def render_game(self, player_id: str, mode: GameMode, render: Callable[[GameSession, int], T]) -> T:
        """Call ``render(session, points)`` for the current session while holding the lock."""
        with self._lock:
            player = self._player(player_id)
            session = self._session(player, mode)
            return render(session, self._points(player))

    def select_option(self, player_id: str, option: str) -> SelectionResult:
        return self._act(player_id, MultipleChoiceSession, lambda s: s.select(option))

    def fill_word(self, player_id: str, word: str) -> int | None:
        return self._act(player_id, FillBlankSession, lambda s: s.fill_word(word))

    def clear_slot(self, player_id: str, position: int) -> None:
        self._act(player_id, FillBlankSession, lambda s: s.clear_slot(position))

    def check_fill_answer(self, player_id: str) -> SelectionResult:
        return self._act(player_id, FillBlankSession, lambda s: s.check_answer())

    def toggle_flashcard(self, player_id: str) -> bool:
        return self._act(player_id, FlashcardSession, lambda s: s.toggle_answer())

    def advance(self, player_id: str, mode: GameMode) -> GameSession:
        """Move to the next question; after a pool change, start over on the new pool instead."""
        with self._lock:
            player = self._player(player_id)
            session = self._session(player, mode)
            if not self._is_stale(player):
                session.advance()
                return session
        return self.start_game(player_id, mode)

    def restart(self, player_id: str, mode: GameMode) -> GameSession:
        with self._lock:
            self._session(self._player(player_id), mode)
        return self.start_game(player_id, mode)

    def end_game(self, player_id: str) -> None:
        with self._lock:
            self._player(player_id).session = None

    def _act(self, player_id: str, session_type: type[S], action: Callable[[S], T]) -> T:
        """Run ``action`` on the session the learner is looking at, never on a restarted one."""
        with self._lock:
            player = self._player(player_id)
            session = self._session(player, session_type.mode)
            if not isinstance(session, session_type):
                raise LookupError(f"No {session_type.mode.value} game in progress.")
            if self._is_stale(player):
                raise PoolChangedError("The unlocked questions changed; reload the game to continue.")
            return action(session)

    def _session(self, player: PlayerState, mode: GameMode) -> GameSession:
        session = player.session
        if session is None or session.mode is not mode:
            raise LookupError(f"No {mode.value} game in progress.")
        return session

    def _is_stale(self, player: PlayerState) -> bool:
        return player.pool_signature != tuple(q.id for q in self._pool.get_eligible_questions())

    def _award_callback(self, player: PlayerState) -> Callable[[Question], int]:
        def award(_question: Question) -> int:
            return self._ledger.award(player.identity, POINTS_PER_CORRECT_ANSWER, self._guest_key(player))

        return award

    def _points(self, player: PlayerState) -> int:
        return self._ledger.points_for(player.identity, self._guest_key(player))

    @staticmethod
    def _guest_key(player: PlayerState) -> str | None:
        return None if player.player_id == LOCAL_PLAYER_ID else player.player_id

    def _player(self, player_id: str) -> PlayerState:
        player = self._players.get(player_id)
        if player is None:
            player = PlayerState(player_id=player_id)
            self._players[player_id] = player
        return player
