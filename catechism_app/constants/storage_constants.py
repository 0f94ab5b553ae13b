"""Storage paths, document store keys and the admin passphrase."""

import os
from pathlib import Path

DEFAULT_QUESTIONS_PATH: Path = Path(__file__).resolve().parent.parent / "data" / "catechism.json"
QUESTIONS_PATH: Path = Path(os.environ.get("CATECHISM_QUESTIONS_PATH", str(DEFAULT_QUESTIONS_PATH)))

LOCAL_STATE_PATH: Path = Path(
    os.environ.get("CATECHISM_STATE_PATH", str(Path.home() / ".catechismqt" / "state.json"))
)
LOCAL_STATE_IDENTITY_KEY: str = "identity"
LOCAL_STATE_GUEST_POINTS_KEY: str = "guestPoints"
LOCAL_STATE_PLAYER_GUEST_POINTS_KEY: str = "guestPointsByPlayer"
LOCAL_STATE_UNLOCKED_IDS_KEY: str = "unlockedIds"
LOCAL_STATE_MEDIA_LINKS_KEY: str = "mediaLinks"

QUESTIONS_PATH_KEY: str = "questions"
UNLOCKED_IDS_PATH_KEY: str = "unlockedIds"
USERS_PATH_KEY: str = "users"

ADMIN_PASSPHRASE: str = os.environ.get("CATECHISM_ADMIN_PASSPHRASE", "godfirst")
