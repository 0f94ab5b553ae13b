"""Game-related constants shared across the core, API and UI layers."""

DEFAULT_OPTION_COUNT: int = 4
DEFAULT_BLANK_COUNT: int = 3
# Decoy words must be longer than this many characters.
DECOY_MIN_EXCLUSIVE_LENGTH: int = 3
POINTS_PER_CORRECT_ANSWER: int = 10
LEADERBOARD_SIZE: int = 10

GUEST_IDENTITY: str = "guest"
ADMIN_IDENTITY: str = "admin"

MEDIA_LINK_KINDS: tuple[str, ...] = ("youtube", "song", "sermon")
