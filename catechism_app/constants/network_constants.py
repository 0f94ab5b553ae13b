"""Network configuration constants for the catechism application."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
PLAYER_COOKIE_NAME: str = "catechismqt_player"
PLAYER_COOKIE_MAX_AGE_SECONDS: int = 60 * 60 * 24 * 30
