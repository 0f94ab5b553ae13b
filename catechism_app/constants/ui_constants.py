"""Qt UI constants used across the admin console widgets."""

WINDOW_TITLE: str = "CatechismQt Admin Console"
LOGIN_WINDOW_TITLE: str = "Admin Login"
LOGIN_PROMPT: str = "Enter Admin PIN"
LOGIN_REJECTED_MESSAGE: str = "Invalid PIN"
STUDENT_URL_PLACEHOLDER: str = "http://<admin-ip>:8000/"
STORE_REFRESH_INTERVAL_MS: int = 1000

BUTTON_UNLOCK_NEXT: str = "Unlock Next"
BUTTON_UNLOCK_ALL: str = "Unlock All"
BUTTON_LOCK_ALL: str = "Lock All"
BUTTON_ABOUT: str = "About"
BUTTON_HELP: str = "Help"

TABLE_HEADERS: tuple[str, ...] = ("#", "Question", "Unlocked", "YouTube Link", "Song Link", "Sermon Link")
LINK_PLACEHOLDER: str = "Paste link here"

UNLOCKED_COUNT_TEMPLATE: str = "{unlocked} of {total} question(s) unlocked"
LEADERBOARD_TITLE: str = "Leaderboard"
LEADERBOARD_EMPTY_STATE: str = "No points awarded yet."
ALL_UNLOCKED_MESSAGE: str = "Every question is already unlocked."
LOAD_FAILED_TITLE: str = "Error loading data"
