"""Static metadata describing CatechismQt."""

APP_NAME = "CatechismQt"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "CatechismQt is a catechism learning tool. Learners study unlocked questions "
    "in the browser and practise them with multiple choice, fill-in-the-blank and "
    "flashcard games, while the admin console unlocks new questions over time."
)

HELP_TEXT = (
    "Use 'Unlock Next' to release the next question in catechism order, or tick the "
    "Unlocked column to release questions individually. Paste a YouTube, song or "
    "sermon link into the matching column and press Enter to save it.\n\n"
    "Learners open the student page, pick a nickname (or play as guest) and earn "
    "10 points for every correct multiple choice or fill-in-the-blank answer."
)
