"""Application entry point for CatechismQt."""

from __future__ import annotations

import socket
import sys

from PySide6.QtWidgets import QApplication, QDialog

from catechism_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from catechism_app.constants.storage_constants import LOCAL_STATE_PATH, QUESTIONS_PATH
from catechism_app.constants.ui_constants import LOAD_FAILED_TITLE
from catechism_app.core.document_store import InMemoryDocumentStore
from catechism_app.core.local_state import LocalStateStorage
from catechism_app.core.question_loader import QuestionLoadError, load_questions_from_file, seed_store
from catechism_app.core.state_sync import mirror_admin_state, restore_admin_state
from catechism_app.core.study_manager import StudyManager
from catechism_app.server.api_server import start_api_server
from catechism_app.ui.admin_login_dialog import AdminLoginDialog
from catechism_app.ui.admin_main_window import AdminMainWindow
from catechism_app.ui.dialog_helpers import show_error
from catechism_app.utils.logging_config import configure_logging


def _determine_student_url(port: int) -> str:
    """Best-effort determination of the local IP for the learner-facing URL."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"http://{ip_address}:{port}/"


def main() -> None:
    """Load the questions, start the API server, and launch the admin console."""
    logger = configure_logging()
    logger.info("Starting CatechismQt…")

    app = QApplication(sys.argv)

    try:
        loaded = load_questions_from_file(QUESTIONS_PATH)
    except QuestionLoadError as exc:
        logger.error("Error loading data: %s", exc)
        show_error(None, LOAD_FAILED_TITLE, str(exc))
        sys.exit(1)

    local_state = LocalStateStorage(LOCAL_STATE_PATH)
    questions, unlocked_ids = restore_admin_state(loaded.questions, local_state)

    store = InMemoryDocumentStore()
    seed_store(store, questions, unlocked_ids)
    mirror_admin_state(store, local_state)

    study_manager = StudyManager(store, local_state=local_state)
    start_api_server(study_manager=study_manager, host=DEFAULT_HOST, port=DEFAULT_PORT)
    student_url = _determine_student_url(DEFAULT_PORT)
    logger.info("Learner page available at %s", student_url)

    if AdminLoginDialog(study_manager).exec() != QDialog.Accepted:
        logger.info("Admin login cancelled; serving learners without the console")
        app.setQuitOnLastWindowClosed(False)
        sys.exit(app.exec())

    window = AdminMainWindow(study_manager=study_manager, student_url=student_url)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
