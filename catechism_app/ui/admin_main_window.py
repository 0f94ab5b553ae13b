"""Qt main window for the admin console."""

from __future__ import annotations

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from catechism_app.constants.about import (
    APP_ABOUT_TEXT,
    APP_LICENSE,
    APP_NAME,
    APP_VERSION,
    HELP_TEXT,
)
from catechism_app.constants.ui_constants import (
    BUTTON_ABOUT,
    BUTTON_HELP,
    STORE_REFRESH_INTERVAL_MS,
    STUDENT_URL_PLACEHOLDER,
    WINDOW_TITLE,
)
from catechism_app.core.study_manager import StudyManager
from catechism_app.styling.styles import Styles
from catechism_app.ui.components.leaderboard_panel import LeaderboardPanel
from catechism_app.ui.components.question_table_panel import QuestionTablePanel
from catechism_app.ui.dialog_helpers import show_info


class AdminMainWindow(QMainWindow):
    """Unlock management and media links on the left, leaderboard on the right."""

    def __init__(self, study_manager: StudyManager, student_url: str | None = None) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)

        self.study_manager = study_manager
        self.student_url = student_url or STUDENT_URL_PLACEHOLDER

        self._build_ui()
        self._configure_refresh_timer()
        self.setStyleSheet(Styles.get_main_window_style())
        self._refresh_state()

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        header_row = QHBoxLayout()
        self.network_label = QLabel(f"Learners connect to: {self.student_url}", self)
        self.network_label.setWordWrap(True)
        self.network_label.setStyleSheet(Styles.get_url_label_style())
        header_row.addWidget(self.network_label, stretch=1)

        self.about_button = QPushButton(BUTTON_ABOUT, self)
        self.about_button.clicked.connect(self._handle_about)
        header_row.addWidget(self.about_button)

        self.help_button = QPushButton(BUTTON_HELP, self)
        self.help_button.clicked.connect(self._handle_help)
        header_row.addWidget(self.help_button)
        root_layout.addLayout(header_row)

        content_row = QHBoxLayout()
        self.question_panel = QuestionTablePanel(self.study_manager, self)
        content_row.addWidget(self.question_panel, stretch=3)
        self.leaderboard_panel = LeaderboardPanel(self.study_manager, self)
        content_row.addWidget(self.leaderboard_panel, stretch=1)
        root_layout.addLayout(content_row, stretch=1)

    def _configure_refresh_timer(self) -> None:
        self.refresh_timer = QTimer(self)
        self.refresh_timer.setInterval(STORE_REFRESH_INTERVAL_MS)
        self.refresh_timer.timeout.connect(self._refresh_state)
        self.refresh_timer.start()

    def _refresh_state(self) -> None:
        self.question_panel.refresh()
        self.leaderboard_panel.refresh()

    def _handle_about(self) -> None:
        details = f"{APP_NAME} v{APP_VERSION}\nLicense: {APP_LICENSE}\n\n{APP_ABOUT_TEXT}"
        show_info(self, f"About {APP_NAME}", details)

    def _handle_help(self) -> None:
        show_info(self, f"{APP_NAME} Help", HELP_TEXT)
