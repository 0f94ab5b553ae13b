"""Passphrase gate shown before the admin console opens."""

from __future__ import annotations

from PySide6.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from catechism_app.constants.ui_constants import (
    LOGIN_PROMPT,
    LOGIN_REJECTED_MESSAGE,
    LOGIN_WINDOW_TITLE,
)
from catechism_app.core.study_manager import StudyManager
from catechism_app.styling.styles import Styles


class AdminLoginDialog(QDialog):
    """Accepts when the entered PIN matches; a wrong PIN keeps the dialog open."""

    def __init__(self, study_manager: StudyManager, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle(LOGIN_WINDOW_TITLE)
        self.study_manager = study_manager
        self._build_ui()
        self.setStyleSheet(Styles.get_main_window_style())

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        layout.addWidget(QLabel(LOGIN_PROMPT, self))

        self.pin_input = QLineEdit(self)
        self.pin_input.setEchoMode(QLineEdit.Password)
        self.pin_input.returnPressed.connect(self._handle_login)
        layout.addWidget(self.pin_input)

        self.error_label = QLabel("", self)
        self.error_label.setStyleSheet(Styles.get_error_label_style())
        layout.addWidget(self.error_label)

        button_row = QHBoxLayout()
        self.login_button = QPushButton("Login", self)
        self.login_button.setDefault(True)
        self.login_button.clicked.connect(self._handle_login)
        button_row.addWidget(self.login_button)

        self.cancel_button = QPushButton("Cancel", self)
        self.cancel_button.clicked.connect(self.reject)
        button_row.addWidget(self.cancel_button)
        layout.addLayout(button_row)

    def _handle_login(self) -> None:
        if self.study_manager.verify_admin(self.pin_input.text()):
            self.accept()
            return
        self.error_label.setText(LOGIN_REJECTED_MESSAGE)
        self.pin_input.selectAll()
        self.pin_input.setFocus()
