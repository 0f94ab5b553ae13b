"""Component listing every question with its unlock state and media links."""

from __future__ import annotations

from functools import partial

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QCheckBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from catechism_app.constants.game_constants import MEDIA_LINK_KINDS
from catechism_app.constants.ui_constants import (
    ALL_UNLOCKED_MESSAGE,
    BUTTON_LOCK_ALL,
    BUTTON_UNLOCK_ALL,
    BUTTON_UNLOCK_NEXT,
    LINK_PLACEHOLDER,
    TABLE_HEADERS,
    UNLOCKED_COUNT_TEMPLATE,
)
from catechism_app.core.models import Question
from catechism_app.core.study_manager import StudyManager
from catechism_app.ui.dialog_helpers import confirm_lock_all, show_error, show_info

_UNLOCKED_COLUMN = 2
_FIRST_LINK_COLUMN = 3


class QuestionTablePanel(QWidget):
    """UI component for unlocking questions and editing their links."""

    def __init__(self, study_manager: StudyManager, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.study_manager = study_manager
        self._rendered_version: int | None = None
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        button_row = QHBoxLayout()
        self.unlock_next_button = QPushButton(BUTTON_UNLOCK_NEXT, self)
        self.unlock_next_button.setObjectName("unlockNextButton")
        self.unlock_next_button.clicked.connect(self._handle_unlock_next)
        button_row.addWidget(self.unlock_next_button)

        self.unlock_all_button = QPushButton(BUTTON_UNLOCK_ALL, self)
        self.unlock_all_button.clicked.connect(self._handle_unlock_all)
        button_row.addWidget(self.unlock_all_button)

        self.lock_all_button = QPushButton(BUTTON_LOCK_ALL, self)
        self.lock_all_button.clicked.connect(self._handle_lock_all)
        button_row.addWidget(self.lock_all_button)
        button_row.addStretch(1)

        self.count_label = QLabel("", self)
        button_row.addWidget(self.count_label)
        layout.addLayout(button_row)

        self.table = QTableWidget(0, len(TABLE_HEADERS), self)
        self.table.setHorizontalHeaderLabels(list(TABLE_HEADERS))
        self.table.setAlternatingRowColors(True)
        self.table.verticalHeader().setVisible(False)
        header = self.table.horizontalHeader()
        header.setSectionResizeMode(1, QHeaderView.Stretch)
        layout.addWidget(self.table, stretch=1)

    def refresh(self, force: bool = False) -> None:
        version = self.study_manager.get_pool_version()
        if not force and version == self._rendered_version:
            return
        self._rendered_version = version
        questions = self.study_manager.get_questions()
        unlocked_ids = self.study_manager.get_unlocked_ids()

        self.table.setRowCount(len(questions))
        for row, question in enumerate(questions):
            self._populate_row(row, question, question.id in unlocked_ids)

        self.count_label.setText(
            UNLOCKED_COUNT_TEMPLATE.format(unlocked=len(unlocked_ids), total=len(questions))
        )

    def _populate_row(self, row: int, question: Question, unlocked: bool) -> None:
        id_item = QTableWidgetItem(str(question.id))
        id_item.setFlags(id_item.flags() & ~Qt.ItemIsEditable)
        self.table.setItem(row, 0, id_item)

        question_item = QTableWidgetItem(question.question)
        question_item.setToolTip(question.question)
        question_item.setFlags(question_item.flags() & ~Qt.ItemIsEditable)
        self.table.setItem(row, 1, question_item)

        checkbox = QCheckBox(self.table)
        checkbox.setChecked(unlocked)
        checkbox.toggled.connect(partial(self._handle_unlock_toggled, question.id))
        self.table.setCellWidget(row, _UNLOCKED_COLUMN, checkbox)

        for offset, kind in enumerate(MEDIA_LINK_KINDS):
            editor = QLineEdit(self.table)
            editor.setPlaceholderText(LINK_PLACEHOLDER)
            editor.setText(getattr(question, kind) or "")
            editor.editingFinished.connect(partial(self._handle_link_edited, question.id, kind, editor))
            self.table.setCellWidget(row, _FIRST_LINK_COLUMN + offset, editor)

    def _handle_unlock_toggled(self, question_id: int, checked: bool) -> None:
        try:
            self.study_manager.set_unlocked(question_id, checked)
        except KeyError as exc:
            show_error(self, "Unlock failed", str(exc))
        self.refresh()

    def _handle_link_edited(self, question_id: int, kind: str, editor: QLineEdit) -> None:
        text = editor.text().strip()
        try:
            current = getattr(self._find_question(question_id), kind) or ""
            if text == current:
                return
            self.study_manager.set_media_link(question_id, kind, text or None)
        except (KeyError, ValueError) as exc:
            show_error(self, "Link not saved", str(exc))

    def _find_question(self, question_id: int) -> Question:
        for question in self.study_manager.get_questions():
            if question.id == question_id:
                return question
        raise KeyError(f"Unknown question id {question_id}")

    def _handle_unlock_next(self) -> None:
        if self.study_manager.unlock_next() is None:
            show_info(self, BUTTON_UNLOCK_NEXT, ALL_UNLOCKED_MESSAGE)
        self.refresh()

    def _handle_unlock_all(self) -> None:
        self.study_manager.unlock_all()
        self.refresh()

    def _handle_lock_all(self) -> None:
        if confirm_lock_all(self, len(self.study_manager.get_unlocked_ids())):
            self.study_manager.lock_all()
            self.refresh()
