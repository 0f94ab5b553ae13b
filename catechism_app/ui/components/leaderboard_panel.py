"""Component showing the top point totals."""

from __future__ import annotations

from PySide6.QtWidgets import QGroupBox, QLabel, QListWidget, QVBoxLayout, QWidget

from catechism_app.constants.game_constants import LEADERBOARD_SIZE
from catechism_app.constants.ui_constants import LEADERBOARD_EMPTY_STATE, LEADERBOARD_TITLE
from catechism_app.core.study_manager import StudyManager


class LeaderboardPanel(QGroupBox):
    """Read-only leaderboard, refreshed by the main window timer."""

    def __init__(self, study_manager: StudyManager, parent: QWidget | None = None) -> None:
        super().__init__(LEADERBOARD_TITLE, parent)
        self.study_manager = study_manager
        self._snapshot: list[tuple[str, int]] = []
        self.setObjectName("leaderboardGroup")
        self.setMinimumWidth(240)

        layout = QVBoxLayout()
        self.setLayout(layout)
        self.rows_list = QListWidget(self)
        layout.addWidget(self.rows_list, stretch=1)
        self.empty_label = QLabel(LEADERBOARD_EMPTY_STATE, self)
        layout.addWidget(self.empty_label)

    def refresh(self) -> None:
        rows = self.study_manager.get_leaderboard(LEADERBOARD_SIZE)
        snapshot = [(row.user_id, row.points) for row in rows]
        if snapshot == self._snapshot:
            return
        self._snapshot = snapshot
        self.rows_list.clear()
        for row in rows:
            self.rows_list.addItem(f"{row.rank}. {row.user_id}: {row.points}")
        self.empty_label.setVisible(not rows)
