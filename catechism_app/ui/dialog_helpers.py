"""Message boxes shared by the admin console widgets."""

from __future__ import annotations

from PySide6.QtWidgets import QMessageBox, QWidget


def confirm_lock_all(parent: QWidget, unlocked_count: int) -> bool:
    """Ask before hiding every unlocked question from learners.

    Returns:
        True if the admin confirmed; nothing needs confirming when no question is unlocked.
    """
    if unlocked_count <= 0:
        return False
    reply = QMessageBox.question(
        parent,
        "Lock All Questions",
        f"{unlocked_count} unlocked question(s) will disappear from Learn and Games "
        "for every learner, and games in progress restart. Continue?",
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return reply == QMessageBox.Yes


def show_error(parent: QWidget | None, title: str, message: str) -> None:
    QMessageBox.critical(parent, title, message)


def show_info(parent: QWidget, title: str, message: str) -> None:
    box = QMessageBox(QMessageBox.Information, title, message, QMessageBox.Ok, parent)
    box.exec()
